"""Render configuration.

Example:
    >>> from src.whitted.config import RenderConfig
    >>> config = RenderConfig(max_tree_depth=6, shadow_samples=8)
    >>> config.max_tree_depth
    6
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ToneMapMethod = Literal["clamp", "reinhard", "exposure"]

DEFAULT_MAX_TREE_DEPTH = 4
DEFAULT_ATTENUATION = (0.0, 0.0, 0.02)


@dataclass
class RenderConfig:
    """Parameters shared by the scene, shaders and rasterizer.

    Attributes:
        max_tree_depth: Rays with a generation above this value are not traced.
        samples_per_pixel: Primary rays per pixel (1 = pixel centre only).
        shadow_samples: Shadow rays per light (1 = hard shadows).
        shadow_jitter: Half-width of the angular jitter for soft shadows.
        attenuation: Light falloff coefficients (a, b, c) in 1/(a + b*d + c*d^2).
        surface_epsilon: Offset along the normal for secondary ray origins.
        tone_map: Tone mapping used when writing the image.
        gamma: Display gamma applied after tone mapping.
        seed: Seed for the jitter random number generators.
    """

    max_tree_depth: int = DEFAULT_MAX_TREE_DEPTH
    samples_per_pixel: int = 1
    shadow_samples: int = 1
    shadow_jitter: float = 0.05
    attenuation: tuple[float, float, float] = DEFAULT_ATTENUATION
    surface_epsilon: float = 1.0e-6
    tone_map: ToneMapMethod = "clamp"
    gamma: float = 1.0
    seed: int | None = None

    def __post_init__(self) -> None:
        if self.max_tree_depth < 0:
            raise ValueError(f"max_tree_depth must be >= 0, got {self.max_tree_depth}")
        if self.samples_per_pixel < 1:
            raise ValueError(
                f"samples_per_pixel must be >= 1, got {self.samples_per_pixel}"
            )
        if self.shadow_samples < 1:
            raise ValueError(f"shadow_samples must be >= 1, got {self.shadow_samples}")
        if len(self.attenuation) != 3:
            raise ValueError("attenuation needs exactly three coefficients")
        if self.surface_epsilon <= 0.0:
            raise ValueError("surface_epsilon must be positive")
        if self.gamma <= 0.0:
            raise ValueError(f"gamma must be positive, got {self.gamma}")
