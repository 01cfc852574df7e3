"""Surface material parameters."""

from __future__ import annotations

from dataclasses import dataclass, field, fields

import numpy as np

from src.whitted.core.color import WHITE, Color, as_color, channel_sum, color, is_black

# Channel sums at or below this count as "no reflection" / "no transmission"
CONTRIBUTION_EPSILON = 1.0e-10


@dataclass(eq=False)
class Material:
    """Phong-style material with mirror reflection and transmission.

    Defaults are the scene description defaults: white diffuse and specular,
    everything else black, exponent and refractive index zero.

    Attributes:
        diffuse: Diffuse reflectance (also the flat color without a shader).
        specular: Specular reflectance for the Phong highlight.
        ambient: Ambient light scale, multiplied by the diffuse color.
        emission: Emitted radiance; non-black makes the object a light.
        reflectivity: Per-channel mirror reflection weight.
        translucency: Per-channel transmission weight.
        phong_exp: Phong exponent of the highlight.
        ref_index: Refractive index of the material.
    """

    diffuse: Color = field(default_factory=lambda: WHITE.copy())
    specular: Color = field(default_factory=lambda: WHITE.copy())
    ambient: Color = field(default_factory=color)
    emission: Color = field(default_factory=color)
    reflectivity: Color = field(default_factory=color)
    translucency: Color = field(default_factory=color)
    phong_exp: float = 0.0
    ref_index: float = 0.0

    def __post_init__(self) -> None:
        for name in ("diffuse", "specular", "ambient", "emission", "reflectivity", "translucency"):
            setattr(self, name, as_color(getattr(self, name)))
        self.phong_exp = float(self.phong_exp)
        self.ref_index = float(self.ref_index)

    @property
    def is_emitter(self) -> bool:
        return not is_black(self.emission)

    @property
    def is_reflective(self) -> bool:
        return channel_sum(self.reflectivity) > CONTRIBUTION_EPSILON

    @property
    def is_translucent(self) -> bool:
        return channel_sum(self.translucency) > CONTRIBUTION_EPSILON

    def copy(self) -> Material:
        return Material(**{f.name: getattr(self, f.name) for f in fields(self)})

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Material):
            return NotImplemented
        return all(
            np.array_equal(getattr(self, f.name), getattr(other, f.name))
            for f in fields(self)
        )

    __hash__ = None  # type: ignore[assignment]
