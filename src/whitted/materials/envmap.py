"""Environment maps: the color seen by rays that leave the scene."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import ClassVar, Sequence

from src.whitted.core.color import Color, as_color
from src.whitted.core.ray import Ray
from src.whitted.core.vector import Vec3, Z_AXIS, as_vec3, dot, unit


class Envmap(ABC):
    """Maps an escaping ray to a color."""

    plugin_name: ClassVar[str]

    @abstractmethod
    def shade(self, ray: Ray) -> Color:
        """Return the color seen along ``ray``."""


class ConstantEnvmap(Envmap):
    """The same color in every direction."""

    plugin_name = "basic_envmap"

    def __init__(self, background: Sequence[float] | Color) -> None:
        self.background = as_color(background)

    def shade(self, ray: Ray) -> Color:
        return self.background.copy()


class GradientEnvmap(Envmap):
    """Sky gradient blending from ``horizon`` to ``zenith``.

    The blend weight is ``(1 + dot(direction, up)) / 2``, so rays pointing
    straight down see the horizon color and rays pointing up see the zenith.
    """

    plugin_name = "gradient_envmap"

    def __init__(
        self,
        horizon: Sequence[float] | Color,
        zenith: Sequence[float] | Color,
        up: Sequence[float] | Vec3 = Z_AXIS,
    ) -> None:
        self.horizon = as_color(horizon)
        self.zenith = as_color(zenith)
        self.up = unit(as_vec3(up))
        if not self.up.any():
            raise ValueError("Gradient up vector must be non-zero")

    def shade(self, ray: Ray) -> Color:
        t = 0.5 * (dot(ray.direction, self.up) + 1.0)
        return (1.0 - t) * self.horizon + t * self.zenith
