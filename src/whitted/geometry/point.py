"""Point primitive, used as the geometry of point light sources."""

from __future__ import annotations

from typing import Sequence

from src.whitted.core.interval import Interval
from src.whitted.core.ray import Hit, Ray
from src.whitted.core.vector import INFINITY, Vec3, as_vec3, dot
from src.whitted.geometry.base import Primitive


class Point(Primitive):
    """A single position in space. It is never hit by rays and has no inside."""

    plugin_name = "point"

    def __init__(self, position: Sequence[float] | Vec3) -> None:
        super().__init__()
        self.position = as_vec3(position)

    def intersect(
        self, ray: Ray, limit: float = INFINITY, ignore: int | None = None
    ) -> Hit | None:
        return None

    def inside(self, point: Vec3) -> bool:
        return False

    def directional_bound(self, direction: Vec3) -> Interval:
        return Interval.point(dot(direction, self.position) / dot(direction, direction))

    def __repr__(self) -> str:
        p = self.position
        return f"Point(({p[0]:g}, {p[1]:g}, {p[2]:g}))"
