"""Sphere primitive.

Intersection solves ``|O + sD - C|^2 = r^2`` with the cancellation-free
quadratic formula and keeps the smaller positive root, falling back to the
larger one when the ray starts inside the sphere.

Example:
    >>> from src.whitted.core.ray import Ray
    >>> from src.whitted.geometry.sphere import Sphere
    >>> hit = Sphere((0, 0, 0), 1.0).intersect(Ray((0, 0, 5), (0, 0, -1)))
    >>> hit.distance
    4.0
"""

from __future__ import annotations

from typing import Sequence

from src.whitted.core.interval import Interval
from src.whitted.core.polynomial import solve_quadratic
from src.whitted.core.ray import Hit, Ray
from src.whitted.core.vector import INFINITY, Vec3, as_vec3, dot, length, length_squared
from src.whitted.geometry.base import Primitive


class Sphere(Primitive):
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere.
        radius: The radius of the sphere (positive).
    """

    plugin_name = "sphere"

    def __init__(self, center: Sequence[float] | Vec3, radius: float) -> None:
        super().__init__()
        if radius <= 0.0:
            raise ValueError(f"Sphere radius must be positive, got {radius}")
        self.center = as_vec3(center)
        self.radius = float(radius)
        self._radius_sq = self.radius * self.radius

    def intersect(
        self, ray: Ray, limit: float = INFINITY, ignore: int | None = None
    ) -> Hit | None:
        a = ray.origin - self.center
        roots = solve_quadratic(1.0, 2.0 * dot(a, ray.direction), dot(a, a) - self._radius_sq)

        s = None
        for root in roots:
            if root > 0.0:
                s = root
                break
        if s is None or s >= limit:
            return None

        point = ray.at(s)
        return Hit(s, point, (point - self.center) / self.radius, self)

    def inside(self, point: Vec3) -> bool:
        return length_squared(point - self.center) <= self._radius_sq

    def directional_bound(self, direction: Vec3) -> Interval:
        norm = length(direction)
        d = dot(direction, self.center) / norm
        return Interval(d - self.radius, d + self.radius) / norm

    def __repr__(self) -> str:
        c = self.center
        return f"Sphere(center=({c[0]:g}, {c[1]:g}, {c[2]:g}), radius={self.radius:g})"
