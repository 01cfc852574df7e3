"""Planar quadrilateral primitive.

The normal is the negated, normalised sum of the fan cross products about the
centroid, which also gives the area as half the length of that sum. A plane
point is inside the quad iff it lies on the inner side of all four edges.

Example:
    >>> from src.whitted.geometry.quad import Quad
    >>> floor = Quad((0, 0, 0), (1, 0, 0), (1, 1, 0), (0, 1, 0))
    >>> floor.area
    1.0
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from src.whitted.core.interval import Interval
from src.whitted.core.ray import Hit, Ray
from src.whitted.core.vector import INFINITY, Vec3, as_vec3, cross, dot, length, unit
from src.whitted.geometry.base import Primitive
from src.whitted.geometry.triangle import DEGENERATE_AREA, PLANE_EPSILON


class Quad(Primitive):
    """Planar quadrilateral with vertices ``a, b, c, d`` in order.

    Attributes:
        normal: Unit plane normal.
        area: Area of the quad.
    """

    plugin_name = "quad"

    def __init__(
        self,
        a: Sequence[float] | Vec3,
        b: Sequence[float] | Vec3,
        c: Sequence[float] | Vec3,
        d: Sequence[float] | Vec3,
    ) -> None:
        super().__init__()
        self.vertices = tuple(as_vec3(v) for v in (a, b, c, d))

        centroid = 0.25 * sum(self.vertices)
        fan = np.zeros(3, dtype=np.float64)
        for i in range(4):
            fan += cross(self.vertices[i] - centroid, self.vertices[(i + 1) % 4] - centroid)

        self.area = 0.5 * length(fan)
        self.degenerate = 2.0 * self.area < DEGENERATE_AREA
        self.normal = -unit(fan)
        self.offset = dot(centroid, self.normal)
        self.edges = tuple(
            unit(self.vertices[(i + 1) % 4] - self.vertices[i]) for i in range(4)
        )

    def intersect(
        self, ray: Ray, limit: float = INFINITY, ignore: int | None = None
    ) -> Hit | None:
        if self.degenerate:
            return None

        denom = dot(ray.direction, self.normal)
        if abs(denom) < PLANE_EPSILON:
            return None
        s = (self.offset - dot(ray.origin, self.normal)) / denom
        if s <= 0.0 or s >= limit:
            return None

        point = ray.at(s)
        for vertex, edge in zip(self.vertices, self.edges):
            if dot(cross(point - vertex, edge), self.normal) < 0.0:
                return None

        return Hit(s, point, self.normal, self)

    def inside(self, point: Vec3) -> bool:
        return False

    def directional_bound(self, direction: Vec3) -> Interval:
        if self.degenerate:
            return Interval.empty()
        values = [dot(direction, v) for v in self.vertices]
        return Interval(min(values), max(values)) / dot(direction, direction)
