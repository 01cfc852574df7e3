"""Triangle primitive.

The ray is intersected with the supporting plane, then the barycentric
coordinates of the plane point are obtained from a precomputed 3x3 inverse:
the vertex matrix has its dominant-axis row replaced by ones, so solving it
against the hit point (dominant coordinate also set to one) yields the three
weights directly. The hit is inside iff all weights are non-negative.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from src.whitted.core.interval import Interval
from src.whitted.core.ray import Hit, Ray
from src.whitted.core.vector import (
    INFINITY,
    MACHINE_EPSILON,
    Vec3,
    as_vec3,
    cross,
    dot,
    length,
)
from src.whitted.geometry.base import Primitive

# Rays closer to parallel than this (|cos| of the angle to the plane) miss
PLANE_EPSILON = 1.0e-4
# Twice the area below which a triangle is degenerate
DEGENERATE_AREA = 1.0e-12


class Triangle(Primitive):
    """Triangle given by its three vertices.

    A degenerate triangle (collinear vertices) is never hit and has an empty
    bound.
    """

    plugin_name = "triangle"

    def __init__(
        self,
        a: Sequence[float] | Vec3,
        b: Sequence[float] | Vec3,
        c: Sequence[float] | Vec3,
    ) -> None:
        super().__init__()
        self.a = as_vec3(a)
        self.b = as_vec3(b)
        self.c = as_vec3(c)

        w = cross(self.a - self.b, self.c - self.b)
        twice_area = length(w)
        self.degenerate = twice_area < DEGENERATE_AREA
        self.normal = w / twice_area if not self.degenerate else np.zeros(3)
        self.offset = dot(self.a, self.normal)
        self.axis = int(np.argmax(np.abs(self.normal)))
        self._barycentric = np.eye(3)

        if not self.degenerate:
            vertices = np.column_stack((self.a, self.b, self.c))
            vertices[self.axis, :] = 1.0
            try:
                self._barycentric = np.linalg.inv(vertices)
            except np.linalg.LinAlgError:
                self.degenerate = True

    @property
    def area(self) -> float:
        return 0.5 * length(cross(self.a - self.b, self.c - self.b))

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
        q = point.copy()
        q[self.axis] = 1.0
        if np.any(self._barycentric @ q < 0.0):
            return None

        return Hit(s, point, self.normal, self)

    def inside(self, point: Vec3) -> bool:
        return False

    def directional_bound(self, direction: Vec3) -> Interval:
        if self.degenerate:
            return Interval.empty()
        values = (dot(direction, self.a), dot(direction, self.b), dot(direction, self.c))
        lo = min(values)
        hi = max(values)
        # Widened by a relative epsilon on both ends
        lo -= MACHINE_EPSILON * abs(lo)
        hi += MACHINE_EPSILON * abs(hi)
        return Interval(lo, hi) / dot(direction, direction)
