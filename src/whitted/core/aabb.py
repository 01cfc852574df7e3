"""Axis-aligned bounding boxes.

A box is a triple of intervals, one per axis. Boxes are the bounding volume
of the hierarchy and of object lists, so the ray-box test here is on the hot
path of every query.

Example:
    >>> from src.whitted.core.aabb import AABB
    >>> box = AABB.from_corners((0, 0, 0), (1, 2, 3))
    >>> box.surface_area
    22.0
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Sequence

import numpy as np

from src.whitted.core.interval import Interval
from src.whitted.core.vector import INFINITY, Vec3, as_vec3

if TYPE_CHECKING:
    from src.whitted.core.affine import Affine
    from src.whitted.core.ray import Ray


@dataclass(frozen=True)
class AABB:
    """Axis-aligned box; empty if any of its intervals is empty."""

    x: Interval = field(default_factory=Interval.empty)
    y: Interval = field(default_factory=Interval.empty)
    z: Interval = field(default_factory=Interval.empty)

    @classmethod
    def empty(cls) -> AABB:
        return cls()

    @classmethod
    def from_corners(
        cls, lo: Sequence[float] | Vec3, hi: Sequence[float] | Vec3
    ) -> AABB:
        lo = as_vec3(lo)
        hi = as_vec3(hi)
        return cls(
            Interval(float(lo[0]), float(hi[0])),
            Interval(float(lo[1]), float(hi[1])),
            Interval(float(lo[2]), float(hi[2])),
        )

    @classmethod
    def around_point(cls, p: Sequence[float] | Vec3) -> AABB:
        p = as_vec3(p)
        return cls.from_corners(p, p)

    @property
    def axes(self) -> tuple[Interval, Interval, Interval]:
        return (self.x, self.y, self.z)

    @property
    def is_empty(self) -> bool:
        return self.x.is_empty or self.y.is_empty or self.z.is_empty

    @property
    def min_corner(self) -> Vec3:
        return np.array((self.x.min, self.y.min, self.z.min), dtype=np.float64)

    @property
    def max_corner(self) -> Vec3:
        return np.array((self.x.max, self.y.max, self.z.max), dtype=np.float64)

    @property
    def center(self) -> Vec3:
        return 0.5 * (self.min_corner + self.max_corner)

    @property
    def surface_area(self) -> float:
        if self.is_empty:
            return 0.0
        lx, ly, lz = self.x.length, self.y.length, self.z.length
        return 2.0 * (lx * (ly + lz) + ly * lz)

    @property
    def volume(self) -> float:
        if self.is_empty:
            return 0.0
        return self.x.length * self.y.length * self.z.length

    def union(self, other: AABB) -> AABB:
        return AABB(self.x.union(other.x), self.y.union(other.y), self.z.union(other.z))

    def include(self, point: Sequence[float] | Vec3) -> AABB:
        return self.union(AABB.around_point(point))

    def translate(self, v: Sequence[float] | Vec3) -> AABB:
        v = as_vec3(v)
        return AABB(self.x + v[0], self.y + v[1], self.z + v[2])

    def transform(self, affine: Affine) -> AABB:
        """Return the tightest box enclosing this box mapped by ``affine``."""
        if self.is_empty:
            return self
        old_min = self.min_corner
        old_max = self.max_corner
        new_min = affine.offset.copy()
        new_max = affine.offset.copy()
        for i in range(3):
            for j in range(3):
                a = affine.linear[i, j] * old_min[j]
                b = affine.linear[i, j] * old_max[j]
                new_min[i] += min(a, b)
                new_max[i] += max(a, b)
        return AABB.from_corners(new_min, new_max)

    def contains(self, point: Sequence[float] | Vec3) -> bool:
        return (
            self.x.contains(point[0])
            and self.y.contains(point[1])
            and self.z.contains(point[2])
        )

    def encloses(self, other: AABB) -> bool:
        if other.is_empty:
            return True
        return all(
            mine.min <= theirs.min and theirs.max <= mine.max
            for mine, theirs in zip(self.axes, other.axes)
        )

    def hit(self, ray: Ray, max_distance: float = INFINITY) -> bool:
        """Slab test of ``ray`` against the box.

        An intersection farther than ``max_distance`` counts as a miss; a ray
        starting inside the box always hits it.
        """
        q = ray.origin
        r = ray.direction
        near = 0.0
        far = max_distance
        for axis, slab in enumerate((self.x, self.y, self.z)):
            if r[axis] > 0.0:
                if q[axis] > slab.max:
                    return False
                inv = 1.0 / r[axis]
                s = (slab.min - q[axis]) * inv
                t = (slab.max - q[axis]) * inv
            elif r[axis] < 0.0:
                if q[axis] < slab.min:
                    return False
                inv = 1.0 / r[axis]
                s = (slab.max - q[axis]) * inv
                t = (slab.min - q[axis]) * inv
            else:
                if q[axis] < slab.min or q[axis] > slab.max:
                    return False
                continue
            if s > near:
                near = s
            if t < far:
                far = t
            if near > far:
                return False
        return True

    def __repr__(self) -> str:
        if self.is_empty:
            return "AABB(empty)"
        return (
            f"AABB([{self.x.min:g}, {self.x.max:g}] x "
            f"[{self.y.min:g}, {self.y.max:g}] x [{self.z.min:g}, {self.z.max:g}])"
        )
