"""Axis-aligned block primitive.

The intersector intersects the three per-axis parameter intervals (slab
method). The face normal comes from the axis whose bound produced the
surviving distance: the entry face when the ray starts outside, the exit face
when it starts inside.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from src.whitted.core.interval import Interval
from src.whitted.core.ray import Hit, Ray
from src.whitted.core.vector import INFINITY, Vec3, as_vec3, dot
from src.whitted.geometry.base import Primitive


class Block(Primitive):
    """Axis-aligned box given by two opposite corners.

    The corners may be given in any order; they are sorted per axis.
    """

    plugin_name = "block"

    def __init__(
        self, min_corner: Sequence[float] | Vec3, max_corner: Sequence[float] | Vec3
    ) -> None:
        super().__init__()
        a = as_vec3(min_corner)
        b = as_vec3(max_corner)
        self.min_corner = np.minimum(a, b)
        self.max_corner = np.maximum(a, b)

    def intersect(
        self, ray: Ray, limit: float = INFINITY, ignore: int | None = None
    ) -> Hit | None:
        q = ray.origin
        r = ray.direction
        t_near, t_far = -INFINITY, INFINITY
        near_axis = far_axis = -1
        near_sign = far_sign = 0.0

        for axis in range(3):
            lo = self.min_corner[axis]
            hi = self.max_corner[axis]
            if r[axis] == 0.0:
                # Parallel to this slab: either always inside it or never
                if q[axis] < lo or q[axis] > hi:
                    return None
                continue

            t_lo = (lo - q[axis]) / r[axis]
            t_hi = (hi - q[axis]) / r[axis]
            if r[axis] > 0.0:
                t_enter, t_exit, enter_sign, exit_sign = t_lo, t_hi, -1.0, 1.0
            else:
                t_enter, t_exit, enter_sign, exit_sign = t_hi, t_lo, 1.0, -1.0

            if t_enter > t_near:
                t_near, near_axis, near_sign = t_enter, axis, enter_sign
            if t_exit < t_far:
                t_far, far_axis, far_sign = t_exit, axis, exit_sign
            if t_near > t_far:
                return None

        if t_near > 0.0:
            distance, axis, sign = t_near, near_axis, near_sign
        elif t_far > 0.0:
            distance, axis, sign = t_far, far_axis, far_sign
        else:
            return None

        if distance >= limit:
            return None

        normal = np.zeros(3, dtype=np.float64)
        normal[axis] = sign
        return Hit(float(distance), ray.at(distance), normal, self)

    def inside(self, point: Vec3) -> bool:
        return bool(np.all(point >= self.min_corner) and np.all(point <= self.max_corner))

    def directional_bound(self, direction: Vec3) -> Interval:
        a = direction * self.min_corner
        b = direction * self.max_corner
        lo = float(np.minimum(a, b).sum())
        hi = float(np.maximum(a, b).sum())
        return Interval(lo, hi) / dot(direction, direction)

    def __repr__(self) -> str:
        lo, hi = self.min_corner, self.max_corner
        return (
            f"Block(({lo[0]:g}, {lo[1]:g}, {lo[2]:g}), ({hi[0]:g}, {hi[1]:g}, {hi[2]:g}))"
        )
