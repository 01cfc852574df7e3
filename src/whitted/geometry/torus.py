"""Torus primitive centred at the origin, lying in the x-y plane.

Substituting the ray ``P = Q + sR`` into the implicit equation

    (|P|^2 - (a^2 + b^2))^2 = 4 a^2 (b^2 - Pz^2)

gives a monic quartic in ``s``. Cheap rejects (the bounding planes
``z = +-b``, the enclosing infinite cylinder and the bounding box) run before
the polynomial is set up. The ray origin is first advanced to just outside the
bounding sphere, which keeps the quartic coefficients small.
"""

from __future__ import annotations

import math

from src.whitted.core.aabb import AABB
from src.whitted.core.interval import Interval
from src.whitted.core.polynomial import min_positive_root, solve_quartic
from src.whitted.core.ray import Hit, Ray
from src.whitted.core.vector import INFINITY, Vec3, dot, length, unit, vec3
from src.whitted.geometry.base import Primitive

ROOT_EPSILON = 1.0e-7


class Torus(Primitive):
    """Torus with major radius ``a`` (ring) and minor radius ``b`` (tube).

    Transform it to place it elsewhere in the scene.
    """

    plugin_name = "torus"

    def __init__(self, major_radius: float, minor_radius: float) -> None:
        super().__init__()
        if minor_radius <= 0.0 or major_radius <= 0.0:
            raise ValueError(
                f"Torus radii must be positive, got {major_radius}, {minor_radius}"
            )
        self.a = float(major_radius)
        self.b = float(minor_radius)
        self._a2b2 = self.a * self.a + self.b * self.b
        self._rad = self.a + self.b
        self._rad2 = self._rad * self._rad
        self._bbox = AABB(
            Interval(-self._rad, self._rad),
            Interval(-self._rad, self._rad),
            Interval(-self.b, self.b),
        )

    def cost(self) -> float:
        return 4.0

    def intersect(
        self, ray: Ray, limit: float = INFINITY, ignore: int | None = None
    ) -> Hit | None:
        r = ray.direction
        q = ray.origin

        # Above looking up, or below looking down
        if r[2] >= 0.0:
            if q[2] >= self.b:
                return None
        elif q[2] <= -self.b:
            return None

        qq = q[0] * q[0] + q[1] * q[1]
        qr = q[0] * r[0] + q[1] * r[1]
        if qr > 0.0 and qq >= self._rad2:
            return None

        if not self._bbox.hit(ray, limit):
            return None

        # Start the polynomial at the entry of the bounding sphere
        shift = max(0.0, -dot(q, r) - self._rad)
        q = q + shift * r
        qq = q[0] * q[0] + q[1] * q[1]
        qr = q[0] * r[0] + q[1] * r[1]

        big_qq = qq + q[2] * q[2]
        big_qr = qr + q[2] * r[2]
        a2 = self.a * self.a
        k = big_qq - self._a2b2

        roots = solve_quartic(
            (
                1.0,
                4.0 * big_qr,
                2.0 * k + 4.0 * (big_qr * big_qr + a2 * r[2] * r[2]),
                4.0 * big_qr * k + 8.0 * a2 * q[2] * r[2],
                k * k - 4.0 * a2 * (self.b * self.b - q[2] * q[2]),
            )
        )
        s = min_positive_root(roots + shift, limit, ROOT_EPSILON)
        if s is None:
            return None

        point = ray.at(s)
        ring = unit(vec3(point[0], point[1], 0.0))
        return Hit(s, point, unit(point - self.a * ring), self)

    def inside(self, point: Vec3) -> bool:
        if point[2] > self.b or point[2] < -self.b:
            return False
        radial = math.hypot(point[0], point[1])
        if radial > self._rad or radial < self.a - self.b:
            return False
        # Distance to the nearest point of the ring, also valid on the z axis
        return math.hypot(radial - self.a, point[2]) <= self.b

    def directional_bound(self, direction: Vec3) -> Interval:
        # Support of the ring plus the tube, in units of |direction|^2
        planar = math.hypot(direction[0], direction[1])
        d = (self.a * planar + self.b * length(direction)) / dot(direction, direction)
        return Interval(-d, d)

    def bounding_box(self) -> AABB:
        return self._bbox

    def __repr__(self) -> str:
        return f"Torus(major={self.a:g}, minor={self.b:g})"
