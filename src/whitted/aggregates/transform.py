"""Affine transform aggregate.

Wraps exactly one child. Rays are mapped into the child's frame with the
inverse transform; since the mapped direction is renormalised, distances are
converted with the ``stretch`` factor (length of the mapped direction) on the
way in and on the way out. Normals go back through the transpose of the
inverse linear part.
"""

from __future__ import annotations

import logging

from src.whitted.core.affine import Affine
from src.whitted.core.interval import Interval
from src.whitted.core.ray import Hit, Ray
from src.whitted.core.vector import INFINITY, Vec3, dot, length, unit
from src.whitted.geometry.base import Aggregate, SceneObject

logger = logging.getLogger(__name__)


class Transform(Aggregate):
    """Places a single child object under an affine map.

    Attributes:
        matrix: Child-to-world transform.
        inverse: World-to-child transform.
        child: The transformed object, once added.

    Raises:
        numpy.linalg.LinAlgError: If ``matrix`` is singular.
    """

    plugin_name = "transform"

    def __init__(self, matrix: Affine) -> None:
        super().__init__()
        self.matrix = matrix
        self.inverse = matrix.inverse()
        self.child: SceneObject | None = None

    def add_child(self, obj: SceneObject) -> None:
        if self.child is not None:
            logger.warning(
                "Transform %d already has a child; ignoring %r", self.uid, obj
            )
            return
        super().add_child(obj)
        self.child = obj

    def intersect(
        self, ray: Ray, limit: float = INFINITY, ignore: int | None = None
    ) -> Hit | None:
        if self.child is None or self.child.uid == ignore:
            return None

        local_direction = self.inverse.apply_vector(ray.direction)
        stretch = length(local_direction)
        local_ray = ray.with_frame(
            self.inverse.apply_point(ray.origin), local_direction / stretch
        )

        hit = self.child.intersect(local_ray, limit * stretch, ignore)
        if hit is None:
            return None

        distance = hit.distance / stretch
        if distance >= limit:
            return None
        return Hit(
            distance,
            self.matrix.apply_point(hit.point),
            unit(self.inverse.transpose_apply(hit.normal)),
            hit.obj,
        )

    def inside(self, point: Vec3) -> bool:
        if self.child is None:
            return False
        return self.child.inside(self.inverse.apply_point(point))

    def directional_bound(self, direction: Vec3) -> Interval:
        if self.child is None:
            return Interval.empty()
        u = self.matrix.transpose_apply(direction)
        w = u * (dot(direction, direction) / dot(u, u))
        offset = dot(w, self.inverse.offset) / dot(w, w)
        return self.child.directional_bound(w) - offset

    def cost(self) -> float:
        if self.child is None:
            return 1.0
        return self.child.cost()
