"""Flat list aggregate.

Every child is tested; the box around all children is used as an early
reject. Good for a handful of objects, and the reference the hierarchy is
checked against.
"""

from __future__ import annotations

from src.whitted.core.aabb import AABB
from src.whitted.core.interval import Interval
from src.whitted.core.ray import Hit, Ray
from src.whitted.core.vector import INFINITY, Vec3
from src.whitted.geometry.base import Aggregate, SceneObject


class ObjectList(Aggregate):
    """Aggregate that scans its children in order."""

    plugin_name = "List"

    def __init__(self) -> None:
        super().__init__()
        self.bbox = AABB.empty()

    def add_child(self, obj: SceneObject) -> None:
        super().add_child(obj)
        self.bbox = self.bbox.union(obj.bounding_box())

    def intersect(
        self, ray: Ray, limit: float = INFINITY, ignore: int | None = None
    ) -> Hit | None:
        if not self.bbox.hit(ray, limit):
            return None

        nearest = None
        for child in self.children:
            if child.uid == ignore:
                continue
            hit = child.intersect(ray, limit, ignore)
            if hit is not None:
                nearest = hit
                limit = hit.distance
        return nearest

    def inside(self, point: Vec3) -> bool:
        if not self.bbox.contains(point):
            return False
        return any(child.inside(point) for child in self.children)

    def directional_bound(self, direction: Vec3) -> Interval:
        bound = Interval.empty()
        for child in self.children:
            bound = bound.union(child.directional_bound(direction))
        return bound

    def bounding_box(self) -> AABB:
        return self.bbox

    def cost(self) -> float:
        return sum(child.cost() for child in self.children)
