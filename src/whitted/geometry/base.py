"""Capability model for everything that can be placed in a scene.

Every scene object answers four questions: where a ray first hits it
(``intersect``), whether a point lies inside it (``inside``), how far it
extends along a direction (``directional_bound``) and how expensive it is to
intersect relative to a box test (``cost``). Primitives implement these
directly; aggregates combine children and additionally accept ``add_child``
and ``close``.

Each instance gets a stable integer ``uid``. Intersection queries may pass
such a uid as ``ignore``; aggregates skip a child whose uid matches before
visiting it.
"""

from __future__ import annotations

import itertools
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, ClassVar, Iterator

from src.whitted.core.aabb import AABB
from src.whitted.core.vector import AXES, INFINITY

if TYPE_CHECKING:
    from src.whitted.core.interval import Interval
    from src.whitted.core.ray import Hit, Ray
    from src.whitted.core.vector import Vec3
    from src.whitted.materials.envmap import Envmap
    from src.whitted.materials.material import Material
    from src.whitted.materials.shader import Shader

_uid_counter = itertools.count(1)


class SceneObject(ABC):
    """Abstract base of primitives and aggregates.

    Attributes:
        uid: Stable identity token used to exclude the object from queries.
        material: Surface material, or None for aggregates without one.
        shader: Shader used when a ray hits this object.
        envmap: Environment map for rays cast from this object that miss.
        parent: Enclosing aggregate while a scene is being built.
    """

    plugin_name: ClassVar[str] = "object"

    def __init__(self) -> None:
        self.uid: int = next(_uid_counter)
        self.material: Material | None = None
        self.shader: Shader | None = None
        self.envmap: Envmap | None = None
        self.parent: Aggregate | None = None

    @abstractmethod
    def intersect(
        self, ray: Ray, limit: float = INFINITY, ignore: int | None = None
    ) -> Hit | None:
        """Return the nearest hit with distance in ``(0, limit)``, or None."""

    @abstractmethod
    def inside(self, point: Vec3) -> bool:
        """Return True if ``point`` lies inside the object (closed)."""

    @abstractmethod
    def directional_bound(self, direction: Vec3) -> Interval:
        """Extent of the object along ``direction``.

        For every point ``p`` of the object, ``dot(direction, p) / |direction|^2``
        lies in the returned interval. Along a unit axis this is simply the
        object's range of that coordinate.
        """

    def cost(self) -> float:
        """Intersection cost relative to a ray-box test."""
        return 1.0

    def bounding_box(self) -> AABB:
        """Axis-aligned box built from the bounds along the three axes."""
        return AABB(*(self.directional_bound(axis) for axis in AXES))

    @property
    def is_emitter(self) -> bool:
        return self.material is not None and self.material.is_emitter

    def __repr__(self) -> str:
        return f"{type(self).__name__}(uid={self.uid})"


class Primitive(SceneObject):
    """A leaf object with its own geometry."""


class Aggregate(SceneObject):
    """A container object whose geometry is the union of its children."""

    plugin_name: ClassVar[str] = "aggregate"

    def __init__(self) -> None:
        super().__init__()
        self.children: list[SceneObject] = []
        self.closed = False

    def add_child(self, obj: SceneObject) -> None:
        self.children.append(obj)

    def close(self) -> None:
        """Called once all children are known; may build acceleration data."""
        self.closed = True

    def __len__(self) -> int:
        return len(self.children)

    def __iter__(self) -> Iterator[SceneObject]:
        return iter(self.children)
