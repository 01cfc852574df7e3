"""Ray and hit record data structures.

Rays are immutable: secondary rays are derived with ``Ray.spawn``, which bumps
the generation counter used to cut off recursion. Intersection routines
return a ``Hit`` or ``None`` instead of filling in a shared record, and a
returned hit always lies strictly inside ``(0, limit)``.

Example:
    >>> from src.whitted.core.ray import Ray
    >>> ray = Ray((0.0, 0.0, 5.0), (0.0, 0.0, -2.0))
    >>> ray.direction
    array([ 0.,  0., -1.])
    >>> ray.at(4.0)
    array([0., 0., 1.])
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import IntEnum
from typing import TYPE_CHECKING, Sequence

from src.whitted.core.vector import Vec3, as_vec3, length

if TYPE_CHECKING:
    from src.whitted.geometry.base import SceneObject


class RayType(IntEnum):
    """What a ray is used for; shaders and envmaps may treat kinds differently."""

    UNDEFINED = 0
    PRIMARY = 1
    GENERIC = 2
    SHADOW = 3
    INDIRECT = 4
    LIGHT = 5
    SPECIAL = 6


@dataclass(frozen=True, eq=False)
class Ray:
    """A half-line with tracing context.

    Attributes:
        origin: Start point.
        direction: Unit direction (normalised on creation).
        generation: 1 for primary rays, parent generation + 1 otherwise.
        ref_index: Refractive index of the medium the ray travels in.
        source: Object the ray was cast from, if any.
        kind: Purpose of the ray.
    """

    origin: Vec3
    direction: Vec3
    generation: int = 1
    ref_index: float = 1.0
    source: SceneObject | None = None
    kind: RayType = RayType.GENERIC

    def __post_init__(self) -> None:
        direction = as_vec3(self.direction)
        norm = length(direction)
        if norm == 0.0:
            raise ValueError("Ray direction must be non-zero")
        object.__setattr__(self, "origin", as_vec3(self.origin))
        object.__setattr__(self, "direction", direction / norm)

    def at(self, s: float) -> Vec3:
        """Point at distance ``s`` along the ray."""
        return self.origin + s * self.direction

    def spawn(
        self,
        origin: Vec3 | Sequence[float],
        direction: Vec3 | Sequence[float],
        *,
        ref_index: float | None = None,
        kind: RayType = RayType.GENERIC,
        source: SceneObject | None = None,
    ) -> Ray:
        """Derive a secondary ray one generation deeper.

        The refractive index is inherited unless given explicitly.
        """
        return Ray(
            origin,
            direction,
            generation=self.generation + 1,
            ref_index=self.ref_index if ref_index is None else ref_index,
            source=source,
            kind=kind,
        )

    def with_frame(self, origin: Vec3, direction: Vec3) -> Ray:
        """Same ray expressed in another coordinate frame."""
        return dataclasses.replace(self, origin=origin, direction=direction)


@dataclass(frozen=True, eq=False)
class Hit:
    """Nearest intersection found along a ray.

    Attributes:
        distance: Ray parameter of the hit point.
        point: Hit point in world coordinates.
        normal: Unit surface normal at the hit point (any orientation).
        obj: Primitive that was hit.
        ray: World-space ray that produced the hit; set by ``Scene.cast``.
    """

    distance: float
    point: Vec3
    normal: Vec3
    obj: SceneObject
    ray: Ray | None = None

    def with_ray(self, ray: Ray) -> Hit:
        return dataclasses.replace(self, ray=ray)


def closest(a: Hit | None, b: Hit | None) -> Hit | None:
    """Return the nearer of two optional hits."""
    if a is None:
        return b
    if b is None:
        return a
    return b if b.distance < a.distance else a
