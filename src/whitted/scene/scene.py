"""Scene container and the recursive ``trace`` driver.

A ``Scene`` is read-only while rendering: it owns the root object, the list
of light-emitting objects, an optional environment map and the render
configuration. ``trace`` implements the recursion:

1. Rays deeper than ``max_tree_depth`` return the termination color.
2. A hit is shaded by the hit object's shader, or gets its flat diffuse color.
3. A miss sees the envmap of the object the ray came from, then the scene
   envmap, then the background color.

Example:
    >>> from src.whitted.core.ray import Ray
    >>> from src.whitted.geometry.sphere import Sphere
    >>> from src.whitted.scene.scene import Scene
    >>> scene = Scene(root=Sphere((0, 0, 0), 1.0))
    >>> scene.cast(Ray((0, 0, 5), (0, 0, -1))).distance
    4.0
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

import numpy as np

from src.whitted.aggregates.transform import Transform
from src.whitted.config import RenderConfig
from src.whitted.core.color import WHITE, Color, as_color
from src.whitted.core.ray import Hit, Ray, RayType
from src.whitted.core.vector import INFINITY, Vec3, cross, length, orthogonal_to

if TYPE_CHECKING:
    from src.whitted.core.rasterizer import Rasterizer
    from src.whitted.geometry.base import SceneObject
    from src.whitted.materials.envmap import Envmap

DEFAULT_BACKGROUND = (0.15, 0.25, 0.35)
DEFAULT_TERMINATION = (0.15, 0.15, 0.15)


class Scene:
    """Everything needed to trace rays through a scene.

    Attributes:
        root: Top-level object (usually an aggregate), or None for an empty scene.
        lights: Light-emitting objects, shaded as points at their box centres.
        envmap: Scene-wide environment map, or None.
        background: Color of escaping rays when there is no envmap.
        termination: Color returned for rays past the depth cutoff.
        rasterizer: Rasterizer declared by the scene description, if any.
        config: Render configuration.
    """

    def __init__(
        self,
        root: SceneObject | None = None,
        lights: Sequence[SceneObject] | None = None,
        envmap: Envmap | None = None,
        *,
        background: Sequence[float] | Color = DEFAULT_BACKGROUND,
        termination: Sequence[float] | Color = DEFAULT_TERMINATION,
        rasterizer: Rasterizer | None = None,
        config: RenderConfig | None = None,
    ) -> None:
        self.root = root
        self.lights: list[SceneObject] = list(lights) if lights is not None else []
        self.envmap = envmap
        self.background = as_color(background)
        self.termination = as_color(termination)
        self.rasterizer = rasterizer
        self.config = config if config is not None else RenderConfig()
        self._rng = np.random.default_rng(self.config.seed)

    @property
    def max_tree_depth(self) -> int:
        return self.config.max_tree_depth

    def cast(
        self, ray: Ray, ignore: int | None = None, limit: float = INFINITY
    ) -> Hit | None:
        """Nearest hit of ``ray`` with the scene, with the ray attached.

        Args:
            ray: World-space ray.
            ignore: Uid of an object to exclude from the query.
            limit: Hits at or beyond this distance are ignored.
        """
        if self.root is None or self.root.uid == ignore:
            return None
        hit = self.root.intersect(ray, limit, ignore)
        if hit is None:
            return None
        return hit.with_ray(ray)

    def trace(self, ray: Ray) -> Color:
        """Color seen along ``ray``."""
        if ray.generation > self.max_tree_depth:
            return self.termination.copy()

        hit = self.cast(ray)
        if hit is not None:
            obj = hit.obj
            if obj.shader is not None:
                return obj.shader.shade(self, hit)
            if obj.material is not None:
                return obj.material.diffuse.copy()
            return WHITE.copy()

        if ray.source is not None and ray.source.envmap is not None:
            return ray.source.envmap.shade(ray)
        if self.envmap is not None:
            return self.envmap.shade(ray)
        return self.background.copy()

    def light_center(self, light: SceneObject) -> Vec3:
        """World position of a light: its box centre under all enclosing transforms."""
        box = light.bounding_box()
        node = light.parent
        while node is not None:
            if isinstance(node, Transform):
                box = box.transform(node.matrix)
            node = node.parent
        return box.center

    def shadow_factor(
        self,
        point: Vec3,
        light_point: Vec3,
        ignore: int | None = None,
        source: SceneObject | None = None,
    ) -> float:
        """Fraction of shadow rays from ``point`` that reach ``light_point``.

        With ``shadow_samples > 1`` the rays are jittered around the direct
        direction, which softens shadow edges. Occluders beyond the light do
        not count.
        """
        to_light = light_point - point
        distance = length(to_light)
        if distance == 0.0:
            return 1.0
        direction = to_light / distance

        samples = self.config.shadow_samples
        if samples == 1:
            directions = [direction]
        else:
            u = orthogonal_to(direction)
            v = cross(direction, u)
            offsets = self._rng.uniform(
                -self.config.shadow_jitter, self.config.shadow_jitter, size=(samples, 2)
            )
            directions = [direction + du * u + dv * v for du, dv in offsets]

        blocked = 0
        for d in directions:
            shadow_ray = Ray(point, d, kind=RayType.SHADOW, source=source)
            if self.cast(shadow_ray, ignore=ignore, limit=distance) is not None:
                blocked += 1
        return 1.0 - blocked / len(directions)

    @property
    def object_count(self) -> int:
        """Number of primitives reachable from the root."""
        if self.root is None:
            return 0
        count = 0
        stack = [self.root]
        while stack:
            obj = stack.pop()
            children = getattr(obj, "children", None)
            if children is None:
                count += 1
            else:
                stack.extend(children)
        return count
