"""Shaders: compute the color at a ray-surface hit.

``BasicShader`` is the classic Whitted model:

    local     = ambient * diffuse
              + sum over lights of  vis * att * emission * (diffuse * max(0, L.N)
                                                      + specular * max(0, R.E)^n)
    color     = (1 - t) * (local + r * reflected) + t * refracted

where ``vis`` is the shadow factor, ``att = 1 / (a + b d + c d^2)`` the
distance attenuation, ``r`` the reflectivity and ``t`` the translucency.
Reflected and refracted colors come from recursive calls to ``Scene.trace``
with rays one generation deeper.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, ClassVar

import numpy as np

from src.whitted.core.color import Color, color
from src.whitted.core.vector import dot, length, reflect, refract, unit
from src.whitted.materials.material import Material

if TYPE_CHECKING:
    from src.whitted.core.ray import Hit
    from src.whitted.scene.scene import Scene

DEFAULT_MATERIAL = Material()


class Shader(ABC):
    """Maps a hit to a color; may trace further rays through the scene."""

    plugin_name: ClassVar[str]

    @abstractmethod
    def shade(self, scene: Scene, hit: Hit) -> Color:
        """Return the color of ``hit``, which carries the ray that produced it."""


def attenuation(distance: float, coefficients: tuple[float, float, float]) -> float:
    """Light falloff ``1 / (a + b d + c d^2)``; 1 when the denominator vanishes."""
    a, b, c = coefficients
    denom = a + b * distance + c * distance * distance
    if denom <= 0.0:
        return 1.0
    return 1.0 / denom


class BasicShader(Shader):
    """Phong local illumination with shadows, mirror reflection and refraction."""

    plugin_name = "basic_shader"

    def shade(self, scene: Scene, hit: Hit) -> Color:
        obj = hit.obj
        material = obj.material if obj.material is not None else DEFAULT_MATERIAL
        if material.is_emitter:
            return material.emission.copy()

        config = scene.config
        epsilon = config.surface_epsilon
        ray = hit.ray
        point = hit.point

        eye = unit(ray.origin - point)
        normal = hit.normal
        if dot(eye, normal) < 0.0:
            normal = -normal
        outside = point + epsilon * normal

        diffuse = color()
        specular = color()
        for light in scene.lights:
            light_point = scene.light_center(light)
            to_light = light_point - point
            distance = length(to_light)
            if distance == 0.0:
                continue
            direction = to_light / distance

            lambert = max(0.0, dot(direction, normal))
            if lambert == 0.0:
                continue
            mirror = unit(2.0 * dot(normal, direction) * normal - direction)
            highlight = max(0.0, dot(mirror, eye)) ** material.phong_exp

            visibility = scene.shadow_factor(outside, light_point, ignore=light.uid, source=obj)
            if visibility == 0.0:
                continue
            weight = visibility * attenuation(distance, config.attenuation)
            emission = light.material.emission
            diffuse += weight * lambert * emission
            specular += weight * highlight * emission

        local = (
            material.ambient * material.diffuse
            + diffuse * material.diffuse
            + specular * material.specular
        )

        reflected = color()
        if material.is_reflective:
            reflected = scene.trace(ray.spawn(outside, reflect(ray.direction, normal), source=obj))

        refracted = color()
        if material.is_translucent:
            refracted = self._refracted(scene, hit, normal, material)

        t = material.translucency
        return (1.0 - t) * (local + material.reflectivity * reflected) + t * refracted

    @staticmethod
    def _refracted(scene: Scene, hit: Hit, normal: np.ndarray, material: Material) -> Color:
        ray = hit.ray
        epsilon = scene.config.surface_epsilon
        index = material.ref_index if material.ref_index > 0.0 else 1.0

        # A ray already travelling in a denser medium is leaving the object
        if ray.ref_index > 1.0:
            n1, n2 = ray.ref_index, 1.0
        else:
            n1, n2 = 1.0, index

        direction, total_internal = refract(ray.direction, normal, n1, n2)
        if total_internal:
            child = ray.spawn(
                hit.point + epsilon * normal, direction, ref_index=n1, source=hit.obj
            )
        else:
            child = ray.spawn(
                hit.point - epsilon * normal, direction, ref_index=n2, source=hit.obj
            )
        return scene.trace(child)
