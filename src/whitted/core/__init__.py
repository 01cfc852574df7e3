"""Core rendering module.

This module contains the fundamental building blocks for ray tracing:

Components:
    vector: numpy-backed 3-vectors, reflection and refraction
    color: RGB color helpers
    interval: Closed intervals used for slabs and windows
    aabb: Axis-aligned bounding boxes and the ray-box slab test
    affine: Affine transformations (3x3 linear part plus offset)
    polynomial: Quadratic and quartic real root solvers
    ray: Ray, Hit and RayType
    rasterizer: Rasterizer interface and the basic per-pixel rasterizer

Everything runs on the host in double precision; shading recursion and the
polymorphic object model do not map onto GPU kernels.
"""

from .aabb import AABB
from .affine import Affine
from .color import BLACK, WHITE, Color, color
from .interval import Interval
from .ray import Hit, Ray, RayType, closest
from .vector import (
    INFINITY,
    MACHINE_EPSILON,
    Vec3,
    cross,
    dot,
    length,
    length_squared,
    orthogonal_to,
    reflect,
    refract,
    unit,
    vec3,
)

# Note: rasterizer is NOT imported here to avoid circular imports.
# Import it from src.whitted.core.rasterizer directly.

__all__ = [
    "AABB",
    "Affine",
    "Interval",
    "Ray",
    "RayType",
    "Hit",
    "closest",
    "Color",
    "color",
    "BLACK",
    "WHITE",
    "Vec3",
    "vec3",
    "dot",
    "cross",
    "length",
    "length_squared",
    "unit",
    "orthogonal_to",
    "reflect",
    "refract",
    "INFINITY",
    "MACHINE_EPSILON",
]
