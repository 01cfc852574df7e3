"""Geometry module.

This module contains the object capability model and the geometric
primitives:

Components:
    base: SceneObject, Primitive and Aggregate base classes
    sphere: Sphere given by center and radius
    block: Axis-aligned box
    triangle: Triangle with barycentric inside test
    quad: Planar quadrilateral
    torus: Torus in the x-y plane (quartic intersection)
    point: Point used as a point-light proxy
"""

from .base import Aggregate, Primitive, SceneObject
from .block import Block
from .point import Point
from .quad import Quad
from .sphere import Sphere
from .torus import Torus
from .triangle import Triangle

__all__ = [
    "SceneObject",
    "Primitive",
    "Aggregate",
    "Sphere",
    "Block",
    "Triangle",
    "Quad",
    "Torus",
    "Point",
]
