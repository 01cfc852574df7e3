"""Aggregate objects: containers that are themselves scene objects.

Components:
    object_list: ObjectList, a flat list scanned in order
    transform: Transform, a single child under an affine map
    bvh: BVH, an automatically built bounding-volume hierarchy
"""

from .bvh import BVH
from .object_list import ObjectList
from .transform import Transform

__all__ = ["ObjectList", "Transform", "BVH"]
