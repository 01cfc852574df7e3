"""Vector utilities for the host-side ray tracer.

Vectors and colors are plain ``numpy`` arrays of shape (3,) and dtype float64.
The helpers here wrap the handful of operations the tracer needs so that the
intersection code reads like the math it implements.

Example:
    >>> from src.whitted.core.vector import vec3, unit, reflect
    >>> d = unit(vec3(1.0, -1.0, 0.0))
    >>> reflect(d, vec3(0.0, 1.0, 0.0))
    array([0.70710678, 0.70710678, 0.        ])
"""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np
import numpy.typing as npt

Vec3 = npt.NDArray[np.float64]

# Distances at or beyond this value count as "no hit"
INFINITY = 1.0e20
MACHINE_EPSILON = 1.0e-5


def vec3(x: float = 0.0, y: float = 0.0, z: float = 0.0) -> Vec3:
    """Create a 3-component float64 vector."""
    return np.array((x, y, z), dtype=np.float64)


def as_vec3(value: Sequence[float] | Vec3) -> Vec3:
    """Convert any 3-element sequence into a fresh float64 vector.

    Raises:
        ValueError: If the value does not have exactly three components.
    """
    array = np.array(value, dtype=np.float64).reshape(-1)
    if array.shape != (3,):
        raise ValueError(f"Expected 3 components, got {array.shape[0]}")
    return array


def _axis(index: int) -> Vec3:
    v = np.zeros(3, dtype=np.float64)
    v[index] = 1.0
    v.flags.writeable = False
    return v


X_AXIS = _axis(0)
Y_AXIS = _axis(1)
Z_AXIS = _axis(2)
AXES = (X_AXIS, Y_AXIS, Z_AXIS)


def dot(a: Vec3, b: Vec3) -> float:
    return float(a[0] * b[0] + a[1] * b[1] + a[2] * b[2])


def cross(a: Vec3, b: Vec3) -> Vec3:
    return np.array(
        (
            a[1] * b[2] - a[2] * b[1],
            a[2] * b[0] - a[0] * b[2],
            a[0] * b[1] - a[1] * b[0],
        ),
        dtype=np.float64,
    )


def length_squared(v: Vec3) -> float:
    return dot(v, v)


def length(v: Vec3) -> float:
    return math.sqrt(dot(v, v))


def unit(v: Vec3) -> Vec3:
    """Return ``v`` scaled to unit length; the zero vector maps to zero."""
    n = length(v)
    if n == 0.0:
        return np.zeros(3, dtype=np.float64)
    return v / n


def orthogonal_to(v: Vec3) -> Vec3:
    """Return a unit vector perpendicular to ``v``.

    The helper axis is the one along which ``v`` has its smallest component,
    which keeps the cross product well conditioned.
    """
    helper = AXES[int(np.argmin(np.abs(v)))]
    return unit(cross(v, helper))


def reflect(incident: Vec3, normal: Vec3) -> Vec3:
    """Mirror ``incident`` about the plane with the given unit normal.

    Args:
        incident: Direction travelling towards the surface.
        normal: Unit surface normal (either orientation).

    Returns:
        The reflected direction, travelling away from the surface.
    """
    return incident - 2.0 * dot(incident, normal) * normal


def refract(
    incident: Vec3, normal: Vec3, n1: float, n2: float
) -> tuple[Vec3, bool]:
    """Refract a direction through an interface using Snell's law.

    With ``E = -incident`` and the normal turned towards ``E``:
    ``ratio = n1 / n2``, ``cos = N.E`` and the transmitted direction is
    ``ratio * (N cos - E) - N sqrt(1 - ratio^2 (1 - cos^2))``.

    When the radicand is negative there is no transmitted ray (total internal
    reflection). The mirror direction is returned instead and the flag is set,
    so callers can keep the ray inside the medium.

    Args:
        incident: Unit direction travelling towards the surface.
        normal: Unit surface normal (either orientation).
        n1: Refractive index on the incident side.
        n2: Refractive index on the transmitted side.

    Returns:
        Tuple of (unit direction, total_internal_reflection).
    """
    eye = -incident
    cos_theta = dot(normal, eye)
    if cos_theta < 0.0:
        normal = -normal
        cos_theta = -cos_theta

    ratio = n1 / n2
    radicand = 1.0 - ratio * ratio * (1.0 - cos_theta * cos_theta)
    if radicand < 0.0:
        return unit(reflect(incident, normal)), True

    vertical = ratio * (normal * cos_theta - eye)
    return unit(vertical - normal * math.sqrt(radicand)), False
