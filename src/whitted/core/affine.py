"""Affine transformations of 3-space.

An ``Affine`` is a 3x3 linear part plus a translation; it behaves as the 4x4
matrix whose last row is (0, 0, 0, 1).

Example:
    >>> from src.whitted.core.affine import Affine
    >>> m = Affine.translate(1, 2, 3) @ Affine.scale(2, 2, 2)
    >>> m.apply_point((1, 1, 1))
    array([3., 4., 5.])
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Sequence

import numpy as np
import numpy.typing as npt

from src.whitted.core.vector import Vec3, as_vec3, unit

Mat3 = npt.NDArray[np.float64]

# |det| below this is treated as singular
SINGULAR_DETERMINANT = 1.0e-12


def _readonly(array: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
    array.flags.writeable = False
    return array


@dataclass(frozen=True, eq=False)
class Affine:
    """Affine map ``p -> linear @ p + offset``.

    Attributes:
        linear: 3x3 linear part.
        offset: Translation vector.
    """

    linear: Mat3 = field(default_factory=lambda: np.eye(3))
    offset: Vec3 = field(default_factory=lambda: np.zeros(3))

    def __post_init__(self) -> None:
        linear = np.array(self.linear, dtype=np.float64)
        if linear.shape != (3, 3):
            raise ValueError(f"Linear part must be 3x3, got shape {linear.shape}")
        object.__setattr__(self, "linear", _readonly(linear))
        object.__setattr__(self, "offset", _readonly(as_vec3(self.offset)))

    @classmethod
    def identity(cls) -> Affine:
        return cls()

    @classmethod
    def translate(cls, x: float, y: float, z: float) -> Affine:
        return cls(np.eye(3), (x, y, z))

    @classmethod
    def scale(cls, sx: float, sy: float, sz: float) -> Affine:
        return cls(np.diag((sx, sy, sz)))

    @classmethod
    def rotate(cls, axis: Sequence[float] | Vec3, degrees: float) -> Affine:
        """Rotation about ``axis`` through the origin (right-handed)."""
        k = unit(as_vec3(axis))
        if not k.any():
            raise ValueError("Rotation axis must be non-zero")
        theta = math.radians(degrees)
        skew = np.array(
            ((0.0, -k[2], k[1]), (k[2], 0.0, -k[0]), (-k[1], k[0], 0.0)),
            dtype=np.float64,
        )
        rotation = (
            np.eye(3) + math.sin(theta) * skew + (1.0 - math.cos(theta)) * skew @ skew
        )
        return cls(rotation)

    @classmethod
    def from_rows(cls, values: Sequence[float]) -> Affine:
        """Build from 12 numbers, row-major ``m00 m01 m02 tx m10 ... tz``."""
        if len(values) != 12:
            raise ValueError(f"Affine matrix needs 12 numbers, got {len(values)}")
        rows = np.array(values, dtype=np.float64).reshape(3, 4)
        return cls(rows[:, :3], rows[:, 3])

    @property
    def determinant(self) -> float:
        return float(np.linalg.det(self.linear))

    def apply_point(self, p: Vec3 | Sequence[float]) -> Vec3:
        return self.linear @ as_vec3(p) + self.offset

    def apply_vector(self, v: Vec3 | Sequence[float]) -> Vec3:
        return self.linear @ as_vec3(v)

    def apply_normal(self, n: Vec3 | Sequence[float]) -> Vec3:
        """Map a surface normal; the result is not normalised."""
        return np.linalg.inv(self.linear).T @ as_vec3(n)

    def transpose_apply(self, v: Vec3) -> Vec3:
        """Apply the transpose of the linear part."""
        return self.linear.T @ v

    def inverse(self) -> Affine:
        """Return the inverse map.

        Raises:
            numpy.linalg.LinAlgError: If the linear part is singular.
        """
        if abs(self.determinant) < SINGULAR_DETERMINANT:
            raise np.linalg.LinAlgError("Affine map is singular")
        inv = np.linalg.inv(self.linear)
        return Affine(inv, -(inv @ self.offset))

    def __matmul__(self, other: Affine) -> Affine:
        return Affine(self.linear @ other.linear, self.linear @ other.offset + self.offset)

    def allclose(self, other: Affine, atol: float = 1e-9) -> bool:
        return bool(
            np.allclose(self.linear, other.linear, atol=atol)
            and np.allclose(self.offset, other.offset, atol=atol)
        )

    def __repr__(self) -> str:
        rows = np.column_stack((self.linear, self.offset))
        return f"Affine({np.array2string(rows, precision=4, separator=', ')})"
