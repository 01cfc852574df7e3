"""Real roots of low-degree polynomials.

The quartic solver uses ``numpy.roots`` (companion matrix eigenvalues) and
refines every real root with a few Newton steps, which is enough for the
torus intersector.
"""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np
import numpy.typing as npt

from src.whitted.core.vector import INFINITY

# Relative imaginary part below which a complex root is considered real
IMAGINARY_TOLERANCE = 1.0e-6
NEWTON_STEPS = 2


def solve_quadratic(a: float, b: float, c: float) -> tuple[float, ...]:
    """Real roots of ``a x^2 + b x + c`` in ascending order.

    Uses the cancellation-free form ``q = -(b + sign(b) sqrt(disc)) / 2``.
    A zero leading coefficient degrades to the linear case.
    """
    if a == 0.0:
        if b == 0.0:
            return ()
        return (-c / b,)

    disc = b * b - 4.0 * a * c
    if disc < 0.0:
        return ()
    if disc == 0.0:
        return (-0.5 * b / a,)

    root = math.sqrt(disc)
    q = -0.5 * (b + math.copysign(root, b))
    r1 = q / a
    r2 = c / q if q != 0.0 else -r1
    return (r1, r2) if r1 <= r2 else (r2, r1)


def solve_quartic(coefficients: Sequence[float]) -> npt.NDArray[np.float64]:
    """Real roots of a polynomial, highest degree first, sorted ascending.

    Args:
        coefficients: ``(c4, c3, c2, c1, c0)`` for ``c4 x^4 + ... + c0``.
            Lower-degree polynomials are accepted as well.

    Returns:
        Sorted array of real roots (possibly empty).
    """
    coeffs = np.asarray(coefficients, dtype=np.float64)
    roots = np.roots(coeffs)
    if roots.size == 0:
        return np.empty(0, dtype=np.float64)

    scale = np.maximum(1.0, np.abs(roots.real))
    real = roots.real[np.abs(roots.imag) <= IMAGINARY_TOLERANCE * scale].copy()

    derivative = np.polyder(coeffs)
    for _ in range(NEWTON_STEPS):
        slope = np.polyval(derivative, real)
        value = np.polyval(coeffs, real)
        step = np.zeros_like(real)
        np.divide(value, slope, out=step, where=np.abs(slope) > 1.0e-12)
        real -= step

    return np.sort(real)


def min_positive_root(
    roots: Sequence[float] | npt.NDArray[np.float64],
    limit: float = INFINITY,
    epsilon: float = 0.0,
) -> float | None:
    """Smallest root in the open interval ``(epsilon, limit)``, or None."""
    array = np.asarray(roots, dtype=np.float64)
    candidates = array[(array > epsilon) & (array < limit)]
    if candidates.size == 0:
        return None
    return float(candidates.min())
