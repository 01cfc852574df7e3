"""Closed real intervals.

An interval is empty when ``min > max``; the canonical empty interval is
``(+INFINITY, -INFINITY)`` so that a union with it is the identity.
"""

from __future__ import annotations

from dataclasses import dataclass

from src.whitted.core.vector import INFINITY


@dataclass(frozen=True)
class Interval:
    """Closed interval ``[min, max]``.

    Attributes:
        min: Lower bound.
        max: Upper bound.
    """

    min: float = INFINITY
    max: float = -INFINITY

    @classmethod
    def empty(cls) -> Interval:
        return cls(INFINITY, -INFINITY)

    @classmethod
    def point(cls, x: float) -> Interval:
        return cls(float(x), float(x))

    @property
    def is_empty(self) -> bool:
        return self.min > self.max

    @property
    def length(self) -> float:
        if self.is_empty:
            return 0.0
        return self.max - self.min

    def union(self, other: Interval) -> Interval:
        return Interval(min(self.min, other.min), max(self.max, other.max))

    def include(self, x: float) -> Interval:
        return Interval(min(self.min, x), max(self.max, x))

    def translate(self, x: float) -> Interval:
        if self.is_empty:
            return self
        return Interval(self.min + x, self.max + x)

    def scale(self, c: float) -> Interval:
        """Multiply both bounds by ``c``, swapping them when ``c`` is negative."""
        if self.is_empty:
            return self
        a = self.min * c
        b = self.max * c
        return Interval(a, b) if c >= 0.0 else Interval(b, a)

    def contains(self, x: float) -> bool:
        return self.min <= x <= self.max

    def __add__(self, x: float) -> Interval:
        return self.translate(x)

    def __sub__(self, x: float) -> Interval:
        return self.translate(-x)

    def __truediv__(self, c: float) -> Interval:
        return self.scale(1.0 / c)
