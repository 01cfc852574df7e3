"""Tokenizer for scene description lines.

A ``ParamReader`` consumes one line from the left. Every read method looks for
a specific pattern at the current position; if it is there the pattern is
consumed and its value returned, otherwise the reader is left untouched and
None is returned. Recognised patterns:

    word        identifier, e.g. ``sphere`` or ``Phong_exp``
    number      ``-1.5e3``
    vector      ``(x, y, z)``
    color       ``[r, g, b]``
    interval    ``(a, b)``
    matrix      ``(m00, m01, m02, tx; m10, m11, m12, ty; m20, m21, m22, tz)``

Example:
    >>> from src.whitted.scene.params import ParamReader
    >>> reader = ParamReader("sphere (0, 0, -1) 0.5")
    >>> reader.keyword("sphere"), reader.vector(), reader.number()
    (True, array([ 0.,  0., -1.]), 0.5)
"""

from __future__ import annotations

import re

from src.whitted.core.affine import Affine
from src.whitted.core.color import Color, color
from src.whitted.core.interval import Interval
from src.whitted.core.vector import Vec3, vec3

_NUM = r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?"
_SEP = r"\s*,\s*"

_WORD_RE = re.compile(r"\s*([A-Za-z_][A-Za-z0-9_]*)(?![A-Za-z0-9_])")
_NUMBER_RE = re.compile(rf"\s*({_NUM})(?![\w.])")
_INTEGER_RE = re.compile(r"\s*([-+]?\d+)(?![\w.])")
_VECTOR_RE = re.compile(
    rf"\s*\(\s*({_NUM}){_SEP}({_NUM}){_SEP}({_NUM})\s*\)"
)
_COLOR_RE = re.compile(
    rf"\s*\[\s*({_NUM}){_SEP}({_NUM}){_SEP}({_NUM})\s*\]"
)
_INTERVAL_RE = re.compile(rf"\s*\(\s*({_NUM}){_SEP}({_NUM})\s*\)")
_ROW = rf"({_NUM}){_SEP}({_NUM}){_SEP}({_NUM}){_SEP}({_NUM})"
_MATRIX_RE = re.compile(
    rf"\s*\(\s*{_ROW}\s*;\s*{_ROW}\s*;\s*{_ROW}\s*\)"
)


class ParamReader:
    """Consumes typed parameters from the front of a line.

    Attributes:
        line: The full line as given.
        rest: The part of the line not consumed yet.
    """

    def __init__(self, line: str) -> None:
        self.line = line
        self.rest = line

    def _take(self, pattern: re.Pattern[str]) -> re.Match[str] | None:
        match = pattern.match(self.rest)
        if match is not None:
            self.rest = self.rest[match.end():]
        return match

    @property
    def at_end(self) -> bool:
        return not self.rest.strip()

    def peek_word(self) -> str | None:
        match = _WORD_RE.match(self.rest)
        return match.group(1) if match is not None else None

    def word(self) -> str | None:
        match = self._take(_WORD_RE)
        return match.group(1) if match is not None else None

    def keyword(self, name: str) -> bool:
        """Consume ``name`` if it is the next whole word."""
        if self.peek_word() != name:
            return False
        self._take(_WORD_RE)
        return True

    def number(self) -> float | None:
        match = self._take(_NUMBER_RE)
        return float(match.group(1)) if match is not None else None

    def integer(self) -> int | None:
        match = self._take(_INTEGER_RE)
        return int(match.group(1)) if match is not None else None

    def vector(self) -> Vec3 | None:
        match = self._take(_VECTOR_RE)
        if match is None:
            return None
        return vec3(*(float(g) for g in match.groups()))

    def color(self) -> Color | None:
        match = self._take(_COLOR_RE)
        if match is None:
            return None
        return color(*(float(g) for g in match.groups()))

    def interval(self) -> Interval | None:
        match = self._take(_INTERVAL_RE)
        if match is None:
            return None
        return Interval(float(match.group(1)), float(match.group(2)))

    def matrix(self) -> Affine | None:
        match = self._take(_MATRIX_RE)
        if match is None:
            return None
        return Affine.from_rows([float(g) for g in match.groups()])

    def __repr__(self) -> str:
        return f"ParamReader(rest={self.rest!r})"
