"""Exception hierarchy for the ray tracer.

Every error raised on purpose by the library derives from ``WhittedError`` so
callers (most notably the command-line entry point) can catch one type.
Numerical trouble inside intersection code is never reported through
exceptions; degenerate geometry simply never reports a hit.
"""

from __future__ import annotations


class WhittedError(Exception):
    """Base class for all ray tracer errors."""


class SceneBuildError(WhittedError):
    """Raised when a scene description cannot be turned into a scene.

    Attributes:
        line_no: 1-based line number of the offending line, if known.
        source: Name of the scene description (usually a file name).
    """

    def __init__(
        self, message: str, *, line_no: int | None = None, source: str | None = None
    ) -> None:
        self.line_no = line_no
        self.source = source
        location = ""
        if source is not None and line_no is not None:
            location = f"{source}:{line_no}: "
        elif line_no is not None:
            location = f"line {line_no}: "
        super().__init__(f"{location}{message}")


class PluginError(WhittedError):
    """Raised for unknown, duplicate or unusable plugin registrations."""


class RenderError(WhittedError):
    """Raised when rendering or writing the output image fails."""
