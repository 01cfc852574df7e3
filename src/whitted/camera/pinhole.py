"""Pinhole camera model for primary ray generation.

The camera is specified the way scene descriptions specify it:
- eye position, look-at point and an up vector
- distance from the eye to the viewing plane (``vpdist``)
- the window on the viewing plane (``x_win``, ``y_win``)
- the raster resolution (``x_res``, ``y_res``)

The camera builds an orthonormal frame from the view parameters:
- G: unit gaze direction, from eye towards look-at
- U: the up vector made orthogonal to G, normalised
- R: ``G x U``, pointing right in the image

Pixel ``(row, column)`` maps to the window point
``O + (column + dx) dR - (row + dy) dU`` where ``O`` is the top-left window
corner and ``dR``, ``dU`` are the pixel steps; ``dx = dy = 0.5`` is the pixel
centre.

Example:
    >>> from src.whitted.camera.pinhole import Camera, primary_ray
    >>> camera = Camera(eye=(0, 0, 5), lookat=(0, 0, 0), up=(0, 1, 0),
    ...                 x_res=3, y_res=3)
    >>> primary_ray(camera, 1, 1).direction
    array([ 0.,  0., -1.])
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from src.whitted.core.interval import Interval
from src.whitted.core.ray import Ray, RayType
from src.whitted.core.vector import Vec3, as_vec3, cross, dot, unit, vec3

# =============================================================================
# Camera Data Structures
# =============================================================================

DEFAULT_RESOLUTION = 400


@dataclass
class Camera:
    """Configuration for a pinhole camera.

    Attributes:
        eye: Camera position in world space.
        lookat: Point the camera is looking at.
        up: Approximate up direction; only its part orthogonal to the gaze is used.
        vpdist: Distance from the eye to the viewing plane.
        x_win: Horizontal extent of the window on the viewing plane.
        y_win: Vertical extent of the window on the viewing plane.
        x_res: Image width in pixels.
        y_res: Image height in pixels.
    """

    eye: Vec3 = field(default_factory=lambda: vec3(0.0, 0.0, 0.0))
    lookat: Vec3 = field(default_factory=lambda: vec3(0.0, 0.0, -1.0))
    up: Vec3 = field(default_factory=lambda: vec3(0.0, 1.0, 0.0))
    vpdist: float = 1.0
    x_win: Interval = field(default_factory=lambda: Interval(-1.0, 1.0))
    y_win: Interval = field(default_factory=lambda: Interval(-1.0, 1.0))
    x_res: int = DEFAULT_RESOLUTION
    y_res: int = DEFAULT_RESOLUTION

    def __post_init__(self) -> None:
        self.eye = as_vec3(self.eye)
        self.lookat = as_vec3(self.lookat)
        self.up = as_vec3(self.up)
        self.vpdist = float(self.vpdist)
        if isinstance(self.x_win, Sequence):
            self.x_win = Interval(*self.x_win)
        if isinstance(self.y_win, Sequence):
            self.y_win = Interval(*self.y_win)
        self.x_res = int(self.x_res)
        self.y_res = int(self.y_res)
        self.validate()

    def validate(self) -> None:
        """Check the camera can produce rays.

        Raises:
            ValueError: On a non-positive resolution, an empty window, a zero
                viewing distance, or a gaze parallel to the up vector.
        """
        if self.x_res <= 0 or self.y_res <= 0:
            raise ValueError(
                f"Resolution must be positive, got {self.x_res}x{self.y_res}"
            )
        if self.x_win.length <= 0.0 or self.y_win.length <= 0.0:
            raise ValueError("Camera window must have positive width and height")
        if self.vpdist <= 0.0:
            raise ValueError(f"vpdist must be positive, got {self.vpdist}")
        gaze = unit(self.lookat - self.eye)
        if not gaze.any():
            raise ValueError("eye and lookat must differ")
        if not unit(self.up - dot(self.up, gaze) * gaze).any():
            raise ValueError("up vector must not be parallel to the view direction")


@dataclass(frozen=True, eq=False)
class ViewFrame:
    """Precomputed raster geometry of a camera.

    Attributes:
        eye: Ray origin.
        corner: Top-left window corner, relative to the eye.
        d_right: Step between pixel columns.
        d_up: Step between pixel rows (rows go down, so it is subtracted).
    """

    eye: Vec3
    corner: Vec3
    d_right: Vec3
    d_up: Vec3


# =============================================================================
# Ray Generation
# =============================================================================


def setup_camera(camera: Camera) -> ViewFrame:
    """Compute the view frame and pixel steps of ``camera``.

    Call once per image; ``get_ray`` then only does vector additions.
    """
    camera.validate()
    gaze = unit(camera.lookat - camera.eye)
    up = unit(camera.up - dot(camera.up, gaze) * gaze)
    right = unit(cross(gaze, up))

    corner = camera.vpdist * gaze + camera.x_win.min * right + camera.y_win.max * up
    d_right = (camera.x_win.length / camera.x_res) * right
    d_up = (camera.y_win.length / camera.y_res) * up
    return ViewFrame(camera.eye.copy(), corner, d_right, d_up)


def get_ray(
    frame: ViewFrame, column: float, row: float, dx: float = 0.5, dy: float = 0.5
) -> Ray:
    """Primary ray through the point ``(dx, dy)`` of pixel ``(row, column)``."""
    direction = frame.corner + (column + dx) * frame.d_right - (row + dy) * frame.d_up
    return Ray(frame.eye, direction, kind=RayType.PRIMARY)


def primary_ray(
    camera: Camera, column: float, row: float, dx: float = 0.5, dy: float = 0.5
) -> Ray:
    """Convenience wrapper around ``setup_camera`` and ``get_ray``."""
    return get_ray(setup_camera(camera), column, row, dx, dy)
