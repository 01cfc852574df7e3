"""Rasterizers: turn a camera and a scene into an image.

The basic rasterizer shoots one primary ray through each pixel centre (or
several jittered rays per pixel) and stores the traced colors in a float
raster of shape ``(y_res, x_res, 3)``; row 0 is the top of the image. Tone
mapping and file output live in ``src.whitted.preview``.

Example:
    >>> from src.whitted.core.rasterizer import BasicRasterizer
    >>> image = BasicRasterizer().rasterize(camera, scene)
    >>> image.shape
    (400, 400, 3)
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import TYPE_CHECKING, ClassVar

import numpy as np
import numpy.typing as npt

from src.whitted.camera.pinhole import get_ray, setup_camera

if TYPE_CHECKING:
    from src.whitted.camera.pinhole import Camera
    from src.whitted.scene.scene import Scene

logger = logging.getLogger(__name__)

# Type alias for progress callback
# Callback receives (finished_row, raster) after each row is complete
RowCallback = Callable[[int, npt.NDArray[np.float64]], None]


class Rasterizer(ABC):
    """Produces a raster of colors for a camera view of a scene."""

    plugin_name: ClassVar[str]

    @abstractmethod
    def rasterize(
        self, camera: Camera, scene: Scene, *, on_row: RowCallback | None = None
    ) -> npt.NDArray[np.float64]:
        """Render the scene; returns a float array of shape (y_res, x_res, 3)."""


class BasicRasterizer(Rasterizer):
    """One traced ray per pixel centre, or several jittered rays per pixel.

    Attributes:
        samples_per_pixel: Rays per pixel; None defers to the scene config.
    """

    plugin_name = "basic_rasterizer"

    def __init__(self, samples_per_pixel: int | None = None) -> None:
        if samples_per_pixel is not None and samples_per_pixel < 1:
            raise ValueError(
                f"samples_per_pixel must be >= 1, got {samples_per_pixel}"
            )
        self.samples_per_pixel = samples_per_pixel

    def rasterize(
        self, camera: Camera, scene: Scene, *, on_row: RowCallback | None = None
    ) -> npt.NDArray[np.float64]:
        frame = setup_camera(camera)
        spp = self.samples_per_pixel or scene.config.samples_per_pixel
        rng = np.random.default_rng(scene.config.seed)
        image = np.zeros((camera.y_res, camera.x_res, 3), dtype=np.float64)

        logger.info(
            "Rasterizing %dx%d at %d sample(s) per pixel",
            camera.x_res,
            camera.y_res,
            spp,
        )
        start = time.perf_counter()

        for row in range(camera.y_res):
            for column in range(camera.x_res):
                if spp == 1:
                    image[row, column] = scene.trace(get_ray(frame, column, row))
                    continue
                total = np.zeros(3, dtype=np.float64)
                for dx, dy in rng.random((spp, 2)):
                    total += scene.trace(get_ray(frame, column, row, dx, dy))
                image[row, column] = total / spp
            if on_row is not None:
                on_row(row, image)

        logger.info("Rasterized in %.2f s", time.perf_counter() - start)
        return image
