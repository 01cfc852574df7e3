"""Image export utilities for rendered rasters.

Supported formats:
    - PPM (binary ``P6``, 8-bit RGB), the ray tracer's native output
    - PNG (8-bit RGB)

Both go through Pillow after the display pipeline in
``src.whitted.preview.display``.

Example:
    >>> from src.whitted.preview.export import save_image
    >>> image = rasterizer.rasterize(camera, scene)
    >>> save_image(image, "out.ppm")
"""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from src.whitted.config import ToneMapMethod
from src.whitted.errors import RenderError
from src.whitted.preview.display import FloatImage, image_to_uint8

logger = logging.getLogger(__name__)

_FORMATS = {".ppm": "PPM", ".png": "PNG"}

def _write(image_uint8: npt.NDArray[np.uint8], filepath: str | Path, image_format: str) -> None:
    if image_uint8.ndim != 3 or image_uint8.shape[2] != 3:
        raise RenderError(f"Expected an (H, W, 3) raster, got shape {image_uint8.shape}")
    try:
        PILImage.fromarray(image_uint8).save(filepath, format=image_format)
    except OSError as e:
        raise RenderError(f"Could not write image {filepath}: {e}") from e
    logger.info("Wrote %s", filepath)

def save_ppm(
    image: FloatImage,
    filepath: str | Path,
    *,
    tone_map: ToneMapMethod = "clamp",
    gamma: float = 1.0,
    exposure: float = 1.0,
) -> None:
    """Save a linear raster as a binary (P6) PPM file.

    Raises:
        RenderError: If the raster has the wrong shape or the file cannot
            be written.
    """
    pixels = image_to_uint8(image, tone_map=tone_map, gamma=gamma, exposure=exposure)
    _write(pixels, filepath, "PPM")

def save_png(
    image: FloatImage,
    filepath: str | Path,
    *,
    tone_map: ToneMapMethod = "clamp",
    gamma: float = 1.0,
    exposure: float = 1.0,
) -> None:
    """Save a linear raster as an 8-bit PNG file.

    Raises:
        RenderError: If the raster has the wrong shape or the file cannot
            be written.
    """
    pixels = image_to_uint8(image, tone_map=tone_map, gamma=gamma, exposure=exposure)
    _write(pixels, filepath, "PNG")

def save_image(
    image: FloatImage,
    filepath: str | Path,
    *,
    tone_map: ToneMapMethod = "clamp",
    gamma: float = 1.0,
    exposure: float = 1.0,
) -> None:
    """Save a raster, choosing the format from the file suffix (PPM by default)."""
    image_format = _FORMATS.get(Path(filepath).suffix.lower(), "PPM")
    pixels = image_to_uint8(image, tone_map=tone_map, gamma=gamma, exposure=exposure)
    _write(pixels, filepath, image_format)
