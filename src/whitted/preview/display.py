"""Tone mapping and Matplotlib preview for rendered rasters.

Rasters from the rasterizer hold unbounded linear colors. Before they are
shown or written they go through the display pipeline:

    1. Tone mapping ("clamp", "reinhard" or "exposure")
    2. Gamma correction
    3. Quantisation to 8 bits: ``min(floor(256 c), 255)``

Example:
    >>> from src.whitted.preview.display import show_preview
    >>> image = rasterizer.rasterize(camera, scene)
    >>> show_preview(image, tone_map="reinhard")
"""

from __future__ import annotations

import numpy as np
import numpy.typing as npt

from src.whitted.config import ToneMapMethod

FloatImage = npt.NDArray[np.floating]


def tone_map_clamp(image: FloatImage) -> npt.NDArray[np.float64]:
    """Clip every channel to [0, 1]."""
    return np.clip(image, 0.0, 1.0).astype(np.float64)


def tone_map_reinhard(image: FloatImage) -> npt.NDArray[np.float64]:
    """Apply Reinhard tone mapping: L / (1 + L).

    Args:
        image: Linear HDR image array of shape (H, W, 3).

    Returns:
        Tone mapped image in [0, 1) range.
    """
    image = np.maximum(image, 0.0)
    return (image / (1.0 + image)).astype(np.float64)


def tone_map_exposure(
    image: FloatImage,
    exposure: float = 1.0,
) -> npt.NDArray[np.float64]:
    """Apply exposure-based tone mapping: 1 - exp(-c * exposure).

    Args:
        image: Linear HDR image array of shape (H, W, 3).
        exposure: Exposure value. Higher values brighten the image.

    Returns:
        Tone mapped image in [0, 1) range.
    """
    image = np.maximum(image, 0.0)
    return (1.0 - np.exp(-image * exposure)).astype(np.float64)


def apply_gamma(image: FloatImage, gamma: float = 1.0) -> npt.NDArray[np.float64]:
    """Gamma-encode an image in [0, 1]: ``out = in^(1/gamma)``."""
    if gamma == 1.0:
        return np.asarray(image, dtype=np.float64)

    # Negative values would produce NaN
    image = np.clip(image, 0.0, 1.0)
    return np.power(image, 1.0 / gamma)


def process_image_for_display(
    image: FloatImage,
    tone_map: ToneMapMethod = "clamp",
    gamma: float = 1.0,
    exposure: float = 1.0,
) -> npt.NDArray[np.float64]:
    """Run tone mapping and gamma correction; the result lies in [0, 1].

    Args:
        image: Linear image array of shape (H, W, 3).
        tone_map: Tone mapping method ("clamp", "reinhard", or "exposure").
        gamma: Gamma correction value (1.0 leaves values unchanged).
        exposure: Exposure value for exposure tone mapping.

    Raises:
        ValueError: For an unknown tone mapping method.
    """
    if tone_map == "clamp":
        result = tone_map_clamp(image)
    elif tone_map == "reinhard":
        result = tone_map_reinhard(image)
    elif tone_map == "exposure":
        result = tone_map_exposure(image, exposure)
    else:
        raise ValueError(f"Unknown tone mapping method: {tone_map}")

    result = apply_gamma(result, gamma)
    return np.clip(result, 0.0, 1.0)


def quantize(values: FloatImage) -> npt.NDArray[np.uint8]:
    """Map [0, 1] to 0..255 with ``floor(256 c)``, saturating at 255."""
    scaled = np.floor(np.asarray(values, dtype=np.float64) * 256.0)
    return np.clip(scaled, 0, 255).astype(np.uint8)


def image_to_uint8(
    image: FloatImage,
    *,
    tone_map: ToneMapMethod = "clamp",
    gamma: float = 1.0,
    exposure: float = 1.0,
) -> npt.NDArray[np.uint8]:
    """Convert a linear float image to an 8-bit RGB array of shape (H, W, 3)."""
    processed = process_image_for_display(
        image, tone_map=tone_map, gamma=gamma, exposure=exposure
    )
    return quantize(processed)


def show_preview(
    image: FloatImage,
    *,
    tone_map: ToneMapMethod = "clamp",
    gamma: float = 1.0,
    exposure: float = 1.0,
    title: str | None = None,
    figsize: tuple[float, float] = (8, 8),
    block: bool = True,
) -> None:
    """Display a rendered raster as a Matplotlib figure.

    Args:
        image: Linear image array of shape (H, W, 3).
        tone_map: Tone mapping method ("clamp", "reinhard", or "exposure").
        gamma: Gamma correction value.
        exposure: Exposure value for exposure tone mapping.
        title: Custom title (default shows the resolution).
        figsize: Figure size in inches (width, height).
        block: Whether to block execution until the figure is closed.
    """
    import matplotlib.pyplot as plt

    display_image = process_image_for_display(
        image, tone_map=tone_map, gamma=gamma, exposure=exposure
    )

    fig, ax = plt.subplots(1, 1, figsize=figsize)
    ax.imshow(display_image)
    ax.axis("off")

    if title is None:
        height, width = image.shape[:2]
        title = f"Render Preview - {width}x{height}"
        if tone_map != "clamp":
            title += f" ({tone_map})"
    ax.set_title(title)

    plt.tight_layout()
    plt.show(block=block)
