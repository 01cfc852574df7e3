"""Display, export and interactive preview of rendered rasters."""

from src.whitted.preview.display import (
    apply_gamma,
    image_to_uint8,
    process_image_for_display,
    quantize,
    show_preview,
    tone_map_clamp,
    tone_map_exposure,
    tone_map_reinhard,
)
from src.whitted.preview.export import save_image, save_png, save_ppm
from src.whitted.preview.interactive import InteractivePreview

__all__ = [
    "InteractivePreview",
    "apply_gamma",
    "image_to_uint8",
    "process_image_for_display",
    "quantize",
    "save_image",
    "save_png",
    "save_ppm",
    "show_preview",
    "tone_map_clamp",
    "tone_map_exposure",
    "tone_map_reinhard",
]
