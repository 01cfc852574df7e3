"""Camera module: pinhole camera and primary ray generation."""

from .pinhole import Camera, ViewFrame, get_ray, primary_ray, setup_camera

__all__ = ["Camera", "ViewFrame", "setup_camera", "get_ray", "primary_ray"]
