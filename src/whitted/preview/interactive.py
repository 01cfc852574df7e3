"""Interactive preview window using Taichi GGUI.

Shows the raster while the rasterizer fills it in, row by row, and keeps
the finished image on screen until the window is closed.

Example:
    >>> from src.whitted.core.rasterizer import BasicRasterizer
    >>> from src.whitted.preview.interactive import InteractivePreview
    >>>
    >>> preview = InteractivePreview(camera.x_res, camera.y_res)
    >>> image = BasicRasterizer().rasterize(
    ...     camera, scene, on_row=preview.row_callback()
    ... )
    >>> preview.run()
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import numpy as np
import taichi as ti

from src.whitted.config import ToneMapMethod
from src.whitted.preview.display import process_image_for_display

if TYPE_CHECKING:
    import numpy.typing as npt

    from src.whitted.core.rasterizer import RowCallback


class InteractivePreview:
    """Preview window for a raster being rendered.

    The window itself is created lazily, so the display buffer can be
    filled on machines without a display.

    Attributes:
        width: Window width in pixels.
        height: Window height in pixels.
        display_image: Taichi field storing the display image (RGB float),
            indexed ``(x, y)`` with the origin at the bottom-left.
    """

    def __init__(
        self,
        width: int,
        height: int,
        *,
        title: str = "Whitted - Render Preview",
    ) -> None:
        self.width = width
        self.height = height
        self._title = title
        self._is_initialized = False

        self._window: ti.ui.Window | None = None
        self._canvas: ti.ui.Canvas | None = None

        self.display_image: ti.MatrixField = ti.Vector.field(
            3, dtype=ti.f32, shape=(width, height)
        )

    def _initialize_window(self) -> None:
        if self._is_initialized:
            return

        self._window = ti.ui.Window(
            name=self._title,
            res=(self.width, self.height),
            vsync=True,
        )
        self._canvas = self._window.get_canvas()
        self._is_initialized = True

    @property
    def window(self) -> ti.ui.Window:
        """Get the Taichi GGUI window, initializing if needed."""
        if self._window is None:
            self._initialize_window()
        assert self._window is not None
        return self._window

    @property
    def canvas(self) -> ti.ui.Canvas:
        if self._canvas is None:
            self._initialize_window()
        assert self._canvas is not None
        return self._canvas

    def update_image(self, image: npt.NDArray[np.floating]) -> None:
        """Update the display image from a raster with values in [0, 1].

        Args:
            image: Array of shape (height, width, 3), row 0 at the top.

        Raises:
            ValueError: If image shape doesn't match (height, width, 3).
        """
        expected_shape = (self.height, self.width, 3)
        if image.shape != expected_shape:
            raise ValueError(
                f"Image shape {image.shape} doesn't match expected {expected_shape}"
            )

        # Taichi fields are (x, y) with the origin at the bottom-left
        image_transposed = np.ascontiguousarray(
            np.transpose(np.flipud(image), (1, 0, 2)), dtype=np.float32
        )
        self.display_image.from_numpy(image_transposed)

    def row_callback(
        self,
        *,
        tone_map: ToneMapMethod = "clamp",
        gamma: float = 1.0,
        every: int = 8,
    ) -> RowCallback:
        """Build an ``on_row`` callback for ``Rasterizer.rasterize``.

        The callback refreshes the display every ``every`` rows and after the
        last row. Once the window has been closed it only stops refreshing;
        rendering carries on.
        """

        def on_row(row: int, raster: npt.NDArray[np.float64]) -> None:
            if (row + 1) % every and row + 1 != raster.shape[0]:
                return
            if self._is_initialized and not self.is_running():
                return
            self.update_image(
                process_image_for_display(raster, tone_map=tone_map, gamma=gamma)
            )
            self.show_frame()

        return on_row

    def is_running(self) -> bool:
        """True while the window is open."""
        return self.window.running

    def show_frame(self) -> None:
        """Present the current display image once."""
        self.canvas.set_image(self.display_image)
        self.window.show()

    def run(self) -> None:
        """Show the display image until the window is closed."""
        self._initialize_window()

        while self.is_running():
            self.show_frame()

    def close(self) -> None:
        if self._window is not None:
            self._window.running = False

    @staticmethod
    def is_display_available() -> bool:
        """Check if a display is available for GUI rendering.

        Returns:
            True if a display is available, False for headless environments.
        """
        display = os.environ.get("DISPLAY")
        wayland = os.environ.get("WAYLAND_DISPLAY")

        if os.name == "nt":
            return True

        if os.uname().sysname == "Darwin":
            # SSH session without X forwarding
            if os.environ.get("SSH_CONNECTION") and not display:
                return False
            return True

        return bool(display or wayland)
