"""Tests for the preview module.

This module tests the preview/display, preview/export and
preview/interactive functionality including:
- Tone mapping functions (clamp, Reinhard, exposure)
- Gamma correction and 8-bit quantisation
- PPM and PNG export
- The Taichi display buffer of the interactive preview

Note: Tests never open a window. The Matplotlib preview runs on the Agg
backend with ``plt.show`` replaced.
"""

import sys

import numpy as np
import pytest
from PIL import Image as PILImage


class TestToneMaps:
    """Test tone mapping functions."""

    def test_clamp(self):
        """Test that clamping clips to [0, 1]."""
        from src.whitted.preview.display import tone_map_clamp

        image = np.array([[[-0.5, 0.5, 3.0]]])
        assert np.allclose(tone_map_clamp(image), [[[0.0, 0.5, 1.0]]])

    def test_reinhard_formula(self):
        """Test Reinhard is L / (1 + L) and ignores negative input."""
        from src.whitted.preview.display import tone_map_reinhard

        image = np.array([[[1.0, 3.0, -1.0]]])
        assert np.allclose(tone_map_reinhard(image), [[[0.5, 0.75, 0.0]]])

    def test_exposure_formula(self):
        """Test exposure mapping is 1 - exp(-c * exposure)."""
        from src.whitted.preview.display import tone_map_exposure

        image = np.full((2, 2, 3), 0.5)
        result = tone_map_exposure(image, exposure=2.0)
        assert np.allclose(result, 1.0 - np.exp(-1.0))

    def test_exposure_higher_value_brighter(self):
        """Test that a higher exposure brightens the image."""
        from src.whitted.preview.display import tone_map_exposure

        image = np.full((2, 2, 3), 0.3)
        assert np.all(tone_map_exposure(image, 2.0) > tone_map_exposure(image, 1.0))


class TestApplyGamma:
    """Test gamma correction."""

    def test_gamma_1_no_change(self):
        """Test that gamma 1.0 leaves values unchanged."""
        from src.whitted.preview.display import apply_gamma

        image = np.random.default_rng(0).random((4, 4, 3))
        assert np.allclose(apply_gamma(image, 1.0), image)

    def test_gamma_brightens_midtones(self):
        """Test that gamma 2.2 brightens midtones and keeps the ends."""
        from src.whitted.preview.display import apply_gamma

        image = np.array([[[0.0, 0.5, 1.0]]])
        result = apply_gamma(image, 2.2)
        assert result[0, 0, 0] == 0.0
        assert result[0, 0, 1] == pytest.approx(0.5 ** (1 / 2.2))
        assert result[0, 0, 2] == 1.0


class TestProcessImageForDisplay:
    """Test the full display pipeline."""

    def test_output_always_valid(self):
        """Test every method produces values in [0, 1]."""
        from src.whitted.preview.display import process_image_for_display

        image = np.random.default_rng(1).normal(0.5, 3.0, (8, 8, 3))
        for method in ("clamp", "reinhard", "exposure"):
            result = process_image_for_display(image, tone_map=method, gamma=2.2)
            assert np.all(result >= 0.0)
            assert np.all(result <= 1.0)

    def test_invalid_tone_map_raises(self):
        """Test that an unknown method raises ValueError."""
        from src.whitted.preview.display import process_image_for_display

        with pytest.raises(ValueError, match="Unknown tone mapping"):
            process_image_for_display(np.zeros((2, 2, 3)), tone_map="filmic")


class TestQuantize:
    """Test conversion to 8 bits."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            (0.0, 0),
            (1 / 256, 1),
            (0.5, 128),
            (0.999, 255),
            (1.0, 255),
        ],
    )
    def test_floor_256(self, value, expected):
        """Test floor(256 c) saturating at 255."""
        from src.whitted.preview.display import quantize

        assert quantize(np.array([value]))[0] == expected

    def test_image_to_uint8(self):
        """Test the uint8 conversion clamps HDR values by default."""
        from src.whitted.preview.display import image_to_uint8

        image = np.array([[[0.0, 0.0, 0.0], [5.0, 1.0, 0.25]]])
        result = image_to_uint8(image)
        assert result.dtype == np.uint8
        assert result.shape == (1, 2, 3)
        assert result[0, 0].tolist() == [0, 0, 0]
        assert result[0, 1].tolist() == [255, 255, 64]


class TestExport:
    """Test image files."""

    def test_save_ppm(self, tmp_path):
        """Test a binary PPM with the expected size and pixels."""
        from src.whitted.preview.export import save_ppm

        image = np.zeros((2, 3, 3))
        image[0, 0] = (1.0, 0.5, 0.0)
        path = tmp_path / "out.ppm"
        save_ppm(image, path)

        assert path.read_bytes().startswith(b"P6")
        with PILImage.open(path) as img:
            assert img.size == (3, 2)
            assert img.mode == "RGB"
            assert img.getpixel((0, 0)) == (255, 128, 0)
            assert img.getpixel((2, 1)) == (0, 0, 0)

    def test_save_png(self, tmp_path):
        """Test that save_png creates a valid PNG file."""
        from src.whitted.preview.export import save_png

        image = np.zeros((32, 64, 3))
        image[:, :, 0] = np.linspace(0, 1, 64)
        path = tmp_path / "out.png"
        save_png(image, path, gamma=2.2)

        with PILImage.open(path) as img:
            assert img.format == "PNG"
            assert img.size == (64, 32)

    @pytest.mark.parametrize(
        "name, image_format",
        [("a.png", "PNG"), ("a.PPM", "PPM"), ("a.ppm", "PPM"), ("a.out", "PPM")],
    )
    def test_save_image_picks_format(self, tmp_path, name, image_format):
        """Test the format follows the suffix, with PPM as the default."""
        from src.whitted.preview.export import save_image

        path = tmp_path / name
        save_image(np.full((4, 4, 3), 0.5), path, tone_map="reinhard")
        with PILImage.open(path) as img:
            assert img.format == image_format

    def test_bad_shape_raises(self, tmp_path):
        """Test a raster without color channels."""
        from src.whitted.errors import RenderError
        from src.whitted.preview.export import save_ppm

        with pytest.raises(RenderError, match="shape"):
            save_ppm(np.zeros((4, 4)), tmp_path / "flat.ppm")

    def test_unwritable_path_raises(self, tmp_path):
        """Test a missing output directory."""
        from src.whitted.errors import RenderError
        from src.whitted.preview.export import save_image

        with pytest.raises(RenderError, match="Could not write"):
            save_image(np.zeros((2, 2, 3)), tmp_path / "missing" / "out.ppm")


class TestShowPreview:
    """Test the Matplotlib preview without showing a window."""

    def test_figure_title(self, monkeypatch):
        """Test the default title names the resolution and tone map."""
        import matplotlib

        matplotlib.use("Agg")
        import matplotlib.pyplot as plt

        from src.whitted.preview.display import show_preview

        calls = []
        monkeypatch.setattr(plt, "show", lambda **kwargs: calls.append(kwargs))
        try:
            show_preview(np.zeros((2, 4, 3)), tone_map="reinhard", block=False)
            assert calls == [{"block": False}]
            assert plt.gcf().axes[0].get_title() == "Render Preview - 4x2 (reinhard)"
        finally:
            plt.close("all")


class TestInteractivePreview:
    """Test the Taichi display buffer (no window is opened)."""

    def test_update_image_layout(self):
        """Test the buffer is (x, y) with the origin at the bottom-left."""
        from src.whitted.preview.interactive import InteractivePreview

        preview = InteractivePreview(4, 2)
        image = np.zeros((2, 4, 3))
        image[0, 0] = (1.0, 0.0, 0.0)  # top-left
        image[1, 3] = (0.0, 0.0, 1.0)  # bottom-right
        preview.update_image(image)

        buffer = preview.display_image.to_numpy()
        assert buffer.shape == (4, 2, 3)
        assert np.allclose(buffer[0, 1], (1.0, 0.0, 0.0))
        assert np.allclose(buffer[3, 0], (0.0, 0.0, 1.0))

    def test_update_image_shape_mismatch(self):
        """Test that a raster of the wrong size is rejected."""
        from src.whitted.preview.interactive import InteractivePreview

        preview = InteractivePreview(4, 2)
        with pytest.raises(ValueError, match="doesn't match"):
            preview.update_image(np.zeros((4, 2, 3)))

    def test_row_callback_waits_for_batch(self):
        """Test the callback does nothing between refreshes."""
        from src.whitted.preview.interactive import InteractivePreview

        preview = InteractivePreview(4, 10)
        on_row = preview.row_callback(every=8)
        raster = np.ones((10, 4, 3))
        for row in range(6):
            on_row(row, raster)
        assert preview._window is None
        assert np.allclose(preview.display_image.to_numpy(), 0.0)

    def test_close_without_window(self):
        """Test closing a preview that never opened a window."""
        from src.whitted.preview.interactive import InteractivePreview

        preview = InteractivePreview(2, 2)
        preview.close()
        assert preview._window is None

    @pytest.mark.skipif(sys.platform != "linux", reason="X11/Wayland detection")
    def test_display_detection(self, monkeypatch):
        """Test headless detection from the environment."""
        from src.whitted.preview.interactive import InteractivePreview

        monkeypatch.delenv("DISPLAY", raising=False)
        monkeypatch.delenv("WAYLAND_DISPLAY", raising=False)
        assert InteractivePreview.is_display_available() is False

        monkeypatch.setenv("DISPLAY", ":0")
        assert InteractivePreview.is_display_available() is True


class TestModuleExports:
    """Test that all expected symbols are exported from the module."""

    def test_exports(self):
        """Test that display and export functions are exported."""
        from src.whitted.preview import (
            InteractivePreview,
            image_to_uint8,
            save_image,
            save_png,
            save_ppm,
            show_preview,
        )

        assert callable(show_preview)
        assert callable(save_image)
        assert callable(save_png)
        assert callable(save_ppm)
        assert callable(image_to_uint8)
        assert isinstance(InteractivePreview, type)
