"""Command-line entry point: read a scene description, render it, write it.

Usage:
    python -m src.whitted SCENE [options]

Options:
    -o, --output OUTPUT     Output image (default: SCENE with .ppm suffix)
    --preview               Show the image in a window while rendering, then
                            keep it open until the window is closed
    --show                  Show the finished image in a Matplotlib figure
    --spp N                 Primary rays per pixel (default: 1)
    --max-depth N           Maximum ray tree depth (default: 4)
    --shadow-samples N      Shadow rays per light (default: 1)
    --tone-map METHOD       clamp, reinhard or exposure (default: clamp)
    --gamma GAMMA           Display gamma (default: 1.0)
    --seed SEED             Seed for jittered sampling
    --log-level LEVEL       DEBUG, INFO, WARNING or ERROR (default: INFO)

Exit status is 0 on success, 2 for a malformed scene description, 3 when a
plugin is unknown or the scene declares no rasterizer, and 4 when rendering
or writing the image fails.

Example:
    python -m src.whitted examples/scenes/spheres.sdf -o spheres.png --spp 4
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Sequence

from src.whitted.config import DEFAULT_MAX_TREE_DEPTH, RenderConfig
from src.whitted.errors import PluginError, RenderError, SceneBuildError
from src.whitted.logging_config import setup_logging

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_BUILD_ERROR = 2
EXIT_PLUGIN_ERROR = 3
EXIT_RENDER_ERROR = 4


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="python -m src.whitted",
        description="Render a scene description with the Whitted ray tracer.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("scene", type=str, help="Scene description file (.sdf)")
    parser.add_argument(
        "-o",
        "--output",
        type=str,
        default=None,
        help="Output image, .ppm or .png (default: scene name with .ppm)",
    )
    parser.add_argument(
        "--preview",
        action="store_true",
        help="Show the image in a window while rendering and keep it open",
    )
    parser.add_argument(
        "--show",
        action="store_true",
        help="Show the finished image in a Matplotlib figure",
    )
    parser.add_argument(
        "--spp",
        type=int,
        default=1,
        help="Primary rays per pixel (default: 1)",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=DEFAULT_MAX_TREE_DEPTH,
        help=f"Maximum ray tree depth (default: {DEFAULT_MAX_TREE_DEPTH})",
    )
    parser.add_argument(
        "--shadow-samples",
        type=int,
        default=1,
        help="Shadow rays per light (default: 1)",
    )
    parser.add_argument(
        "--tone-map",
        choices=("clamp", "reinhard", "exposure"),
        default="clamp",
        help="Tone mapping for the written image (default: clamp)",
    )
    parser.add_argument(
        "--gamma",
        type=float,
        default=1.0,
        help="Display gamma (default: 1.0)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for jittered sampling",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        help="Log level (default: INFO)",
    )
    return parser.parse_args(argv)


def default_output(scene_path: str | Path) -> Path:
    """``scenes/room.sdf`` -> ``scenes/room.ppm``."""
    return Path(scene_path).with_suffix(".ppm")


def render_file(
    scene_path: str | Path,
    output_path: str | Path,
    config: RenderConfig,
    *,
    preview: bool = False,
    show: bool = False,
) -> Path:
    """Read, render and write one scene.

    Raises:
        SceneBuildError: If the scene description is malformed.
        PluginError: If a plugin is unknown or no rasterizer is declared.
        RenderError: If the image cannot be rendered or written.
    """
    from src.whitted.preview.display import show_preview
    from src.whitted.preview.export import save_image
    from src.whitted.scene.builder import build_scene

    camera, scene = build_scene(scene_path, config=config)
    if scene.rasterizer is None:
        raise PluginError(f"{scene_path}: no rasterizer specified")

    window = None
    on_row = None
    if preview:
        window = _open_preview(camera.x_res, camera.y_res)
    if window is not None:
        on_row = window.row_callback(tone_map=config.tone_map, gamma=config.gamma)

    try:
        image = scene.rasterizer.rasterize(camera, scene, on_row=on_row)
    except (ValueError, FloatingPointError) as e:
        raise RenderError(f"Rendering failed: {e}") from e

    output_path = Path(output_path)
    save_image(image, output_path, tone_map=config.tone_map, gamma=config.gamma)

    if show:
        show_preview(image, tone_map=config.tone_map, gamma=config.gamma)
    if window is not None:
        window.run()
    return output_path


def _open_preview(width: int, height: int):
    import taichi as ti

    from src.whitted.preview.interactive import InteractivePreview

    if not InteractivePreview.is_display_available():
        logger.warning("No display available; rendering without preview")
        return None

    ti.init(arch=ti.gpu)
    return InteractivePreview(width, height)


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    setup_logging(args.log_level)

    try:
        config = RenderConfig(
            max_tree_depth=args.max_depth,
            samples_per_pixel=args.spp,
            shadow_samples=args.shadow_samples,
            tone_map=args.tone_map,
            gamma=args.gamma,
            seed=args.seed,
        )
    except ValueError as e:
        logger.error("Invalid option: %s", e)
        return EXIT_BUILD_ERROR

    output = args.output if args.output is not None else default_output(args.scene)

    try:
        render_file(args.scene, output, config, preview=args.preview, show=args.show)
    except SceneBuildError as e:
        logger.error("%s", e)
        return EXIT_BUILD_ERROR
    except PluginError as e:
        logger.error("%s", e)
        return EXIT_PLUGIN_ERROR
    except RenderError as e:
        logger.error("%s", e)
        return EXIT_RENDER_ERROR
    return EXIT_OK
