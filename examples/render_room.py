#!/usr/bin/env python3
"""Render a box room built through the Python API instead of a scene file.

The room has a red left wall, a green right wall, white floor, ceiling and
back wall, a mirrored sphere, a glass sphere and a small emitting sphere
below the ceiling.

Usage:
    python -m examples.render_room [options]

Options:
    --size SIZE         Image width and height in pixels (default: 256)
    --spp SPP           Primary rays per pixel (default: 1)
    --output OUTPUT     Output file path (default: room.png)
    --preview           Show the image in a window while rendering

Example:
    python -m examples.render_room --size 128 --spp 4
"""

from __future__ import annotations

import argparse
import logging
import sys

from src.whitted.aggregates.bvh import BVH
from src.whitted.camera.pinhole import Camera
from src.whitted.config import RenderConfig
from src.whitted.core.rasterizer import BasicRasterizer
from src.whitted.errors import WhittedError
from src.whitted.geometry.base import SceneObject
from src.whitted.geometry.quad import Quad
from src.whitted.geometry.sphere import Sphere
from src.whitted.logging_config import setup_logging
from src.whitted.materials.material import Material
from src.whitted.materials.shader import BasicShader
from src.whitted.preview.export import save_image
from src.whitted.scene.scene import Scene

logger = logging.getLogger("src.whitted.examples.render_room")

ROOM_SIZE = 10.0
RED_WALL = (0.65, 0.05, 0.05)
GREEN_WALL = (0.12, 0.45, 0.15)
WHITE_WALL = (0.73, 0.73, 0.73)


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render a box room built with the Python API.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--size", type=int, default=256, help="Image size (default: 256)")
    parser.add_argument("--spp", type=int, default=1, help="Rays per pixel (default: 1)")
    parser.add_argument(
        "--output", type=str, default="room.png", help="Output file (default: room.png)"
    )
    parser.add_argument(
        "--preview", action="store_true", help="Show the image while rendering"
    )
    return parser.parse_args()


def _add(root: BVH, obj: SceneObject, material: Material, shader: BasicShader) -> None:
    obj.material = material
    obj.shader = shader
    obj.parent = root
    root.add_child(obj)


def create_room_scene(size: int, config: RenderConfig) -> tuple[Camera, Scene]:
    """Build the room, its lights and a camera looking in through the open side."""
    s = ROOM_SIZE
    shader = BasicShader()
    root = BVH()

    def wall(diffuse: tuple[float, float, float]) -> Material:
        return Material(diffuse=diffuse, specular=(0.0, 0.0, 0.0))

    # Walls; the room spans [0, s] on every axis and is open towards -y
    _add(root, Quad((0, 0, 0), (0, s, 0), (0, s, s), (0, 0, s)), wall(RED_WALL), shader)
    _add(root, Quad((s, 0, 0), (s, 0, s), (s, s, s), (s, s, 0)), wall(GREEN_WALL), shader)
    _add(root, Quad((0, s, 0), (s, s, 0), (s, s, s), (0, s, s)), wall(WHITE_WALL), shader)
    _add(root, Quad((0, 0, 0), (s, 0, 0), (s, s, 0), (0, s, 0)), wall(WHITE_WALL), shader)
    _add(root, Quad((0, 0, s), (0, s, s), (s, s, s), (s, 0, s)), wall(WHITE_WALL), shader)

    mirror = Material(
        diffuse=(0.05, 0.05, 0.05),
        reflectivity=(0.9, 0.9, 0.9),
        phong_exp=60.0,
    )
    glass = Material(
        diffuse=(0.0, 0.0, 0.0),
        reflectivity=(0.05, 0.05, 0.05),
        translucency=(0.9, 0.9, 0.9),
        phong_exp=80.0,
        ref_index=1.5,
    )
    _add(root, Sphere((0.3 * s, 0.65 * s, 0.2 * s), 0.2 * s), mirror, shader)
    _add(root, Sphere((0.7 * s, 0.35 * s, 0.18 * s), 0.18 * s), glass, shader)

    light = Sphere((0.5 * s, 0.5 * s, 0.9 * s), 0.03 * s)
    _add(root, light, Material(emission=(1.0, 1.0, 1.0)), shader)
    root.close()

    camera = Camera(
        eye=(0.5 * s, -1.5 * s, 0.5 * s),
        lookat=(0.5 * s, 0.5 * s, 0.5 * s),
        up=(0.0, 0.0, 1.0),
        vpdist=2.0,
        x_win=(-0.5, 0.5),
        y_win=(-0.5, 0.5),
        x_res=size,
        y_res=size,
    )
    scene = Scene(
        root,
        lights=[light],
        rasterizer=BasicRasterizer(),
        config=config,
    )
    return camera, scene


def main() -> int:
    """Main entry point."""
    args = parse_args()
    setup_logging("INFO")

    try:
        config = RenderConfig(samples_per_pixel=args.spp, seed=0)
        camera, scene = create_room_scene(args.size, config)

        on_row = None
        if args.preview:
            import taichi as ti

            from src.whitted.preview.interactive import InteractivePreview

            ti.init(arch=ti.gpu)
            preview = InteractivePreview(camera.x_res, camera.y_res)
            on_row = preview.row_callback()

        image = scene.rasterizer.rasterize(camera, scene, on_row=on_row)
        save_image(image, args.output)
        logger.info("Saved to %s", args.output)
        return 0
    except (WhittedError, ValueError) as e:
        logger.error("%s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
