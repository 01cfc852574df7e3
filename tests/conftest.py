"""Pytest configuration for ray tracer tests.

Taichi is only used by the interactive preview, but it must be initialized
once per session before any field is created.
"""

import logging

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts.
    """
    ti.init(arch=ti.cpu, random_seed=42)
    yield


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo ``setup_logging`` so caplog keeps seeing package records."""
    yield
    logger = logging.getLogger("src.whitted")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def unit_sphere():
    """Unit sphere at the origin."""
    from src.whitted.geometry.sphere import Sphere

    return Sphere((0.0, 0.0, 0.0), 1.0)


@pytest.fixture
def seeded_config():
    """Render configuration with a fixed seed and unit attenuation."""
    from src.whitted.config import RenderConfig

    return RenderConfig(attenuation=(1.0, 0.0, 0.0), seed=7)


@pytest.fixture
def scene_source():
    """Small scene description used by builder and CLI tests."""
    return "\n".join(
        [
            "eye (0, -5, 0)",
            "lookat (0, 0, 0)",
            "up (0, 0, 1)",
            "x_res 6",
            "y_res 4",
            "rasterizer basic_rasterizer",
            "shader basic_shader",
            "begin List",
            "    diffuse [0.8, 0.2, 0.2]",
            "    sphere (0, 0, 0) 1",
            "    emission [1, 1, 1]",
            "    sphere (0, -3, 3) 0.1",
            "end",
        ]
    )
