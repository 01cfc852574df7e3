"""Scene module: scene container, plugin registry and scene description reader.

Components:
    scene: Scene with the recursive trace driver and shadow queries
    params: ParamReader tokenizer for scene description lines
    registry: PluginRegistry and the built-in plugin table
    builder: SceneBuilder reading ``.sdf`` scene descriptions
"""

from .builder import SceneBuilder, build_scene
from .params import ParamReader
from .registry import PluginMatch, PluginRegistry, default_registry
from .scene import DEFAULT_BACKGROUND, DEFAULT_TERMINATION, Scene

__all__ = [
    "Scene",
    "DEFAULT_BACKGROUND",
    "DEFAULT_TERMINATION",
    "ParamReader",
    "PluginRegistry",
    "PluginMatch",
    "default_registry",
    "SceneBuilder",
    "build_scene",
]
