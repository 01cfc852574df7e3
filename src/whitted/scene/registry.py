"""Plugin registry: maps scene description lines to object factories.

The registry is an explicit value handed to the scene builder; there is no
module-level table that plugins register themselves into. ``default_registry``
returns a fresh registry with all built-in plugins.

Line shapes and the kind they select:

    begin <name> ...        aggregate
    shader <name> ...       shader
    envmap <name> ...       envmap
    rasterizer <name> ...   rasterizer
    <name> ...              primitive

A factory receives a ``ParamReader`` positioned after the plugin name and
returns the new instance, or None if the parameters are ill-formed.

Example:
    >>> from src.whitted.scene.registry import default_registry
    >>> registry = default_registry()
    >>> match = registry.parse("sphere (0, 0, 0) 1")
    >>> match.kind, match.name
    ('primitive', 'sphere')
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Literal, get_args

from src.whitted.aggregates.bvh import BVH
from src.whitted.aggregates.object_list import ObjectList
from src.whitted.aggregates.transform import Transform
from src.whitted.core.rasterizer import BasicRasterizer
from src.whitted.errors import PluginError
from src.whitted.geometry.block import Block
from src.whitted.geometry.point import Point
from src.whitted.geometry.quad import Quad
from src.whitted.geometry.sphere import Sphere
from src.whitted.geometry.torus import Torus
from src.whitted.geometry.triangle import Triangle
from src.whitted.materials.envmap import ConstantEnvmap, GradientEnvmap
from src.whitted.materials.shader import BasicShader
from src.whitted.scene.params import ParamReader

PluginKind = Literal["primitive", "aggregate", "shader", "envmap", "rasterizer"]
PLUGIN_KINDS: tuple[str, ...] = get_args(PluginKind)

Factory = Callable[[ParamReader], Any]

# Leading keyword of a line -> plugin kind
_KIND_KEYWORDS = {
    "begin": "aggregate",
    "shader": "shader",
    "envmap": "envmap",
    "rasterizer": "rasterizer",
}


@dataclass(frozen=True)
class PluginMatch:
    """Result of matching a line against the registry.

    Attributes:
        kind: Plugin kind selected by the line.
        name: Plugin name.
        instance: The created plugin, or None if its parameters were ill-formed.
    """

    kind: str
    name: str
    instance: Any


class PluginRegistry:
    """Table of ``(kind, name) -> factory``."""

    def __init__(self) -> None:
        self._factories: dict[tuple[str, str], Factory] = {}

    def register(
        self, kind: str, name: str, factory: Factory, *, replace: bool = False
    ) -> None:
        """Add a factory.

        Raises:
            PluginError: For an unknown kind, or a duplicate without ``replace``.
        """
        if kind not in PLUGIN_KINDS:
            raise PluginError(f"Unknown plugin kind {kind!r}")
        if (kind, name) in self._factories and not replace:
            raise PluginError(f"Plugin {kind} {name!r} is already registered")
        self._factories[(kind, name)] = factory

    def lookup(self, kind: str, name: str) -> Factory:
        try:
            return self._factories[(kind, name)]
        except KeyError:
            known = ", ".join(self.names(kind)) or "none"
            raise PluginError(
                f"No {kind} plugin named {name!r} (known: {known})"
            ) from None

    def names(self, kind: str) -> list[str]:
        return sorted(name for k, name in self._factories if k == kind)

    def __contains__(self, key: tuple[str, str]) -> bool:
        return key in self._factories

    def __len__(self) -> int:
        return len(self._factories)

    def parse(self, line: str) -> PluginMatch | None:
        """Create the plugin a line describes.

        Returns:
            A ``PluginMatch``, or None if the line does not start with a
            plugin keyword or a registered primitive name.

        Raises:
            PluginError: If a kind keyword names an unregistered plugin.
        """
        reader = ParamReader(line)
        first = reader.peek_word()
        if first is None:
            return None

        kind = _KIND_KEYWORDS.get(first)
        if kind is None:
            if ("primitive", first) not in self:
                return None
            kind = "primitive"
        else:
            reader.word()
            if reader.peek_word() is None:
                raise PluginError(f"Missing {kind} name after {first!r}")

        name = reader.word()
        factory = self.lookup(kind, name)
        return PluginMatch(kind, name, factory(reader))


# =============================================================================
# Built-in factories
# =============================================================================


def _read_sphere(reader: ParamReader) -> Sphere | None:
    center = reader.vector()
    radius = reader.number()
    if center is None or radius is None:
        return None
    return Sphere(center, radius)


def _read_block(reader: ParamReader) -> Block | None:
    lo = reader.vector()
    hi = reader.vector()
    if lo is None or hi is None:
        return None
    return Block(lo, hi)


def _read_triangle(reader: ParamReader) -> Triangle | None:
    vertices = [reader.vector() for _ in range(3)]
    if any(v is None for v in vertices):
        return None
    return Triangle(*vertices)


def _read_quad(reader: ParamReader) -> Quad | None:
    vertices = [reader.vector() for _ in range(4)]
    if any(v is None for v in vertices):
        return None
    return Quad(*vertices)


def _read_torus(reader: ParamReader) -> Torus | None:
    major = reader.number()
    minor = reader.number()
    if major is None or minor is None:
        return None
    return Torus(major, minor)


def _read_point(reader: ParamReader) -> Point | None:
    position = reader.vector()
    if position is None:
        return None
    return Point(position)


def _read_transform(reader: ParamReader) -> Transform | None:
    matrix = reader.matrix()
    if matrix is None:
        return None
    return Transform(matrix)


def _read_basic_envmap(reader: ParamReader) -> ConstantEnvmap | None:
    background = reader.color()
    if background is None:
        return None
    return ConstantEnvmap(background)


def _read_gradient_envmap(reader: ParamReader) -> GradientEnvmap | None:
    horizon = reader.color()
    zenith = reader.color()
    if horizon is None or zenith is None:
        return None
    up = reader.vector()
    if up is None:
        return GradientEnvmap(horizon, zenith)
    return GradientEnvmap(horizon, zenith, up)


def _read_basic_rasterizer(reader: ParamReader) -> BasicRasterizer:
    # Optional samples per pixel
    return BasicRasterizer(samples_per_pixel=reader.integer())


def default_registry() -> PluginRegistry:
    """Return a new registry holding every built-in plugin."""
    registry = PluginRegistry()
    registry.register("primitive", Sphere.plugin_name, _read_sphere)
    registry.register("primitive", Block.plugin_name, _read_block)
    registry.register("primitive", Triangle.plugin_name, _read_triangle)
    registry.register("primitive", Quad.plugin_name, _read_quad)
    registry.register("primitive", Torus.plugin_name, _read_torus)
    registry.register("primitive", Point.plugin_name, _read_point)
    registry.register("aggregate", ObjectList.plugin_name, lambda reader: ObjectList())
    registry.register("aggregate", BVH.plugin_name, lambda reader: BVH())
    registry.register("aggregate", Transform.plugin_name, _read_transform)
    registry.register("shader", BasicShader.plugin_name, lambda reader: BasicShader())
    registry.register("envmap", ConstantEnvmap.plugin_name, _read_basic_envmap)
    registry.register("envmap", GradientEnvmap.plugin_name, _read_gradient_envmap)
    registry.register("rasterizer", BasicRasterizer.plugin_name, _read_basic_rasterizer)
    return registry
