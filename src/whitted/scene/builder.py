"""Scene description reader.

Builds a ``Camera`` and a ``Scene`` from a line-oriented description
(``.sdf``). Each line holds one complete entity; blank lines and text after
``#`` are ignored:

    eye (0, -10, 2)             camera keys: eye lookat up vpdist
    x_res 400                                x_res y_res x_win y_win
    diffuse [0.8, 0.2, 0.2]     material keys apply to objects that follow
    shader basic_shader         current shader for objects that follow
    envmap basic_envmap [0,0,0] current envmap; before any object it is the
                                scene's envmap
    rasterizer basic_rasterizer at most one per scene
    begin abvh                  open an aggregate; objects go into it
    sphere (0, 0, 0) 1          primitive; emitters also become lights
    end                         close the current aggregate

Material, shader and envmap settings are scoped: when an aggregate ends, the
values in effect when it began are restored. The first top-level object is
the scene's root.

Example:
    >>> from src.whitted.scene.builder import SceneBuilder
    >>> camera, scene = SceneBuilder().build_file("examples/scenes/spheres.sdf")
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable

import numpy as np

from src.whitted.camera.pinhole import Camera
from src.whitted.config import RenderConfig
from src.whitted.core.rasterizer import Rasterizer
from src.whitted.errors import PluginError, SceneBuildError
from src.whitted.geometry.base import Aggregate, SceneObject
from src.whitted.materials.envmap import Envmap
from src.whitted.materials.material import Material
from src.whitted.materials.shader import Shader
from src.whitted.scene.params import ParamReader
from src.whitted.scene.registry import PluginRegistry, default_registry
from src.whitted.scene.scene import Scene

logger = logging.getLogger(__name__)

SCENE_SUFFIX = ".sdf"


@dataclass
class _Scope:
    """Settings saved when an aggregate begins."""

    aggregate: Aggregate
    material: Material
    shader: Shader | None
    envmap: Envmap | None
    line_no: int


@dataclass
class _BuildState:
    camera: Camera = field(default_factory=Camera)
    scene: Scene = field(default_factory=Scene)
    material: Material = field(default_factory=Material)
    shared_material: Material | None = None
    shader: Shader | None = None
    envmap: Envmap | None = None
    last_object: SceneObject | None = None
    scopes: list[_Scope] = field(default_factory=list)

    @property
    def aggregate(self) -> Aggregate | None:
        return self.scopes[-1].aggregate if self.scopes else None


def _set_vector(attr: str) -> Callable[[_BuildState, ParamReader], bool]:
    def setter(state: _BuildState, reader: ParamReader) -> bool:
        value = reader.vector()
        if value is None:
            return False
        setattr(state.camera, attr, value)
        return True

    return setter


def _set_interval(attr: str) -> Callable[[_BuildState, ParamReader], bool]:
    def setter(state: _BuildState, reader: ParamReader) -> bool:
        value = reader.interval()
        if value is None:
            return False
        setattr(state.camera, attr, value)
        return True

    return setter


def _set_resolution(attr: str) -> Callable[[_BuildState, ParamReader], bool]:
    def setter(state: _BuildState, reader: ParamReader) -> bool:
        value = reader.integer()
        if value is None:
            return False
        setattr(state.camera, attr, value)
        return True

    return setter


def _set_vpdist(state: _BuildState, reader: ParamReader) -> bool:
    value = reader.number()
    if value is None:
        return False
    state.camera.vpdist = value
    return True


def _set_color(attr: str) -> Callable[[_BuildState, ParamReader], bool]:
    def setter(state: _BuildState, reader: ParamReader) -> bool:
        value = reader.color()
        if value is None:
            return False
        state.material = state.material.copy()
        setattr(state.material, attr, value)
        return True

    return setter


def _set_scalar(attr: str) -> Callable[[_BuildState, ParamReader], bool]:
    def setter(state: _BuildState, reader: ParamReader) -> bool:
        value = reader.number()
        if value is None:
            return False
        state.material = state.material.copy()
        setattr(state.material, attr, value)
        return True

    return setter


# Keyword -> setter; a setter returns False when its value is ill-formed
_SETTINGS: dict[str, Callable[[_BuildState, ParamReader], bool]] = {
    "eye": _set_vector("eye"),
    "lookat": _set_vector("lookat"),
    "up": _set_vector("up"),
    "vpdist": _set_vpdist,
    "x_res": _set_resolution("x_res"),
    "y_res": _set_resolution("y_res"),
    "x_win": _set_interval("x_win"),
    "y_win": _set_interval("y_win"),
    "ambient": _set_color("ambient"),
    "diffuse": _set_color("diffuse"),
    "specular": _set_color("specular"),
    "emission": _set_color("emission"),
    "reflectivity": _set_color("reflectivity"),
    "translucency": _set_color("translucency"),
    "Phong_exp": _set_scalar("phong_exp"),
    "ref_index": _set_scalar("ref_index"),
}


class SceneBuilder:
    """Reads scene descriptions using a plugin registry.

    Attributes:
        registry: Plugin registry used to recognise object and plugin lines.
        config: Render configuration given to every scene built.
    """

    def __init__(
        self,
        registry: PluginRegistry | None = None,
        config: RenderConfig | None = None,
    ) -> None:
        self.registry = registry if registry is not None else default_registry()
        self.config = config if config is not None else RenderConfig()

    def build_file(self, path: str | Path) -> tuple[Camera, Scene]:
        """Read a scene file; the ``.sdf`` suffix is added if missing.

        Raises:
            SceneBuildError: If the file cannot be read or is malformed.
        """
        path = Path(path)
        if not path.exists() and path.suffix != SCENE_SUFFIX:
            path = path.with_name(path.name + SCENE_SUFFIX)
        try:
            text = path.read_text()
        except OSError as e:
            raise SceneBuildError(f"Could not open scene file {path}: {e}") from e

        logger.info("Reading %s", path)
        return self.build(text.splitlines(), source=str(path))

    def build_string(self, text: str, source: str = "<string>") -> tuple[Camera, Scene]:
        return self.build(text.splitlines(), source=source)

    def build(self, lines: Iterable[str], source: str = "<lines>") -> tuple[Camera, Scene]:
        """Build a camera and a scene from description lines.

        Raises:
            SceneBuildError: On malformed input (the message names the line).
            PluginError: If a line names an unregistered plugin.
        """
        state = _BuildState(scene=Scene(config=self.config))

        for line_no, raw in enumerate(lines, start=1):
            line = raw.split("#", 1)[0].strip()
            if not line:
                continue
            try:
                self._process_line(state, line, line_no, source)
            except PluginError as e:
                raise PluginError(f"{source}:{line_no}: {e}") from e
            except (ValueError, np.linalg.LinAlgError) as e:
                raise SceneBuildError(str(e), line_no=line_no, source=source) from e

        if state.scopes:
            raise SceneBuildError(
                "Top-most aggregate object has no 'end' statement",
                line_no=state.scopes[0].line_no,
                source=source,
            )
        try:
            state.camera.validate()
        except ValueError as e:
            raise SceneBuildError(f"Invalid camera: {e}", source=source) from e

        scene = state.scene
        logger.info(
            "Read %s: %d object(s), %d light(s)",
            source,
            scene.object_count,
            len(scene.lights),
        )
        return state.camera, scene

    # =========================================================================
    # Line handlers
    # =========================================================================

    def _process_line(
        self, state: _BuildState, line: str, line_no: int, source: str
    ) -> None:
        match = self.registry.parse(line)
        if match is not None:
            if match.instance is None:
                logger.warning("%s:%d: ill-formed %s line: %s", source, line_no, match.kind, line)
                return
            handler = getattr(self, f"_add_{match.kind}")
            handler(state, match.instance, line_no, source)
            return

        reader = ParamReader(line)
        keyword = reader.word()
        setter = _SETTINGS.get(keyword)
        if setter is not None:
            if not setter(state, reader):
                logger.warning("%s:%d: ill-formed %s value: %s", source, line_no, keyword, line)
            return

        if keyword == "end":
            self._end_aggregate(state, line_no, source)
            return

        logger.warning("%s:%d: unrecognized command: %s", source, line_no, line)

    def _current_material(self, state: _BuildState) -> Material:
        # Consecutive objects with identical settings share one Material
        if state.shared_material is None or state.shared_material != state.material:
            state.shared_material = state.material.copy()
        return state.shared_material

    def _decorate(self, state: _BuildState, obj: SceneObject) -> None:
        obj.shader = state.shader
        obj.envmap = state.envmap
        obj.material = self._current_material(state)
        obj.parent = state.aggregate
        state.last_object = obj

    def _place(self, state: _BuildState, obj: SceneObject, line_no: int, source: str) -> None:
        parent = state.aggregate
        if parent is not None:
            parent.add_child(obj)
        elif state.scene.root is None:
            state.scene.root = obj
        else:
            logger.warning(
                "%s:%d: scene already has a top-level object; ignoring %r",
                source,
                line_no,
                obj,
            )

    def _add_primitive(
        self, state: _BuildState, obj: SceneObject, line_no: int, source: str
    ) -> None:
        self._decorate(state, obj)
        if obj.is_emitter:
            state.scene.lights.append(obj)
        self._place(state, obj, line_no, source)
        logger.debug("%s:%d: added %r", source, line_no, obj)

    def _add_aggregate(
        self, state: _BuildState, obj: Aggregate, line_no: int, source: str
    ) -> None:
        if state.material.is_emitter:
            raise SceneBuildError(
                "An aggregate object cannot be an emitter", line_no=line_no, source=source
            )
        self._decorate(state, obj)
        state.scopes.append(
            _Scope(obj, state.material, state.shader, state.envmap, line_no)
        )
        logger.debug("%s:%d: begin %s", source, line_no, obj.plugin_name)

    def _end_aggregate(self, state: _BuildState, line_no: int, source: str) -> None:
        if not state.scopes:
            raise SceneBuildError(
                "end statement found outside an aggregate object",
                line_no=line_no,
                source=source,
            )
        scope = state.scopes.pop()
        closed = scope.aggregate
        closed.close()
        state.material = scope.material
        state.shader = scope.shader
        state.envmap = scope.envmap
        # Aggregates join their parent only once complete
        self._place(state, closed, line_no, source)
        logger.debug("%s:%d: end %s (%d children)", source, line_no, closed.plugin_name, len(closed))

    def _add_shader(self, state: _BuildState, shader: Shader, line_no: int, source: str) -> None:
        state.shader = shader

    def _add_envmap(self, state: _BuildState, envmap: Envmap, line_no: int, source: str) -> None:
        state.envmap = envmap
        if state.last_object is None:
            state.scene.envmap = envmap

    def _add_rasterizer(
        self, state: _BuildState, rasterizer: Rasterizer, line_no: int, source: str
    ) -> None:
        if state.scene.rasterizer is not None:
            raise SceneBuildError(
                "More than one rasterizer specified", line_no=line_no, source=source
            )
        state.scene.rasterizer = rasterizer


def build_scene(
    path: str | Path,
    registry: PluginRegistry | None = None,
    config: RenderConfig | None = None,
) -> tuple[Camera, Scene]:
    """Read a scene file with the default (or given) registry."""
    return SceneBuilder(registry, config).build_file(path)
