"""Tests for the plugin registry."""

import numpy as np
import pytest


class TestParse:
    """Tests for turning lines into plugin instances."""

    def test_primitive(self):
        """Test a line starting with a primitive name."""
        from src.whitted.geometry.sphere import Sphere
        from src.whitted.scene.registry import default_registry

        match = default_registry().parse("sphere (1, 2, 3) 0.5")
        assert match.kind == "primitive"
        assert match.name == "sphere"
        assert isinstance(match.instance, Sphere)
        assert np.allclose(match.instance.center, (1, 2, 3))
        assert match.instance.radius == 0.5

    def test_every_primitive(self):
        """Test the built-in primitive factories."""
        from src.whitted.geometry.block import Block
        from src.whitted.geometry.point import Point
        from src.whitted.geometry.quad import Quad
        from src.whitted.geometry.torus import Torus
        from src.whitted.geometry.triangle import Triangle
        from src.whitted.scene.registry import default_registry

        registry = default_registry()
        lines = {
            "block (0, 0, 0) (1, 1, 1)": Block,
            "triangle (0, 0, 0) (1, 0, 0) (0, 1, 0)": Triangle,
            "quad (0, 0, 0) (1, 0, 0) (1, 1, 0) (0, 1, 0)": Quad,
            "torus 2 0.5": Torus,
            "point (1, 1, 1)": Point,
        }
        for line, cls in lines.items():
            assert isinstance(registry.parse(line).instance, cls)

    @pytest.mark.parametrize(
        "line, expected",
        [
            ("begin abvh", "BVH"),
            ("begin List", "ObjectList"),
        ],
    )
    def test_aggregates(self, line, expected):
        """Test ``begin`` lines select aggregates."""
        from src.whitted.scene.registry import default_registry

        match = default_registry().parse(line)
        assert match.kind == "aggregate"
        assert type(match.instance).__name__ == expected

    def test_transform(self):
        """Test a transform aggregate with its matrix."""
        from src.whitted.aggregates.transform import Transform
        from src.whitted.scene.registry import default_registry

        match = default_registry().parse(
            "begin transform (1, 0, 0, 1; 0, 1, 0, 2; 0, 0, 1, 3)"
        )
        assert isinstance(match.instance, Transform)
        assert np.allclose(match.instance.matrix.offset, (1, 2, 3))

    def test_rasterizer_samples(self):
        """Test the optional samples-per-pixel argument."""
        from src.whitted.scene.registry import default_registry

        registry = default_registry()
        assert registry.parse("rasterizer basic_rasterizer 3").instance.samples_per_pixel == 3
        assert registry.parse("rasterizer basic_rasterizer").instance.samples_per_pixel is None

    def test_shader_and_envmaps(self):
        """Test shader and envmap lines."""
        from src.whitted.materials.envmap import ConstantEnvmap, GradientEnvmap
        from src.whitted.materials.shader import BasicShader
        from src.whitted.scene.registry import default_registry

        registry = default_registry()
        assert isinstance(registry.parse("shader basic_shader").instance, BasicShader)

        constant = registry.parse("envmap basic_envmap [0.1, 0.2, 0.3]").instance
        assert isinstance(constant, ConstantEnvmap)

        gradient = registry.parse(
            "envmap gradient_envmap [1, 1, 1] [0, 0, 1] (0, 1, 0)"
        ).instance
        assert isinstance(gradient, GradientEnvmap)
        assert np.allclose(gradient.up, (0, 1, 0))

    def test_unknown_plugin_name_raises(self):
        """Test a kind keyword followed by an unregistered name."""
        from src.whitted.errors import PluginError
        from src.whitted.scene.registry import default_registry

        with pytest.raises(PluginError, match="nope"):
            default_registry().parse("begin nope")

    def test_missing_plugin_name_raises(self):
        """Test a kind keyword with nothing after it."""
        from src.whitted.errors import PluginError
        from src.whitted.scene.registry import default_registry

        with pytest.raises(PluginError, match="Missing shader name"):
            default_registry().parse("shader")

    @pytest.mark.parametrize("line", ["eye (0, 0, 0)", "end", "(1, 2, 3)", "cylinder 1 2"])
    def test_non_plugin_lines(self, line):
        """Test lines that are not plugin lines return None."""
        from src.whitted.scene.registry import default_registry

        assert default_registry().parse(line) is None

    def test_ill_formed_parameters(self):
        """Test a known plugin with bad parameters yields no instance."""
        from src.whitted.scene.registry import default_registry

        match = default_registry().parse("sphere (0, 0, 0)")
        assert match.kind == "primitive"
        assert match.instance is None


class TestRegister:
    """Tests for registering factories."""

    def test_custom_primitive(self):
        """Test a user factory is found by parse."""
        from src.whitted.geometry.sphere import Sphere
        from src.whitted.scene.registry import PluginRegistry

        registry = PluginRegistry()
        registry.register("primitive", "ball", lambda reader: Sphere((0, 0, 0), reader.number()))
        match = registry.parse("ball 2")
        assert match.instance.radius == 2.0
        assert ("primitive", "ball") in registry
        assert len(registry) == 1

    def test_duplicate_raises(self):
        """Test registering the same name twice."""
        from src.whitted.errors import PluginError
        from src.whitted.scene.registry import default_registry

        registry = default_registry()
        with pytest.raises(PluginError, match="already registered"):
            registry.register("primitive", "sphere", lambda reader: None)

    def test_replace(self):
        """Test an explicit replacement."""
        from src.whitted.scene.registry import default_registry

        registry = default_registry()
        registry.register("primitive", "sphere", lambda reader: "replaced", replace=True)
        assert registry.parse("sphere").instance == "replaced"

    def test_unknown_kind_raises(self):
        """Test kinds outside the fixed set."""
        from src.whitted.errors import PluginError
        from src.whitted.scene.registry import PluginRegistry

        with pytest.raises(PluginError, match="Unknown plugin kind"):
            PluginRegistry().register("camera", "pinhole", lambda reader: None)

    def test_names(self):
        """Test listing registered names per kind."""
        from src.whitted.scene.registry import default_registry

        registry = default_registry()
        assert registry.names("aggregate") == ["List", "abvh", "transform"]
        assert registry.names("primitive") == [
            "block",
            "point",
            "quad",
            "sphere",
            "torus",
            "triangle",
        ]
        assert registry.names("rasterizer") == ["basic_rasterizer"]

    def test_lookup_lists_known_names(self):
        """Test the error for an unknown name mentions the known ones."""
        from src.whitted.errors import PluginError
        from src.whitted.scene.registry import default_registry

        with pytest.raises(PluginError, match="basic_shader"):
            default_registry().lookup("shader", "phong")
