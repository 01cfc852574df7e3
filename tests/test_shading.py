"""Tests for materials, environment maps and the basic shader."""

import numpy as np
import pytest


def _floor_scene(config, material, *, light_emission=(1.0, 1.0, 1.0), blocker=None):
    """A quad floor at z = 0 lit from (0, 0, 4), as an (ObjectList, Scene) pair."""
    from src.whitted.aggregates.object_list import ObjectList
    from src.whitted.geometry.quad import Quad
    from src.whitted.geometry.sphere import Sphere
    from src.whitted.materials.material import Material
    from src.whitted.materials.shader import BasicShader
    from src.whitted.scene.scene import Scene

    shader = BasicShader()
    root = ObjectList()

    floor = Quad((-5, -5, 0), (5, -5, 0), (5, 5, 0), (-5, 5, 0))
    floor.material = material
    floor.shader = shader
    root.add_child(floor)

    light = Sphere((0, 0, 4), 0.1)
    light.material = Material(emission=light_emission)
    light.shader = shader
    root.add_child(light)

    if blocker is not None:
        blocker.material = Material()
        blocker.shader = shader
        root.add_child(blocker)

    root.close()
    return Scene(root, lights=[light], config=config)


class TestMaterial:
    """Tests for material defaults and predicates."""

    def test_defaults(self):
        """Test description-file defaults."""
        from src.whitted.materials.material import Material

        m = Material()
        assert np.array_equal(m.diffuse, (1, 1, 1))
        assert np.array_equal(m.specular, (1, 1, 1))
        assert np.array_equal(m.emission, (0, 0, 0))
        assert m.phong_exp == 0.0
        assert m.ref_index == 0.0
        assert not m.is_emitter
        assert not m.is_reflective
        assert not m.is_translucent

    def test_predicates(self):
        """Test emitter, reflective and translucent flags."""
        from src.whitted.materials.material import Material

        m = Material(emission=(0.1, 0, 0), reflectivity=(0, 0.5, 0), translucency=(0, 0, 1))
        assert m.is_emitter
        assert m.is_reflective
        assert m.is_translucent

    def test_copy_and_equality(self):
        """Test copies compare equal until changed."""
        from src.whitted.materials.material import Material

        m = Material(diffuse=(0.5, 0.5, 0.5), phong_exp=10)
        c = m.copy()
        assert c == m
        assert c is not m
        c.diffuse = np.array((0.1, 0.1, 0.1))
        assert c != m
        assert np.allclose(m.diffuse, 0.5)


class TestEnvmaps:
    """Tests for environment maps."""

    def test_constant(self):
        """Test a constant envmap ignores direction."""
        from src.whitted.core.ray import Ray
        from src.whitted.materials.envmap import ConstantEnvmap

        env = ConstantEnvmap((0.1, 0.2, 0.3))
        assert np.allclose(env.shade(Ray((0, 0, 0), (1, 0, 0))), (0.1, 0.2, 0.3))
        assert np.allclose(env.shade(Ray((0, 0, 0), (0, -1, 1))), (0.1, 0.2, 0.3))

    def test_gradient(self):
        """Test the gradient blends from horizon (down) to zenith (up)."""
        from src.whitted.core.ray import Ray
        from src.whitted.materials.envmap import GradientEnvmap

        env = GradientEnvmap((1, 1, 1), (0, 0, 1))
        assert np.allclose(env.shade(Ray((0, 0, 0), (0, 0, 1))), (0, 0, 1))
        assert np.allclose(env.shade(Ray((0, 0, 0), (0, 0, -1))), (1, 1, 1))
        assert np.allclose(env.shade(Ray((0, 0, 0), (1, 0, 0))), (0.5, 0.5, 1))

    def test_gradient_custom_up(self):
        """Test a y-up gradient."""
        from src.whitted.core.ray import Ray
        from src.whitted.materials.envmap import GradientEnvmap

        env = GradientEnvmap((0, 0, 0), (1, 1, 1), up=(0, 1, 0))
        assert np.allclose(env.shade(Ray((0, 0, 0), (0, 1, 0))), (1, 1, 1))

    def test_gradient_zero_up_raises(self):
        """Test that the gradient needs an up direction."""
        from src.whitted.materials.envmap import GradientEnvmap

        with pytest.raises(ValueError):
            GradientEnvmap((0, 0, 0), (1, 1, 1), up=(0, 0, 0))


class TestAttenuation:
    """Tests for the light falloff helper."""

    def test_quadratic_falloff(self):
        """Test 1 / (a + b d + c d^2)."""
        from src.whitted.materials.shader import attenuation

        assert attenuation(2.0, (0.0, 0.0, 0.25)) == pytest.approx(1.0)
        assert attenuation(10.0, (0.0, 0.0, 0.02)) == pytest.approx(0.5)
        assert attenuation(3.0, (1.0, 1.0, 0.0)) == pytest.approx(0.25)

    def test_zero_denominator(self):
        """Test that no coefficients means no falloff."""
        from src.whitted.materials.shader import attenuation

        assert attenuation(5.0, (0.0, 0.0, 0.0)) == 1.0


class TestBasicShader:
    """Tests for the Whitted shader."""

    def test_emitter_returns_emission(self, seeded_config):
        """Test a ray hitting a light sees its emission."""
        from src.whitted.core.ray import Ray
        from src.whitted.materials.material import Material

        scene = _floor_scene(seeded_config, Material(), light_emission=(2.0, 1.0, 0.5))
        color = scene.trace(Ray((0, 0, 10), (0, 0, -1)))
        assert np.allclose(color, (2.0, 1.0, 0.5))

    def test_diffuse_under_light(self, seeded_config):
        """Test a floor point straight below the light."""
        from src.whitted.core.ray import Ray
        from src.whitted.materials.material import Material

        material = Material(diffuse=(0.5, 0.5, 0.5), specular=(0, 0, 0))
        scene = _floor_scene(seeded_config, material)
        color = scene.trace(Ray((0, 0, 2), (0, 0, -1)))
        assert np.allclose(color, (0.5, 0.5, 0.5))

    def test_light_color_tints_diffuse(self, seeded_config):
        """Test the diffuse term is per channel."""
        from src.whitted.core.ray import Ray
        from src.whitted.materials.material import Material

        material = Material(diffuse=(1.0, 0.5, 0.0), specular=(0, 0, 0))
        scene = _floor_scene(seeded_config, material, light_emission=(0.5, 1.0, 1.0))
        color = scene.trace(Ray((0, 0, 2), (0, 0, -1)))
        assert np.allclose(color, (0.5, 0.5, 0.0))

    def test_specular_highlight(self, seeded_config):
        """Test the Phong highlight straight below the light."""
        from src.whitted.core.ray import Ray
        from src.whitted.materials.material import Material

        material = Material(diffuse=(0, 0, 0), specular=(0.25, 0.25, 0.25), phong_exp=20)
        scene = _floor_scene(seeded_config, material)
        color = scene.trace(Ray((0, 0, 2), (0, 0, -1)))
        # Mirror direction of the light equals the eye direction
        assert np.allclose(color, (0.25, 0.25, 0.25))

    def test_shadowed_point_keeps_ambient(self, seeded_config):
        """Test an occluded light contributes nothing."""
        from src.whitted.core.ray import Ray
        from src.whitted.geometry.sphere import Sphere
        from src.whitted.materials.material import Material

        material = Material(
            diffuse=(0.5, 0.5, 0.5), specular=(0, 0, 0), ambient=(0.2, 0.2, 0.2)
        )
        blocker = Sphere((0, 0, 3), 0.5)
        scene = _floor_scene(seeded_config, material, blocker=blocker)
        color = scene.trace(Ray((0.5, 0, 2), (-0.5, 0, -2)))
        assert np.allclose(color, (0.1, 0.1, 0.1))

    def test_backside_is_lit_from_its_side(self, seeded_config):
        """Test the normal is turned towards the viewer before lighting."""
        from src.whitted.core.ray import Ray
        from src.whitted.materials.material import Material

        material = Material(diffuse=(0.5, 0.5, 0.5), specular=(0, 0, 0))
        scene = _floor_scene(seeded_config, material)
        # Seen from below, the light above is behind the surface
        color = scene.trace(Ray((0, 0, -2), (0, 0, 1)))
        assert np.allclose(color, (0.0, 0.0, 0.0))

    def test_mirror_reflects_environment(self, seeded_config):
        """Test a perfect mirror shows what its reflected ray sees."""
        from src.whitted.core.ray import Ray
        from src.whitted.materials.material import Material

        material = Material(diffuse=(0, 0, 0), specular=(0, 0, 0), reflectivity=(1, 1, 1))
        scene = _floor_scene(seeded_config, material, light_emission=(0, 0, 0))
        scene.lights.clear()
        # Oblique ray so the reflection escapes past the light sphere
        color = scene.trace(Ray((-2, 0, 2), (1, 0, -1)))
        assert np.allclose(color, scene.background)

    def test_mirror_chain_hits_depth_limit(self, seeded_config):
        """Test two facing mirrors end in the termination color."""
        from src.whitted.aggregates.object_list import ObjectList
        from src.whitted.config import RenderConfig
        from src.whitted.core.ray import Ray
        from src.whitted.geometry.quad import Quad
        from src.whitted.materials.material import Material
        from src.whitted.materials.shader import BasicShader
        from src.whitted.scene.scene import Scene

        mirror = Material(diffuse=(0, 0, 0), specular=(0, 0, 0), reflectivity=(1, 1, 1))
        shader = BasicShader()
        root = ObjectList()
        for z in (0.0, 4.0):
            quad = Quad((-50, -50, z), (50, -50, z), (50, 50, z), (-50, 50, z))
            quad.material = mirror
            quad.shader = shader
            root.add_child(quad)
        scene = Scene(root, config=RenderConfig(max_tree_depth=3))
        color = scene.trace(Ray((0, 0, 2), (0.1, 0, -1)))
        assert np.allclose(color, scene.termination)

    def test_glass_sphere_passes_straight_through(self, seeded_config):
        """Test a fully translucent sphere at normal incidence shows the background."""
        from src.whitted.core.ray import Ray
        from src.whitted.materials.material import Material
        from src.whitted.geometry.sphere import Sphere
        from src.whitted.materials.shader import BasicShader
        from src.whitted.scene.scene import Scene

        glass = Sphere((0, 0, 0), 1.0)
        glass.material = Material(
            diffuse=(0, 0, 0), specular=(0, 0, 0), translucency=(1, 1, 1), ref_index=1.5
        )
        glass.shader = BasicShader()
        scene = Scene(glass, config=seeded_config)
        color = scene.trace(Ray((0, 0, 5), (0, 0, -1)))
        assert np.allclose(color, scene.background)

    def test_glass_blends_local_and_transmitted(self, seeded_config):
        """Test (1 - t) * local + t * refracted."""
        from src.whitted.core.ray import Ray
        from src.whitted.geometry.sphere import Sphere
        from src.whitted.materials.envmap import ConstantEnvmap
        from src.whitted.materials.material import Material
        from src.whitted.materials.shader import BasicShader
        from src.whitted.scene.scene import Scene

        glass = Sphere((0, 0, 0), 1.0)
        glass.material = Material(
            diffuse=(1, 1, 1),
            specular=(0, 0, 0),
            ambient=(1, 1, 1),
            translucency=(0.5, 0.5, 0.5),
            ref_index=1.5,
        )
        glass.shader = BasicShader()
        scene = Scene(glass, envmap=ConstantEnvmap((0, 0, 0)), config=seeded_config)
        color = scene.trace(Ray((0, 0, 5), (0, 0, -1)))
        # Entry: 0.5 * 1 + 0.5 * inner; inner exit: 0.5 * 1 + 0.5 * 0
        assert np.allclose(color, (0.75, 0.75, 0.75))


class _RecordingScene:
    """Records the rays a shader traces instead of following them."""

    def __init__(self, config):
        self.config = config
        self.lights = []
        self.traced = []

    def trace(self, ray):
        self.traced.append(ray)
        return np.zeros(3)


class TestRefractedRay:
    """Tests for the ray a translucent surface spawns."""

    @pytest.fixture
    def glass(self):
        from src.whitted.geometry.sphere import Sphere
        from src.whitted.materials.material import Material
        from src.whitted.materials.shader import BasicShader

        sphere = Sphere((0, 0, 0), 1.0)
        sphere.material = Material(
            diffuse=(0, 0, 0), specular=(0, 0, 0), translucency=(1, 1, 1), ref_index=1.5
        )
        sphere.shader = BasicShader()
        return sphere

    def _child(self, glass, ray, config):
        scene = _RecordingScene(config)
        hit = glass.intersect(ray).with_ray(ray)
        glass.shader.shade(scene, hit)
        (child,) = scene.traced
        return hit, child

    def test_entering(self, glass, seeded_config):
        """Test a ray from air enters the glass."""
        from src.whitted.core.ray import Ray
        from src.whitted.core.vector import dot, length

        hit, child = self._child(glass, Ray((-5, 0.3, 0), (1, 0, 0)), seeded_config)
        assert child.ref_index == 1.5
        assert child.generation == 2
        assert length(child.origin) < 1.0
        assert dot(child.direction, hit.normal) < 0.0

    def test_leaving(self, glass, seeded_config):
        """Test a ray inside the glass below the critical angle exits into air."""
        from src.whitted.core.ray import Ray
        from src.whitted.core.vector import dot, length

        ray = Ray((0, 0.3, 0), (1, 0, 0), ref_index=1.5)
        hit, child = self._child(glass, ray, seeded_config)
        assert child.ref_index == 1.0
        assert length(child.origin) > 1.0
        assert dot(child.direction, hit.normal) > 0.0
        # Snell: sin(out) = 1.5 * sin(in), with sin(in) = 0.3
        normal = hit.normal
        tangential = child.direction - dot(child.direction, normal) * normal
        assert length(tangential) == pytest.approx(0.45)

    def test_total_internal_reflection_stays_inside(self, glass, seeded_config):
        """Test a ray past the critical angle is mirrored back into the glass."""
        from src.whitted.core.ray import Ray
        from src.whitted.core.vector import dot, length

        ray = Ray((0, 0.9, 0), (1, 0, 0), ref_index=1.5)
        hit, child = self._child(glass, ray, seeded_config)
        assert child.ref_index == 1.5
        assert length(child.origin) < 1.0
        assert dot(child.direction, hit.normal) < 0.0
        # Mirrored about the normal: the tangential component is kept
        normal = hit.normal
        expected = ray.direction - 2.0 * dot(ray.direction, normal) * normal
        assert np.allclose(child.direction, expected)
