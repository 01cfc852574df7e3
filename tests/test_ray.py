"""Unit tests for rays and hit records."""

import numpy as np
import pytest


class TestRay:
    """Tests for ray construction and derived rays."""

    def test_direction_is_normalised(self):
        """Test that the direction is scaled to unit length."""
        from src.whitted.core.ray import Ray

        ray = Ray((0, 0, 0), (0, 3, 4))
        assert np.allclose(ray.direction, (0, 0.6, 0.8))

    def test_zero_direction_raises(self):
        """Test that a ray needs a direction."""
        from src.whitted.core.ray import Ray

        with pytest.raises(ValueError):
            Ray((0, 0, 0), (0, 0, 0))

    def test_at(self):
        """Test points along the ray."""
        from src.whitted.core.ray import Ray

        assert np.allclose(Ray((1, 0, 0), (0, 0, -2)).at(3.0), (1, 0, -3))

    def test_defaults(self):
        """Test a fresh ray is a first-generation ray in air."""
        from src.whitted.core.ray import Ray, RayType

        ray = Ray((0, 0, 0), (1, 0, 0))
        assert ray.generation == 1
        assert ray.ref_index == 1.0
        assert ray.source is None
        assert ray.kind == RayType.GENERIC

    def test_spawn_increments_generation(self):
        """Test secondary rays are one generation deeper and keep the medium."""
        from src.whitted.core.ray import Ray, RayType

        parent = Ray((0, 0, 0), (1, 0, 0), ref_index=1.5, kind=RayType.PRIMARY)
        child = parent.spawn((1, 0, 0), (0, 1, 0))
        assert child.generation == 2
        assert child.ref_index == 1.5
        assert child.kind == RayType.GENERIC

        out = child.spawn((1, 1, 0), (0, 1, 0), ref_index=1.0, kind=RayType.SHADOW)
        assert out.generation == 3
        assert out.ref_index == 1.0
        assert out.kind == RayType.SHADOW

    def test_with_frame_keeps_context(self):
        """Test re-expressing a ray keeps generation and medium."""
        from src.whitted.core.ray import Ray

        ray = Ray((0, 0, 0), (1, 0, 0), generation=3, ref_index=1.2)
        moved = ray.with_frame(np.array((1.0, 1.0, 1.0)), np.array((0.0, 1.0, 0.0)))
        assert moved.generation == 3
        assert moved.ref_index == 1.2
        assert np.allclose(moved.origin, (1, 1, 1))


class TestHit:
    """Tests for hit records."""

    def test_closest(self, unit_sphere):
        """Test picking the nearer of two optional hits."""
        from src.whitted.core.ray import Hit, closest

        near = Hit(1.0, np.zeros(3), np.zeros(3), unit_sphere)
        far = Hit(2.0, np.zeros(3), np.zeros(3), unit_sphere)
        assert closest(near, far) is near
        assert closest(far, near) is near
        assert closest(None, far) is far
        assert closest(near, None) is near
        assert closest(None, None) is None

    def test_with_ray(self, unit_sphere):
        """Test attaching the producing ray to a hit."""
        from src.whitted.core.ray import Ray

        ray = Ray((0, 0, 5), (0, 0, -1))
        hit = unit_sphere.intersect(ray)
        assert hit.ray is None
        assert hit.with_ray(ray).ray is ray
