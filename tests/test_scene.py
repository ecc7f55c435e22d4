"""Unit tests for the host-side scene model.

Tests cover:
- Adding, removing and clearing spheres
- Default sphere parameters
- Snapshot immutability
- The default startup scene
"""

import dataclasses

import pytest


class TestScene:
    """Tests for Scene and SphereInfo."""

    def test_empty_scene(self):
        """Test that a new scene has no spheres and an empty snapshot."""
        from raycast_viewer.scene.scene import Scene

        scene = Scene()
        assert len(scene) == 0
        assert scene.snapshot() == ()

    def test_add_sphere_returns_index(self):
        """Test that add_sphere returns consecutive indices."""
        from raycast_viewer.scene.scene import Scene

        scene = Scene()
        assert scene.add_sphere((0.0, 0.0, 0.0), 0.5) == 0
        assert scene.add_sphere((1.0, 0.0, 0.0), 0.25) == 1
        assert len(scene) == 2

    def test_add_sphere_defaults(self):
        """Test default radius and albedo."""
        from raycast_viewer.scene.scene import Scene

        scene = Scene()
        scene.add_sphere((1, 2, 3))
        sphere = scene.spheres[0]
        assert sphere.position == (1.0, 2.0, 3.0)
        assert sphere.radius == 0.5
        assert sphere.albedo == (1.0, 1.0, 1.0)

    def test_values_not_validated(self):
        """Test that degenerate radii and unclamped albedos are accepted."""
        from raycast_viewer.scene.scene import Scene

        scene = Scene()
        scene.add_sphere((0.0, 0.0, 0.0), 0.0, albedo=(2.0, -1.0, 0.5))
        scene.add_sphere((0.0, 0.0, 0.0), -1.0)
        assert scene.spheres[0].albedo == (2.0, -1.0, 0.5)
        assert scene.spheres[1].radius == -1.0

    def test_remove_sphere(self):
        """Test removal preserves the order of the remaining spheres."""
        from raycast_viewer.scene.scene import Scene

        scene = Scene()
        scene.add_sphere((0.0, 0.0, 0.0))
        scene.add_sphere((1.0, 0.0, 0.0))
        scene.add_sphere((2.0, 0.0, 0.0))

        removed = scene.remove_sphere(1)
        assert removed.position == (1.0, 0.0, 0.0)
        assert [s.position[0] for s in scene] == [0.0, 2.0]

        with pytest.raises(IndexError):
            scene.remove_sphere(5)

    def test_clear(self):
        """Test clear removes every sphere."""
        from raycast_viewer.scene.scene import Scene

        scene = Scene()
        scene.add_sphere((0.0, 0.0, 0.0))
        scene.clear()
        assert len(scene) == 0

    def test_snapshot_is_unaffected_by_edits(self):
        """Test that a snapshot does not see later scene edits."""
        from raycast_viewer.scene.scene import Scene

        scene = Scene()
        scene.add_sphere((0.0, 0.0, 0.0))
        snapshot = scene.snapshot()

        scene.add_sphere((1.0, 0.0, 0.0))
        scene.remove_sphere(0)

        assert len(snapshot) == 1
        assert snapshot[0].position == (0.0, 0.0, 0.0)

    def test_sphere_info_is_frozen(self):
        """Test SphereInfo cannot be mutated in place."""
        from raycast_viewer.scene.scene import SphereInfo

        sphere = SphereInfo()
        with pytest.raises(dataclasses.FrozenInstanceError):
            sphere.radius = 2.0


class TestDefaultScene:
    """Tests for the startup scene."""

    def test_default_scene_contents(self):
        """Test the two startup spheres and their order."""
        from raycast_viewer.scene.scene import create_default_scene

        scene = create_default_scene()
        assert len(scene) == 2

        first, second = scene.snapshot()
        assert first.position == (0.0, 0.0, 0.0)
        assert first.radius == 0.5
        assert first.albedo == (1.0, 0.0, 1.0)

        assert second.position == (1.0, 0.0, -5.0)
        assert second.radius == 1.5
        assert second.albedo == (0.2, 0.3, 1.0)

    def test_default_scene_is_fresh(self):
        """Test each call returns an independent scene."""
        from raycast_viewer.scene.scene import create_default_scene

        a = create_default_scene()
        b = create_default_scene()
        a.clear()
        assert len(b) == 2
