"""Unit tests for the frame renderer.

Tests cover:
- Float to 8-bit conversion
- Dimension validation and pre-render errors
- Reference pixel colors and the empty scene
- Determinism and snapshot isolation
- Row order with flip_y
- Frame counting, resizing and byte export
"""

import numpy as np
import pytest
import taichi as ti


def _to_rgba8(color):
    from raycast_viewer.core.renderer import to_rgba8

    result = ti.Vector.field(4, dtype=ti.u8, shape=())

    @ti.kernel
    def test_kernel(c: ti.math.vec4):
        result[None] = to_rgba8(c)

    test_kernel(ti.math.vec4(*color))
    v = result[None]
    return tuple(int(v[i]) for i in range(4))


def _single_sphere_scene(albedo=(1.0, 0.0, 1.0)):
    from raycast_viewer.scene.scene import Scene

    scene = Scene()
    scene.add_sphere((0.0, 0.0, 0.0), 0.5, albedo=albedo)
    return scene


class TestToRgba8:
    """Tests for the float to 8-bit conversion."""

    def test_white(self):
        """Test 1.0 maps to 255."""
        assert _to_rgba8((1.0, 1.0, 1.0, 1.0)) == (255, 255, 255, 255)

    def test_background(self):
        """Test the default background maps to opaque black."""
        assert _to_rgba8((0.0, 0.0, 0.0, 1.0)) == (0, 0, 0, 255)

    def test_truncation(self):
        """Test fractional values are truncated, not rounded."""
        assert _to_rgba8((0.5, 0.999, 0.57735, 1.0)) == (127, 254, 147, 255)

    def test_saturation(self):
        """Test out-of-range values saturate instead of wrapping."""
        assert _to_rgba8((2.0, -0.5, 1.5, 1.0)) == (255, 0, 255, 255)


class TestRendererSetup:
    """Tests for construction and pre-render state."""

    @pytest.mark.parametrize("width, height", [(0, 4), (4, 0), (-1, 4), (4096, 4), (4, 4096)])
    def test_invalid_dimensions(self, width, height):
        """Test invalid dimensions raise ValueError."""
        from raycast_viewer.core.renderer import FrameRenderer

        with pytest.raises(ValueError):
            FrameRenderer(width, height)

    def test_no_frame_yet(self):
        """Test reading pixels before rendering raises RuntimeError."""
        from raycast_viewer.core.renderer import FrameRenderer

        renderer = FrameRenderer(4, 4)
        assert renderer.frame_count == 0
        with pytest.raises(RuntimeError):
            renderer.get_pixels()
        with pytest.raises(RuntimeError):
            renderer.get_pixel_buffer()

    def test_repr(self):
        """Test the string representation."""
        from raycast_viewer.core.renderer import FrameRenderer

        assert repr(FrameRenderer(8, 4)) == "FrameRenderer(width=8, height=4, frames=0)"


class TestRenderFrame:
    """Tests for full-frame rendering."""

    def test_center_pixel(self):
        """Test the center pixel of a 4x4 frame sees the lit sphere."""
        from raycast_viewer.camera.camera import Camera
        from raycast_viewer.core.renderer import FrameRenderer

        renderer = FrameRenderer(4, 4)
        renderer.render(_single_sphere_scene(), Camera())
        pixels = renderer.get_pixels()

        assert pixels.shape == (4, 4, 4)
        assert pixels.dtype == np.uint8
        assert tuple(pixels[2, 2]) == (147, 0, 147, 255)

    def test_corner_pixel_is_background(self):
        """Test the corner pixel misses the sphere."""
        from raycast_viewer.camera.camera import Camera
        from raycast_viewer.core.renderer import FrameRenderer

        renderer = FrameRenderer(4, 4)
        renderer.render(_single_sphere_scene(), Camera())
        assert tuple(renderer.get_pixels()[0, 0]) == (0, 0, 0, 255)

    def test_empty_scene(self):
        """Test an empty scene renders every pixel as opaque black."""
        from raycast_viewer.camera.camera import Camera
        from raycast_viewer.core.renderer import FrameRenderer
        from raycast_viewer.scene.scene import Scene

        renderer = FrameRenderer(16, 8)
        renderer.render(Scene(), Camera())
        pixels = renderer.get_pixels()

        assert pixels.shape == (8, 16, 4)
        assert np.all(pixels[:, :, :3] == 0)
        assert np.all(pixels[:, :, 3] == 255)

    def test_render_pixel_color(self):
        """Test single-pixel float colors match the buffer."""
        from raycast_viewer.camera.camera import Camera
        from raycast_viewer.core.renderer import FrameRenderer

        renderer = FrameRenderer(4, 4)
        renderer.render(_single_sphere_scene(), Camera())
        r, g, b, a = renderer.render_pixel_color(2, 2)

        assert r == pytest.approx(0.57735, abs=1e-5)
        assert g == 0.0
        assert b == pytest.approx(0.57735, abs=1e-5)
        assert a == 1.0

    def test_deterministic(self):
        """Test rendering the same inputs twice gives identical frames."""
        from raycast_viewer.camera.camera import Camera
        from raycast_viewer.core.renderer import FrameRenderer
        from raycast_viewer.scene.scene import create_default_scene

        scene = create_default_scene()
        renderer = FrameRenderer(32, 32)
        renderer.render(scene, Camera())
        first = renderer.get_pixels()
        renderer.render(scene, Camera())
        second = renderer.get_pixels()

        assert np.array_equal(first, second)

    def test_full_recompute(self):
        """Test a new render replaces every pixel of the previous frame."""
        from raycast_viewer.camera.camera import Camera
        from raycast_viewer.core.renderer import FrameRenderer
        from raycast_viewer.scene.scene import Scene

        renderer = FrameRenderer(4, 4)
        renderer.render(_single_sphere_scene(), Camera())
        renderer.render(Scene(), Camera())
        assert tuple(renderer.get_pixels()[2, 2]) == (0, 0, 0, 255)

    def test_snapshot_isolation(self):
        """Test edits after prepare() do not affect the uploaded state."""
        from raycast_viewer.camera.camera import Camera
        from raycast_viewer.core.renderer import FrameRenderer

        scene = _single_sphere_scene()
        camera = Camera()
        renderer = FrameRenderer(4, 4)
        renderer.prepare(scene, camera)

        scene.clear()
        camera.view.position = (0.0, 50.0, 0.0)

        r, _, b, _ = renderer.render_pixel_color(2, 2)
        assert r == pytest.approx(0.57735, abs=1e-5)
        assert b == pytest.approx(0.57735, abs=1e-5)

    def test_accepts_sphere_iterable(self):
        """Test render accepts a snapshot instead of a Scene."""
        from raycast_viewer.camera.camera import Camera
        from raycast_viewer.core.renderer import FrameRenderer

        renderer = FrameRenderer(4, 4)
        renderer.render(_single_sphere_scene().snapshot(), Camera())
        assert tuple(renderer.get_pixels()[2, 2]) == (147, 0, 147, 255)

    def test_flip_y(self):
        """Test flip_y puts the top of the view in row 0."""
        from raycast_viewer.camera.camera import Camera
        from raycast_viewer.core.renderer import FrameRenderer
        from raycast_viewer.core.shading import ShadingConfig
        from raycast_viewer.scene.scene import Scene

        # Sphere above the view axis, hit by the ray through coord (0, 1)
        scene = Scene()
        scene.add_sphere((0.0, 1.0, 1.0), 0.3)
        shading = ShadingConfig(light_direction=(0.0, 0.0, -1.0))

        flipped = FrameRenderer(4, 4, flip_y=True)
        flipped.render(scene, Camera(), shading)
        assert flipped.get_pixels()[0, 2, 0] > 0

        upright = FrameRenderer(4, 4)
        upright.render(scene, Camera(), shading)
        assert tuple(upright.get_pixels()[0, 2]) == (0, 0, 0, 255)


class TestRendererState:
    """Tests for frame counting, resizing and export helpers."""

    def test_frame_count(self):
        """Test each render increments the frame count."""
        from raycast_viewer.camera.camera import Camera
        from raycast_viewer.core.renderer import FrameRenderer
        from raycast_viewer.scene.scene import Scene

        renderer = FrameRenderer(4, 4)
        renderer.render(Scene(), Camera())
        renderer.render(Scene(), Camera())
        assert renderer.frame_count == 2

    def test_resize(self):
        """Test resize changes dimensions and resets the frame count."""
        from raycast_viewer.camera.camera import Camera
        from raycast_viewer.core.renderer import FrameRenderer
        from raycast_viewer.scene.scene import Scene

        renderer = FrameRenderer(4, 4)
        renderer.render(Scene(), Camera())
        renderer.resize(8, 2)

        assert (renderer.width, renderer.height) == (8, 2)
        assert renderer.frame_count == 0

        renderer.render(Scene(), Camera())
        assert renderer.get_pixels().shape == (2, 8, 4)

        with pytest.raises(ValueError):
            renderer.resize(0, 2)

    def test_get_bytes(self):
        """Test the byte export is width * height * 4 long."""
        from raycast_viewer.camera.camera import Camera
        from raycast_viewer.core.renderer import FrameRenderer

        renderer = FrameRenderer(6, 3)
        renderer.render(_single_sphere_scene(), Camera())
        data = renderer.get_bytes()

        assert len(data) == 6 * 3 * 4
        assert data[3] == 255
