"""Full-frame renderer writing an RGBA8 pixel buffer.

For every pixel (x, y) of a width x height image the renderer

1. maps the pixel to a normalized coordinate: (x/width, y/height) * 2 - 1,
2. builds the camera ray for that coordinate,
3. finds the nearest sphere along the ray,
4. shades the hit (or miss),
5. converts the float RGBA color to 8 bits per channel by truncating
   component * 255 (saturating at 0 and 255) and stores it at [x, y].

Every call recomputes every pixel; there is no incremental update. The
pixel loop is a single Taichi kernel, parallel across pixels. Each pixel
reads only the scene and camera snapshot uploaded before the kernel
launch and writes a disjoint pixel, so the frame is deterministic.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raycast_viewer.camera.camera import Camera
    >>> from raycast_viewer.core.renderer import FrameRenderer
    >>> from raycast_viewer.scene.scene import create_default_scene
    >>>
    >>> renderer = FrameRenderer(800, 800)
    >>> renderer.render(create_default_scene(), Camera())
    >>> pixels = renderer.get_pixels()  # (800, 800, 4) uint8
"""

import logging
import time
from collections.abc import Iterable

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from raycast_viewer.camera.camera import Camera
from raycast_viewer.camera.rays import get_ray, pixel_to_ndc, setup_camera
from raycast_viewer.core.ray import vec4
from raycast_viewer.core.shading import ShadingConfig, setup_shading, shade
from raycast_viewer.scene.intersection import intersect_scene, upload_scene
from raycast_viewer.scene.scene import Scene, SphereInfo

logger = logging.getLogger(__name__)

rgba8 = ti.types.vector(4, ti.u8)

# =============================================================================
# Render Target (Pixel Buffer)
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

# RGBA8 pixel buffer indexed [x, y]
_pixel_buffer = ti.Vector.field(4, dtype=ti.u8, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))


def _check_dimensions(width: int, height: int) -> None:
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )


# =============================================================================
# Per-Pixel Work
# =============================================================================


@ti.func
def to_rgba8(color: vec4) -> rgba8:
    """Convert a float RGBA color to 8-bit channels.

    Each channel becomes floor(component * 255). Values outside [0, 1]
    saturate at 0 and 255 instead of wrapping. The clamp is deliberate: a
    bare truncating cast to u8 is undefined for out-of-range floats, while
    the saturating conversion renders over-bright albedos at full
    intensity and negative channels as zero.
    """
    return ti.cast(tm.clamp(color * 255.0, 0.0, 255.0), ti.u8)


@ti.func
def render_pixel(x: ti.i32, y: ti.i32, width: ti.i32, height: ti.i32, flip_y: ti.i32) -> vec4:
    """Compute the shaded float color of one pixel.

    Args:
        x: Pixel column.
        y: Pixel row.
        width: Image width in pixels.
        height: Image height in pixels.
        flip_y: Non-zero when row 0 is the top of the image.

    Returns:
        The RGBA color before 8-bit conversion.
    """
    coord = pixel_to_ndc(x, y, width, height, flip_y)
    ray = get_ray(coord)
    rec = intersect_scene(ray.origin, ray.direction)
    return shade(ray, rec)


@ti.kernel
def _render_frame(width: ti.i32, height: ti.i32, flip_y: ti.i32):
    """Render every pixel of the active region into the pixel buffer."""
    for x, y in ti.ndrange(width, height):
        _pixel_buffer[x, y] = to_rgba8(render_pixel(x, y, width, height, flip_y))


@ti.kernel
def _render_single_pixel(
    x: ti.i32, y: ti.i32, width: ti.i32, height: ti.i32, flip_y: ti.i32
) -> vec4:
    return render_pixel(x, y, width, height, flip_y)


# =============================================================================
# Frame Renderer
# =============================================================================


class FrameRenderer:
    """Renders complete frames of a sphere scene into an RGBA8 buffer.

    The renderer owns the pixel buffer during a render pass. Afterwards
    the buffer is read (get_pixels(), get_pixel_buffer()) by the display
    or export code.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        flip_y: Whether row 0 of the image is the top of the view.
    """

    def __init__(self, width: int, height: int, *, flip_y: bool = False) -> None:
        """Initialize the renderer.

        Args:
            width: Image width in pixels (max 2048).
            height: Image height in pixels (max 2048).
            flip_y: Set for top-left-origin consumers such as PNG files.
                Leave unset for bottom-left-origin consumers such as the
                GGUI canvas.

        Raises:
            ValueError: If dimensions are not positive or exceed the maximum.
        """
        _check_dimensions(width, height)
        self._width = width
        self._height = height
        self.flip_y = flip_y
        self._frame_count = 0

    @property
    def width(self) -> int:
        """Get the image width."""
        return self._width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self._height

    @property
    def frame_count(self) -> int:
        """Number of frames rendered since creation or the last resize."""
        return self._frame_count

    def resize(self, width: int, height: int) -> None:
        """Change the image dimensions.

        The next render() recomputes the whole frame at the new size.

        Raises:
            ValueError: If dimensions are not positive or exceed the maximum.
        """
        _check_dimensions(width, height)
        self._width = width
        self._height = height
        self._frame_count = 0
        logger.info("Render target resized to %dx%d", width, height)

    def prepare(
        self,
        scene: Scene | Iterable[SphereInfo],
        camera: Camera,
        shading: ShadingConfig | None = None,
    ) -> None:
        """Upload frozen copies of the scene, camera and shading state.

        Later edits to ``scene`` or ``camera`` do not affect the uploaded
        state until the next call.
        """
        snapshot = scene.snapshot() if isinstance(scene, Scene) else tuple(scene)
        upload_scene(snapshot)
        setup_camera(camera.snapshot())
        setup_shading(shading)

    def render(
        self,
        scene: Scene | Iterable[SphereInfo],
        camera: Camera,
        shading: ShadingConfig | None = None,
    ) -> None:
        """Render one full frame.

        Args:
            scene: The scene (or a snapshot of its spheres).
            camera: The camera to render from.
            shading: Light direction and background color. Defaults to
                ShadingConfig().
        """
        start = time.perf_counter()
        self.prepare(scene, camera, shading)
        _render_frame(self._width, self._height, int(self.flip_y))
        ti.sync()
        self._frame_count += 1
        logger.debug(
            "Rendered frame %d (%dx%d) in %.2f ms",
            self._frame_count,
            self._width,
            self._height,
            (time.perf_counter() - start) * 1000.0,
        )

    def render_pixel_color(self, x: int, y: int) -> tuple[float, float, float, float]:
        """Compute the float color of a single pixel.

        Uses the state uploaded by the last prepare() or render(). Useful
        for testing and debugging individual pixels.
        """
        color = _render_single_pixel(x, y, self._width, self._height, int(self.flip_y))
        return (float(color[0]), float(color[1]), float(color[2]), float(color[3]))

    def _check_rendered(self) -> None:
        if self._frame_count == 0:
            raise RuntimeError("No frame rendered yet. Call render() first.")

    def get_pixel_buffer(self) -> ti.MatrixField:
        """Get the raw RGBA8 Taichi field.

        Note: This returns the full preallocated buffer indexed [x, y].
        Use width/height to determine the active region.

        Raises:
            RuntimeError: If no frame has been rendered.
        """
        self._check_rendered()
        return _pixel_buffer

    def get_pixels(self) -> npt.NDArray[np.uint8]:
        """Get the current frame as a row-major RGBA8 array.

        Returns:
            Array of shape (height, width, 4) where row index = pixel y.

        Raises:
            RuntimeError: If no frame has been rendered.
        """
        self._check_rendered()
        full = _pixel_buffer.to_numpy()
        active = full[: self._width, : self._height, :]
        # (width, height, 4) -> (height, width, 4)
        return np.ascontiguousarray(np.transpose(active, (1, 0, 2)))

    def get_bytes(self) -> bytes:
        """Get the current frame as width * height * 4 row-major bytes."""
        return self.get_pixels().tobytes()

    def __repr__(self) -> str:
        return (
            f"FrameRenderer(width={self.width}, height={self.height}, "
            f"frames={self.frame_count})"
        )
