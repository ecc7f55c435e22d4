"""Interactive viewer window using Taichi GGUI.

The viewer is the host application around the ray caster. Every frame it

1. handles key presses (camera movement, Escape to quit) and window
   resizes (aspect ratio only),
2. renders a full frame of the scene from a snapshot of the camera,
3. copies the RGBA8 pixel buffer into the display field and draws it as a
   screen-filling image over the window clear color.

The scene and camera belong to the viewer and may be edited between
frames; the renderer only ever sees snapshots taken at the start of a
render pass.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raycast_viewer.preview.interactive import InteractiveViewer
    >>>
    >>> viewer = InteractiveViewer()
    >>> viewer.run()  # Blocks until the window is closed
"""

import logging
import os
import platform
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import taichi as ti
import taichi.math as tm

from raycast_viewer.camera.camera import Camera
from raycast_viewer.camera.controller import CameraController
from raycast_viewer.scene.scene import Scene, create_default_scene

if TYPE_CHECKING:
    from raycast_viewer.core.shading import ShadingConfig

logger = logging.getLogger(__name__)

ESCAPE_KEY = "Escape"


@dataclass
class ViewerConfig:
    """Configuration for the interactive viewer.

    Attributes:
        width: Rendered image and window width in pixels.
        height: Rendered image and window height in pixels.
        title: Window title.
        clear_color: Window background (RGB) drawn behind the image.
            Independent of the ray caster's background color.
        camera_speed: Distance moved per key press.
        vsync: Whether to synchronize presentation with the display.
    """

    width: int = 800
    height: int = 800
    title: str = "Ray Tracing CPU"
    clear_color: tuple[float, float, float] = (0.1, 0.2, 0.3)
    camera_speed: float = 0.2
    vsync: bool = True


class AppState:
    """Frame timer.

    Attributes:
        elapsed_time: Seconds between the two most recent update() calls.
        frame_index: Number of update() calls so far.
    """

    def __init__(self, clock: Callable[[], float] = time.perf_counter) -> None:
        self._clock = clock
        self.previous_time = clock()
        self.elapsed_time = 0.0
        self.frame_index = 0

    def update(self) -> None:
        current_time = self._clock()
        self.elapsed_time = current_time - self.previous_time
        self.previous_time = current_time
        self.frame_index += 1


# Lazy kernel holder - created on first use, after Taichi is initialized
_copy_to_display_kernel: Any = None


def _get_copy_to_display_kernel() -> Any:
    """Get or create the kernel converting the RGBA8 buffer to float RGB."""
    global _copy_to_display_kernel
    if _copy_to_display_kernel is None:

        @ti.kernel
        def _kernel(src: ti.template(), dst: ti.template(), width: ti.i32, height: ti.i32):
            for i, j in ti.ndrange(width, height):
                p = src[i, j]
                dst[i, j] = tm.vec3(
                    ti.cast(p[0], ti.f32), ti.cast(p[1], ti.f32), ti.cast(p[2], ti.f32)
                ) / 255.0

        _copy_to_display_kernel = _kernel
    return _copy_to_display_kernel


class InteractiveViewer:
    """Interactive ray-casting viewer built on ti.ui.Window.

    Attributes:
        config: Viewer configuration.
        scene: The scene shown by the viewer.
        camera: The camera moved by the keyboard controller.
        shading: Light direction and background color.
        controller: Keyboard camera controller.
        state: Frame timer.
        renderer: The frame renderer (bottom-left origin, as the canvas).
        display_image: Float RGB field drawn on the canvas.
    """

    def __init__(
        self,
        config: ViewerConfig | None = None,
        *,
        scene: Scene | None = None,
        camera: Camera | None = None,
        shading: "ShadingConfig | None" = None,
    ) -> None:
        """Initialize the viewer.

        The window is created lazily by run() or the window property.

        Args:
            config: Viewer configuration (default ViewerConfig()).
            scene: Scene to show (default create_default_scene()).
            camera: Camera to render from (default Camera()).
            shading: Shading parameters (default ShadingConfig()).
        """
        # Field-owning modules load on first use, after ti.init()
        from raycast_viewer.core.renderer import FrameRenderer
        from raycast_viewer.core.shading import ShadingConfig

        self.config = config if config is not None else ViewerConfig()
        self.scene = scene if scene is not None else create_default_scene()
        self.camera = camera if camera is not None else Camera()
        self.shading = shading if shading is not None else ShadingConfig()
        self.controller = CameraController(self.config.camera_speed)
        self.state = AppState()

        width, height = self.config.width, self.config.height
        self.renderer = FrameRenderer(width, height)
        self.camera.set_aspect_ratio(width, height)
        self._window_shape = (width, height)

        self.display_image: ti.MatrixField = ti.Vector.field(
            3, dtype=ti.f32, shape=(width, height)
        )

        self._window: ti.ui.Window | None = None
        self._canvas: ti.ui.Canvas | None = None
        self._closed = False

    def _initialize_window(self) -> None:
        if self._window is not None:
            return

        self._window = ti.ui.Window(
            name=self.config.title,
            res=(self.config.width, self.config.height),
            vsync=self.config.vsync,
        )
        self._canvas = self._window.get_canvas()
        logger.info(
            "Opened %dx%d viewer window", self.config.width, self.config.height
        )

    @property
    def window(self) -> ti.ui.Window:
        """Get the Taichi GGUI window, initializing if needed."""
        if self._window is None:
            self._initialize_window()
        assert self._window is not None
        return self._window

    @property
    def canvas(self) -> ti.ui.Canvas:
        """Get the canvas for rendering."""
        if self._canvas is None:
            self._initialize_window()
        assert self._canvas is not None
        return self._canvas

    # =========================================================================
    # Input and Resize
    # =========================================================================

    def handle_key(self, key: str) -> bool:
        """Handle one key press.

        Escape closes the viewer; other keys go to the camera controller.

        Returns:
            True if the key was handled.
        """
        if key == ESCAPE_KEY:
            self.close()
            return True
        return self.controller.process_key(self.camera, key)

    def resize(self, width: int, height: int) -> None:
        """React to a window resize.

        Only the camera aspect ratio changes; the rendered image keeps its
        size and is stretched over the window.
        """
        if self.camera.set_aspect_ratio(width, height):
            logger.info("Window resized to %dx%d", width, height)

    def process_events(self) -> None:
        """Drain pending window events and check for resizes."""
        for event in self.window.get_events(ti.ui.PRESS):
            self.handle_key(event.key)

        shape = tuple(self.window.get_window_shape())
        if shape != self._window_shape:
            self._window_shape = shape
            self.resize(shape[0], shape[1])

    # =========================================================================
    # Frame Loop
    # =========================================================================

    def update(self) -> None:
        """Advance the frame timer and render a new frame."""
        self.state.update()
        self.renderer.render(self.scene, self.camera, self.shading)
        logger.debug(
            "Frame %d, %.2f ms since previous",
            self.state.frame_index,
            self.state.elapsed_time * 1000.0,
        )

    def update_display(self) -> None:
        """Copy the rendered RGBA8 frame into the float display field."""
        _get_copy_to_display_kernel()(
            self.renderer.get_pixel_buffer(),
            self.display_image,
            self.renderer.width,
            self.renderer.height,
        )

    def show_frame(self) -> None:
        """Draw the current frame and present it."""
        self.update_display()
        self.canvas.set_background_color(self.config.clear_color)
        self.canvas.set_image(self.display_image)
        self.window.show()

    def is_running(self) -> bool:
        """Check if the viewer should keep running."""
        if self._closed:
            return False
        return self.window.running

    def run(self) -> None:
        """Run the event loop until the window is closed or Escape is pressed."""
        self._initialize_window()
        logger.info("Starting viewer loop")

        try:
            while self.is_running():
                self.process_events()
                if not self.is_running():
                    break
                try:
                    self.update()
                except Exception:
                    logger.exception("Frame %d failed", self.state.frame_index)
                    raise
                self.show_frame()
        finally:
            self.shutdown()

    def shutdown(self) -> None:
        """Release the window at the end of the event loop."""
        logger.info("exiting")
        self.close()

    def close(self) -> None:
        """Stop the viewer loop.

        After calling this, the viewer cannot be restarted.
        """
        self._closed = True
        if self._window is not None:
            self._window.running = False

    @staticmethod
    def is_display_available() -> bool:
        """Check if a display is available for GUI rendering.

        Returns:
            True if a display is available, False for headless environments.
        """
        display = os.environ.get("DISPLAY")
        wayland = os.environ.get("WAYLAND_DISPLAY")
        system = platform.system()

        if system == "Darwin":
            # SSH session without X forwarding
            if os.environ.get("SSH_CONNECTION") and not display:
                return False
            return True

        if system == "Windows":
            return True

        return bool(display or wayland)
