"""Preview module for output and visualization.

Components:
    interactive: Taichi GGUI viewer window with keyboard camera control
    export: PNG export via Pillow
    display: Matplotlib static preview

Importing this package allocates no Taichi fields, so it may happen before
ti.init(). The viewer loads the renderer when it is constructed.

Example:
    >>> import taichi as ti
    >>> from raycast_viewer.preview import InteractiveViewer
    >>> ti.init(arch=ti.cpu)
    >>> viewer = InteractiveViewer()
    >>> viewer.run()
"""

from raycast_viewer.preview.display import show_preview
from raycast_viewer.preview.export import image_to_uint8, save_png, save_png_from_array
from raycast_viewer.preview.interactive import AppState, InteractiveViewer, ViewerConfig

__all__ = [
    "InteractiveViewer",
    "ViewerConfig",
    "AppState",
    "show_preview",
    "save_png",
    "save_png_from_array",
    "image_to_uint8",
]
