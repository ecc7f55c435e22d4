"""Camera module for view, projection and ray generation.

Components:
    camera: Camera model (view + projection) and its matrices
    controller: Keyboard camera movement
    rays: Per-pixel ray generation in Taichi (import after ti.init())

Ray generation uses normalized device coordinates in [-1, 1]^2 with the
camera looking down -Z at unit distance.
"""

from .camera import (
    OPENGL_TO_WGPU_MATRIX,
    Camera,
    Projection,
    View,
    degree_to_radian,
    quat_from_axis_angle,
    quat_from_matrix,
    quat_rotate,
)
from .controller import CameraController

__all__ = [
    "Camera",
    "View",
    "Projection",
    "CameraController",
    "OPENGL_TO_WGPU_MATRIX",
    "degree_to_radian",
    "quat_from_axis_angle",
    "quat_from_matrix",
    "quat_rotate",
]
