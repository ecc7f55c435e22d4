"""Per-pixel camera ray generation.

Each pixel's normalized screen coordinate ``coord`` in [-1, 1]^2 becomes a
ray from the camera eye with direction

    coord.x * right + coord.y * up + forward

For the default (identity) orientation this is exactly
``(coord.x, coord.y, -1)``: a right-handed camera looking down -Z at unit
distance. The direction is not normalized, and neither the field of view
nor the aspect ratio scales it. This simplified mapping differs from the
projection matrix used for display.

All ray generation runs inside Taichi kernels.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raycast_viewer.camera.camera import Camera
    >>> from raycast_viewer.camera.rays import setup_camera, get_camera_info
    >>> setup_camera(Camera())
    >>> get_camera_info()["eye"]
    (0.0, 0.0, 2.0)
"""

import taichi as ti

from raycast_viewer.camera.camera import Camera
from raycast_viewer.core.ray import Ray, make_ray, vec2

# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

_camera_eye = ti.Vector.field(3, dtype=ti.f32, shape=())

# Ray-direction basis
_camera_right = ti.Vector.field(3, dtype=ti.f32, shape=())
_camera_up = ti.Vector.field(3, dtype=ti.f32, shape=())
_camera_forward = ti.Vector.field(3, dtype=ti.f32, shape=())


def setup_camera(camera: Camera) -> None:
    """Upload a camera snapshot for ray generation.

    Must be called before rendering and again whenever the camera moves.

    Args:
        camera: The camera to read the eye and orientation from.
    """
    right, up, forward = camera.basis()
    _camera_eye[None] = list(camera.eye)
    _camera_right[None] = list(right)
    _camera_up[None] = list(up)
    _camera_forward[None] = list(forward)


@ti.func
def pixel_to_ndc(x: ti.i32, y: ti.i32, width: ti.i32, height: ti.i32, flip_y: ti.i32) -> vec2:
    """Map a pixel index to a normalized device coordinate.

    Computes (x / width, y / height) * 2 - 1. With flip_y set, the y
    component is negated so that row 0 of a top-left-origin image maps to
    the top of the view.

    Args:
        x: Pixel column in [0, width).
        y: Pixel row in [0, height).
        width: Image width in pixels.
        height: Image height in pixels.
        flip_y: Non-zero to negate the y coordinate.

    Returns:
        The coordinate in [-1, 1)^2 (x right, y up unless flipped).
    """
    coord = (
        vec2(
            ti.cast(x, ti.f32) / ti.cast(width, ti.f32),
            ti.cast(y, ti.f32) / ti.cast(height, ti.f32),
        )
        * 2.0
        - 1.0
    )
    if flip_y != 0:
        coord[1] = -coord[1]
    return coord


@ti.func
def get_ray(coord: vec2) -> Ray:
    """Generate the camera ray through a normalized device coordinate.

    Args:
        coord: Coordinate in [-1, 1]^2.

    Returns:
        A Ray from the eye with an un-normalized, unit-depth direction.
    """
    direction = coord.x * _camera_right[None] + coord.y * _camera_up[None] + _camera_forward[None]
    return make_ray(_camera_eye[None], direction)


def get_camera_info() -> dict[str, tuple[float, float, float]]:
    """Get the uploaded camera state for debugging.

    Returns:
        Dictionary with eye, right, up and forward.
    """
    info = {}
    for name, fld in (
        ("eye", _camera_eye),
        ("right", _camera_right),
        ("up", _camera_up),
        ("forward", _camera_forward),
    ):
        v = fld[None]
        info[name] = (float(v[0]), float(v[1]), float(v[2]))
    return info
