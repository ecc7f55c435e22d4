"""Camera model: view, projection and matrices.

The camera holds a view (position + orientation quaternion) and a
projection (vertical field of view, aspect ratio, near/far planes).

It serves two consumers:

- The display path uses ``view_projection_matrix()``: a right-handed
  OpenGL perspective remapped to the [0, 1] depth range of modern GPU
  APIs by ``OPENGL_TO_WGPU_MATRIX``.
- The ray caster uses only ``eye`` and ``basis()``. Per-pixel ray
  directions ignore the field of view and aspect ratio; see
  ``raycast_viewer.camera.rays``.

Quaternions are stored as (x, y, z, w). Host-side math uses NumPy.

Example:
    >>> from raycast_viewer.camera.camera import Camera
    >>> camera = Camera()
    >>> camera.eye
    (0.0, 0.0, 2.0)
    >>> camera.view_projection_matrix().shape
    (4, 4)
"""

from __future__ import annotations

import copy
import math
from dataclasses import dataclass, field

import numpy as np
import numpy.typing as npt

Vec3Tuple = tuple[float, float, float]
QuatTuple = tuple[float, float, float, float]

IDENTITY_QUAT: QuatTuple = (0.0, 0.0, 0.0, 1.0)

# Maps OpenGL clip-space depth [-1, 1] to [0, 1]
# fmt: off
OPENGL_TO_WGPU_MATRIX = np.array(
    [
        [1.0, 0.0, 0.0, 0.0],
        [0.0, 1.0, 0.0, 0.0],
        [0.0, 0.0, 0.5, 0.5],
        [0.0, 0.0, 0.0, 1.0],
    ],
    dtype=np.float64,
)
# fmt: on


def degree_to_radian(degree: float) -> float:
    """Convert an angle from degrees to radians."""
    return degree * math.pi / 180.0


# =============================================================================
# Quaternion Helpers
# =============================================================================


def quat_normalize(q: QuatTuple) -> QuatTuple:
    """Normalize a quaternion to unit length.

    Raises:
        ValueError: If the quaternion has zero length.
    """
    arr = np.asarray(q, dtype=np.float64)
    norm = np.linalg.norm(arr)
    if norm == 0.0:
        raise ValueError("Rotation quaternion must be non-zero")
    arr = arr / norm
    return (float(arr[0]), float(arr[1]), float(arr[2]), float(arr[3]))


def quat_rotate(q: QuatTuple, v: npt.ArrayLike) -> npt.NDArray[np.float64]:
    """Rotate vector v by unit quaternion q.

    Uses v' = v + 2w(q_xyz x v) + 2 q_xyz x (q_xyz x v).
    """
    qv = np.asarray(q[:3], dtype=np.float64)
    w = float(q[3])
    vec = np.asarray(v, dtype=np.float64)
    t = 2.0 * np.cross(qv, vec)
    return vec + w * t + np.cross(qv, t)


def quat_multiply(a: QuatTuple, b: QuatTuple) -> QuatTuple:
    """Hamilton product a * b (apply b first, then a)."""
    ax, ay, az, aw = a
    bx, by, bz, bw = b
    return (
        aw * bx + ax * bw + ay * bz - az * by,
        aw * by - ax * bz + ay * bw + az * bx,
        aw * bz + ax * by - ay * bx + az * bw,
        aw * bw - ax * bx - ay * by - az * bz,
    )


def quat_from_axis_angle(axis: Vec3Tuple, angle: float) -> QuatTuple:
    """Build a unit quaternion rotating ``angle`` radians about ``axis``."""
    axis_arr = np.asarray(axis, dtype=np.float64)
    norm = np.linalg.norm(axis_arr)
    if norm == 0.0:
        raise ValueError("Rotation axis must be non-zero")
    axis_arr = axis_arr / norm
    s = math.sin(angle / 2.0)
    return (
        float(axis_arr[0] * s),
        float(axis_arr[1] * s),
        float(axis_arr[2] * s),
        math.cos(angle / 2.0),
    )


def quat_from_matrix(m: npt.ArrayLike) -> QuatTuple:
    """Convert a 3x3 rotation matrix to a unit quaternion.

    Args:
        m: Rotation matrix whose columns are the rotated x, y, z axes.

    Returns:
        The equivalent unit quaternion (x, y, z, w).
    """
    r = np.asarray(m, dtype=np.float64)
    trace = r[0, 0] + r[1, 1] + r[2, 2]

    if trace > 0.0:
        s = math.sqrt(trace + 1.0) * 2.0
        w = 0.25 * s
        x = (r[2, 1] - r[1, 2]) / s
        y = (r[0, 2] - r[2, 0]) / s
        z = (r[1, 0] - r[0, 1]) / s
    elif r[0, 0] > r[1, 1] and r[0, 0] > r[2, 2]:
        s = math.sqrt(1.0 + r[0, 0] - r[1, 1] - r[2, 2]) * 2.0
        w = (r[2, 1] - r[1, 2]) / s
        x = 0.25 * s
        y = (r[0, 1] + r[1, 0]) / s
        z = (r[0, 2] + r[2, 0]) / s
    elif r[1, 1] > r[2, 2]:
        s = math.sqrt(1.0 + r[1, 1] - r[0, 0] - r[2, 2]) * 2.0
        w = (r[0, 2] - r[2, 0]) / s
        x = (r[0, 1] + r[1, 0]) / s
        y = 0.25 * s
        z = (r[1, 2] + r[2, 1]) / s
    else:
        s = math.sqrt(1.0 + r[2, 2] - r[0, 0] - r[1, 1]) * 2.0
        w = (r[1, 0] - r[0, 1]) / s
        x = (r[0, 2] + r[2, 0]) / s
        y = (r[1, 2] + r[2, 1]) / s
        z = 0.25 * s

    return quat_normalize((float(x), float(y), float(z), float(w)))


# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass
class View:
    """Camera placement.

    Attributes:
        position: Eye position in world space.
        rotation: Unit quaternion (x, y, z, w) rotating camera space into
            world space. The identity looks down -Z with +Y up.
    """

    position: Vec3Tuple = (0.0, 0.0, 2.0)
    rotation: QuatTuple = IDENTITY_QUAT


@dataclass
class Projection:
    """Perspective projection parameters.

    Attributes:
        fov: Vertical field of view in radians, in (0, pi).
        aspect_ratio: Width divided by height, > 0.
        near: Near clip distance, 0 < near < far.
        far: Far clip distance.
    """

    fov: float = field(default_factory=lambda: degree_to_radian(45.0))
    aspect_ratio: float = 1.0
    near: float = 0.1
    far: float = 100.0

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Check the projection invariants.

        Raises:
            ValueError: If any invariant is violated.
        """
        if not 0.0 < self.near < self.far:
            raise ValueError(
                f"Projection requires 0 < near < far, got near={self.near}, far={self.far}"
            )
        if not 0.0 < self.fov < math.pi:
            raise ValueError(f"Projection fov must be in (0, pi), got {self.fov}")
        if not self.aspect_ratio > 0.0:
            raise ValueError(f"Projection aspect_ratio must be > 0, got {self.aspect_ratio}")

    def matrix(self) -> npt.NDArray[np.float64]:
        """Right-handed OpenGL perspective matrix (clip depth in [-1, 1])."""
        f = 1.0 / math.tan(self.fov / 2.0)
        n = self.near
        fa = self.far
        return np.array(
            [
                [f / self.aspect_ratio, 0.0, 0.0, 0.0],
                [0.0, f, 0.0, 0.0],
                [0.0, 0.0, (fa + n) / (n - fa), 2.0 * fa * n / (n - fa)],
                [0.0, 0.0, -1.0, 0.0],
            ],
            dtype=np.float64,
        )


@dataclass
class Camera:
    """A perspective camera with a view and a projection.

    The host's input handler mutates the camera between frames; the
    renderer only ever reads a snapshot().

    Attributes:
        view: Position and orientation.
        projection: Field of view, aspect ratio and clip planes.
    """

    view: View = field(default_factory=View)
    projection: Projection = field(default_factory=Projection)

    @classmethod
    def look_at(
        cls,
        eye: Vec3Tuple,
        target: Vec3Tuple,
        up: Vec3Tuple = (0.0, 1.0, 0.0),
        *,
        fov: float | None = None,
        aspect_ratio: float = 1.0,
        near: float = 0.1,
        far: float = 100.0,
    ) -> Camera:
        """Build a camera from eye, target and up vectors.

        Raises:
            ValueError: If eye == target or up is parallel to the view.
        """
        eye_arr = np.asarray(eye, dtype=np.float64)
        forward = np.asarray(target, dtype=np.float64) - eye_arr
        forward_len = np.linalg.norm(forward)
        if forward_len == 0.0:
            raise ValueError("Camera eye and target must differ")
        forward = forward / forward_len

        right = np.cross(forward, np.asarray(up, dtype=np.float64))
        right_len = np.linalg.norm(right)
        if right_len == 0.0:
            raise ValueError("Camera up vector must not be parallel to the view direction")
        right = right / right_len
        true_up = np.cross(right, forward)

        # Columns are the camera's x, y, z axes; camera z points backward
        rotation = quat_from_matrix(np.column_stack((right, true_up, -forward)))

        projection = Projection(
            fov=degree_to_radian(45.0) if fov is None else fov,
            aspect_ratio=aspect_ratio,
            near=near,
            far=far,
        )
        position = (float(eye_arr[0]), float(eye_arr[1]), float(eye_arr[2]))
        return cls(view=View(position=position, rotation=rotation), projection=projection)

    @property
    def eye(self) -> Vec3Tuple:
        """The camera position in world space."""
        x, y, z = self.view.position
        return (float(x), float(y), float(z))

    def basis(self) -> tuple[Vec3Tuple, Vec3Tuple, Vec3Tuple]:
        """Camera axes in world space.

        Returns:
            (right, up, forward). For the identity rotation these are
            (1, 0, 0), (0, 1, 0) and (0, 0, -1).
        """
        q = quat_normalize(self.view.rotation)
        right = quat_rotate(q, (1.0, 0.0, 0.0))
        up = quat_rotate(q, (0.0, 1.0, 0.0))
        forward = quat_rotate(q, (0.0, 0.0, -1.0))
        return _to_tuple(right), _to_tuple(up), _to_tuple(forward)

    def view_matrix(self) -> npt.NDArray[np.float64]:
        """World-to-camera matrix (right-handed, looking down -Z)."""
        right, up, forward = (np.asarray(v) for v in self.basis())
        back = -forward
        eye = np.asarray(self.eye, dtype=np.float64)
        return np.array(
            [
                [right[0], right[1], right[2], -np.dot(right, eye)],
                [up[0], up[1], up[2], -np.dot(up, eye)],
                [back[0], back[1], back[2], -np.dot(back, eye)],
                [0.0, 0.0, 0.0, 1.0],
            ],
            dtype=np.float64,
        )

    def projection_matrix(self) -> npt.NDArray[np.float64]:
        """OpenGL-convention perspective matrix of this camera."""
        return self.projection.matrix()

    def view_projection_matrix(self) -> npt.NDArray[np.float64]:
        """Combined view-projection with depth remapped to [0, 1]."""
        return OPENGL_TO_WGPU_MATRIX @ self.projection_matrix() @ self.view_matrix()

    def set_aspect_ratio(self, width: int, height: int) -> bool:
        """Update the aspect ratio after a window resize.

        Zero-sized dimensions (minimized windows) are ignored.

        Returns:
            True if the aspect ratio was updated.
        """
        if width <= 0 or height <= 0:
            return False
        self.projection.aspect_ratio = width / height
        return True

    def snapshot(self) -> Camera:
        """Return an independent copy for a render pass."""
        return copy.deepcopy(self)


def _to_tuple(v: npt.NDArray[np.float64]) -> Vec3Tuple:
    return (float(v[0]), float(v[1]), float(v[2]))
