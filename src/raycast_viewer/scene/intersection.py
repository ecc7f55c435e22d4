"""Scene-level ray intersection (nearest-hit selection).

This module stores the spheres of the current frame in Taichi fields and
finds, for a ray, the sphere with the smallest hit distance.

Selection policy:
    - The closest distance starts at +inf.
    - Spheres are scanned in scene order; a candidate replaces the current
      best only if its distance is strictly smaller, so the first-listed
      sphere wins exact ties.
    - Negative distances are not rejected.
    - A ray that produced no candidate misses.

The scan is O(n) per ray with no spatial index.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raycast_viewer.scene.intersection import trace_ray, upload_scene
    >>> from raycast_viewer.scene.scene import create_default_scene
    >>> upload_scene(create_default_scene().snapshot())
    >>> trace_ray((0.0, 0.0, 2.0), (0.0, 0.0, -1.0))
    RayHit(sphere_index=0, hit_distance=1.5)
"""

import logging
from collections.abc import Iterable
from typing import NamedTuple

import taichi as ti
import taichi.math as tm

from raycast_viewer.geometry.sphere import Sphere, hit_sphere
from raycast_viewer.scene.scene import SphereInfo

logger = logging.getLogger(__name__)

vec3 = tm.vec3

INF = float("inf")


@ti.dataclass
class SceneHitRecord:
    """Record of a ray-scene intersection.

    Attributes:
        hit: 1 if any sphere was hit, 0 on a miss.
        t: Hit distance along the ray. Only valid if hit == 1.
        sphere_index: Index of the hit sphere in scene order, -1 on a miss.
    """

    hit: ti.i32
    t: ti.f32
    sphere_index: ti.i32


class RayHit(NamedTuple):
    """Host-side result of a successful ray query."""

    sphere_index: int
    hit_distance: float


# Maximum number of spheres supported in the scene
MAX_SPHERES = 1024

# Sphere storage: Structure of Arrays layout
sphere_positions = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SPHERES)
sphere_radii = ti.field(dtype=ti.f32, shape=MAX_SPHERES)
sphere_albedos = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())

# Result slots for Python-side ray queries
_query_hit = ti.field(dtype=ti.i32, shape=())
_query_t = ti.field(dtype=ti.f32, shape=())
_query_index = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Clear all spheres from the scene storage.

    Resets the sphere count to zero. Field data is overwritten when new
    spheres are added.
    """
    num_spheres[None] = 0


def add_sphere(
    position: tuple[float, float, float],
    radius: float,
    albedo: tuple[float, float, float] = (1.0, 1.0, 1.0),
) -> int:
    """Add a sphere to the scene storage.

    Args:
        position: The center of the sphere.
        radius: The radius of the sphere.
        albedo: The base color of the sphere.

    Returns:
        The index of the added sphere.

    Raises:
        RuntimeError: If the maximum number of spheres is exceeded.
    """
    idx = num_spheres[None]
    if idx >= MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")
    sphere_positions[idx] = [position[0], position[1], position[2]]
    sphere_radii[idx] = radius
    sphere_albedos[idx] = [albedo[0], albedo[1], albedo[2]]
    num_spheres[None] = idx + 1
    return idx


def upload_scene(snapshot: Iterable[SphereInfo]) -> int:
    """Replace the stored spheres with a scene snapshot.

    Args:
        snapshot: Spheres in scene order, usually from Scene.snapshot().

    Returns:
        The number of spheres uploaded.

    Raises:
        RuntimeError: If the snapshot holds more than MAX_SPHERES spheres.
    """
    spheres = tuple(snapshot)
    if len(spheres) > MAX_SPHERES:
        raise RuntimeError(
            f"Scene has {len(spheres)} spheres, maximum is {MAX_SPHERES}"
        )
    clear_scene()
    for sphere in spheres:
        add_sphere(sphere.position, sphere.radius, sphere.albedo)
    logger.debug("Uploaded %d spheres", len(spheres))
    return len(spheres)


def get_sphere_count() -> int:
    """Get the number of spheres in the scene storage."""
    return int(num_spheres[None])


@ti.func
def get_sphere(index: ti.i32) -> Sphere:
    """Load the sphere at ``index`` from the scene storage."""
    return Sphere(
        position=sphere_positions[index],
        radius=sphere_radii[index],
        albedo=sphere_albedos[index],
    )


@ti.func
def _make_miss_record() -> SceneHitRecord:
    """Create a SceneHitRecord indicating no intersection."""
    return SceneHitRecord(hit=0, t=0.0, sphere_index=-1)


@ti.func
def intersect_scene(ray_origin: vec3, ray_direction: vec3) -> SceneHitRecord:
    """Find the nearest sphere hit by a ray.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray (non-zero).

    Returns:
        A SceneHitRecord for the sphere with the smallest hit distance,
        or a miss record if no sphere was hit.
    """
    closest_t = INF
    result = _make_miss_record()

    # Serial scan when this is the outermost loop of a query kernel
    ti.loop_config(serialize=True)
    for i in range(num_spheres[None]):
        rec = hit_sphere(ray_origin, ray_direction, get_sphere(i))
        if rec.hit == 1 and rec.t < closest_t:
            closest_t = rec.t
            result = SceneHitRecord(hit=1, t=rec.t, sphere_index=i)

    return result


@ti.kernel
def _trace_ray_kernel(ray_origin: vec3, ray_direction: vec3):
    rec = intersect_scene(ray_origin, ray_direction)
    _query_hit[None] = rec.hit
    _query_t[None] = rec.t
    _query_index[None] = rec.sphere_index


def trace_ray(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
) -> RayHit | None:
    """Intersect a single ray with the uploaded scene.

    This is a Python-callable query for tests and tooling. Frame rendering
    calls intersect_scene() directly inside its kernel.

    Args:
        origin: Ray origin.
        direction: Ray direction (must not be zero-length).

    Returns:
        RayHit(sphere_index, hit_distance) for the nearest sphere, or None
        if the ray misses every sphere.
    """
    _trace_ray_kernel(vec3(*origin), vec3(*direction))
    if _query_hit[None] == 0:
        return None
    return RayHit(int(_query_index[None]), float(_query_t[None]))
