"""Sphere primitive with closed-form ray-sphere intersection.

The intersection solves the quadratic obtained by substituting the ray
equation into the sphere equation:

    |origin + t * direction - position|^2 = radius^2

which expands to ``a*t^2 + b*t + c = 0`` with

    o = origin - position
    a = dot(direction, direction)
    b = 2 * dot(o, direction)
    c = dot(o, o) - radius^2

Only the near root ``(-b - sqrt(b^2 - 4ac)) / 2a`` is used. Negative roots
are kept, so a sphere behind the ray origin still reports a hit, and a ray
starting inside a sphere reports the entry point behind it.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raycast_viewer.geometry.sphere import Sphere, hit_sphere, vec3
    >>> sphere = Sphere(position=vec3(0, 0, 0), radius=0.5, albedo=vec3(1, 0, 1))
    >>> # Use hit_sphere within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

vec3 = tm.vec3


@ti.dataclass
class Sphere:
    """A sphere with a position, radius and base color.

    Attributes:
        position: The center point of the sphere (vec3).
        radius: The radius of the sphere. Zero or negative radii are not
            rejected; they describe degenerate but well-defined geometry.
        albedo: Base reflective color (RGB). Components are not clamped.
    """

    position: vec3
    radius: ti.f32
    albedo: vec3


@ti.dataclass
class SphereHit:
    """Result of intersecting one ray with one sphere.

    Attributes:
        hit: 1 if the discriminant was non-negative, 0 otherwise.
        t: Near-root hit distance in multiples of the ray direction.
            Only valid if hit == 1. May be negative.
    """

    hit: ti.i32
    t: ti.f32


@ti.func
def sphere_coefficients(ray_origin: vec3, ray_direction: vec3, sphere: Sphere) -> vec3:
    """Compute the quadratic coefficients (a, b, c) for a ray and sphere.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The (possibly un-normalized) ray direction.
        sphere: The sphere to test.

    Returns:
        vec3(a, b, c) of the hit-distance equation a*t^2 + b*t + c = 0.
    """
    oc = ray_origin - sphere.position
    a = tm.dot(ray_direction, ray_direction)
    b = 2.0 * tm.dot(oc, ray_direction)
    c = tm.dot(oc, oc) - sphere.radius * sphere.radius
    return vec3(a, b, c)


@ti.func
def hit_sphere(ray_origin: vec3, ray_direction: vec3, sphere: Sphere) -> SphereHit:
    """Test a ray against a single sphere.

    The direction must not be zero-length: a == 0 divides by zero. Camera
    rays always have a unit depth component, so this never happens for
    primary rays.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray.
        sphere: The sphere to test.

    Returns:
        A SphereHit with hit == 0 when the discriminant is negative,
        otherwise hit == 1 and the near-root distance.
    """
    coeffs = sphere_coefficients(ray_origin, ray_direction, sphere)
    a = coeffs[0]
    b = coeffs[1]
    c = coeffs[2]

    discriminant = b * b - 4.0 * a * c

    # Taichi requires outer-scope declaration
    did_hit = 0
    hit_t = 0.0

    if discriminant >= 0.0:
        did_hit = 1
        hit_t = (-b - ti.sqrt(discriminant)) / (2.0 * a)

    return SphereHit(hit=did_hit, t=hit_t)


@ti.func
def make_sphere(position: vec3, radius: ti.f32, albedo: vec3) -> Sphere:
    """Create a sphere from position, radius and albedo."""
    return Sphere(position=position, radius=radius, albedo=albedo)
