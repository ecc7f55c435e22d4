"""Ray data structure for the sphere ray caster.

Rays are value types built fresh for every pixel inside a Taichi kernel.
The direction is not required to be normalized: the intersection math
accounts for its length through the quadratic's ``a`` coefficient.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raycast_viewer.core.ray import Ray, ray_at, vec3
    >>> ray = Ray(origin=vec3(0.0, 0.0, 2.0), direction=vec3(0.0, 0.0, -1.0))
    >>> # ray_at(ray, 1.5) inside a kernel gives (0, 0, 0.5)
"""

import taichi as ti
import taichi.math as tm

# Type aliases for vectors using Taichi's math module
vec2 = tm.vec2
vec3 = tm.vec3
vec4 = tm.vec4


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction vector of the ray (vec3). Camera rays use
            an un-normalized direction with unit depth.
    """

    origin: vec3
    direction: vec3


@ti.func
def ray_at(ray: Ray, t: ti.f32) -> vec3:
    """Compute the point along the ray at parameter t.

    Args:
        ray: The ray to evaluate.
        t: The parameter value, measured in multiples of ray.direction.

    Returns:
        The point ray.origin + t * ray.direction.
    """
    return ray.origin + t * ray.direction


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from origin and direction."""
    return Ray(origin=origin, direction=direction)
