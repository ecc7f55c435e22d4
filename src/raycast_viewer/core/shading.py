"""Lambertian shading with a single directional light.

A miss returns the background color. A hit returns the sphere's albedo
scaled by ``max(0, dot(normal, -light_direction))`` with opaque alpha.
Nothing is clamped besides the ``max``; albedo values outside [0, 1] pass
through unchanged to the 8-bit conversion.

The light direction and background color are configuration, uploaded to
Taichi fields by setup_shading() before a render pass.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raycast_viewer.core.shading import ShadingConfig, setup_shading
    >>> setup_shading(ShadingConfig(light_direction=(0.0, -1.0, 0.0)))
"""

import logging
from dataclasses import dataclass

import numpy as np
import taichi as ti
import taichi.math as tm

from raycast_viewer.core.ray import Ray, ray_at, vec3, vec4
from raycast_viewer.geometry.sphere import Sphere
from raycast_viewer.scene.intersection import SceneHitRecord, get_sphere, intersect_scene

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ShadingConfig:
    """Shading parameters.

    Attributes:
        light_direction: Direction the light travels. Normalized on upload.
        background_color: RGBA returned for rays that miss every sphere.
    """

    light_direction: tuple[float, float, float] = (-1.0, -1.0, -1.0)
    background_color: tuple[float, float, float, float] = (0.0, 0.0, 0.0, 1.0)

    def normalized_light_direction(self) -> tuple[float, float, float]:
        """Return the unit-length light direction.

        Raises:
            ValueError: If the light direction is the zero vector.
        """
        d = np.asarray(self.light_direction, dtype=np.float64)
        norm = np.linalg.norm(d)
        if norm == 0.0:
            raise ValueError("Light direction must be non-zero")
        d = d / norm
        return (float(d[0]), float(d[1]), float(d[2]))


_light_direction = ti.Vector.field(3, dtype=ti.f32, shape=())
_background_color = ti.Vector.field(4, dtype=ti.f32, shape=())


def setup_shading(config: ShadingConfig | None = None) -> None:
    """Upload shading configuration to the Taichi fields.

    Args:
        config: Shading parameters. Defaults to ShadingConfig().

    Raises:
        ValueError: If the light direction is the zero vector.
    """
    if config is None:
        config = ShadingConfig()
    light_direction = config.normalized_light_direction()
    _light_direction[None] = list(light_direction)
    _background_color[None] = list(config.background_color)
    logger.debug(
        "Shading: light_direction=%s background=%s", light_direction, config.background_color
    )


def get_shading_info() -> dict[str, tuple[float, ...]]:
    """Get the uploaded shading state."""
    light = _light_direction[None]
    bg = _background_color[None]
    return {
        "light_direction": tuple(float(light[i]) for i in range(3)),
        "background_color": tuple(float(bg[i]) for i in range(4)),
    }


@ti.func
def surface_normal(ray: Ray, sphere: Sphere, t: ti.f32) -> vec3:
    """Unit surface normal at distance t along the ray.

    The hit point is measured from the sphere center, so its direction is
    the outward normal; normalizing removes the radius.
    """
    return tm.normalize(ray_at(ray, t) - sphere.position)


@ti.func
def lambert_intensity(normal: vec3, light_direction: vec3) -> ti.f32:
    """Cosine of the angle between the normal and the light, floored at 0."""
    return ti.max(0.0, tm.dot(normal, -light_direction))


@ti.func
def shade(ray: Ray, rec: SceneHitRecord) -> vec4:
    """Compute the RGBA color for a ray and its scene hit record.

    Args:
        ray: The primary ray.
        rec: The nearest-hit record from intersect_scene().

    Returns:
        The background color on a miss, otherwise (albedo * intensity, 1).
    """
    color = _background_color[None]
    if rec.hit == 1:
        sphere = get_sphere(rec.sphere_index)
        normal = surface_normal(ray, sphere, rec.t)
        intensity = lambert_intensity(normal, _light_direction[None])
        lit = sphere.albedo * intensity
        color = vec4(lit[0], lit[1], lit[2], 1.0)
    return color


@ti.kernel
def _shade_ray_kernel(ray_origin: vec3, ray_direction: vec3) -> vec4:
    ray = Ray(origin=ray_origin, direction=ray_direction)
    rec = intersect_scene(ray.origin, ray.direction)
    return shade(ray, rec)


def shade_ray(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
) -> tuple[float, float, float, float]:
    """Intersect and shade a single ray against the uploaded scene.

    Python-callable for tests and tooling.

    Returns:
        The shaded (R, G, B, A) color as floats.
    """
    color = _shade_ray_kernel(vec3(*origin), vec3(*direction))
    return (float(color[0]), float(color[1]), float(color[2]), float(color[3]))
