"""Core rendering module.

Components:
    ray: Ray data structure
    shading: Lambertian shading with a directional light
    renderer: Full-frame renderer producing an RGBA8 pixel buffer

Note: shading and renderer are NOT imported here because they allocate
Taichi fields at import time. Import them directly after ti.init():
    from raycast_viewer.core.renderer import FrameRenderer
"""

from .ray import Ray, make_ray, ray_at, vec2, vec3, vec4

__all__ = [
    "Ray",
    "make_ray",
    "ray_at",
    "vec2",
    "vec3",
    "vec4",
]
