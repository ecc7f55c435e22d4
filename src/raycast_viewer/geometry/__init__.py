"""Geometry module for shape primitives.

Components:
    sphere: Sphere primitive with closed-form ray-sphere intersection

Intersection routines are Taichi functions (@ti.func) called from the
frame renderer's kernel.
"""

from .sphere import Sphere, SphereHit, hit_sphere, make_sphere, sphere_coefficients

__all__ = [
    "Sphere",
    "SphereHit",
    "hit_sphere",
    "make_sphere",
    "sphere_coefficients",
]
