"""Interactive sphere ray caster built on Taichi.

This package renders a small scene of spheres by casting one ray per
pixel from a virtual camera, intersecting it with every sphere in closed
form, shading the nearest hit with a single directional light, and
displaying the resulting RGBA8 image in a Taichi GGUI window.

Subpackages:
    core: Ray type, Lambertian shading and the full-frame renderer
    geometry: Sphere primitive and ray-sphere intersection
    scene: Host-side scene model and nearest-hit scene queries
    camera: Camera model, per-pixel ray generation and keyboard control
    preview: Interactive viewer, PNG export and static preview

Modules that own Taichi fields (scene.intersection, camera.rays,
core.shading, core.renderer) must be imported after ti.init(). The
subpackages themselves can be imported at any time.
"""

__version__ = "0.1.0"
