"""Scene module for scene management and ray-scene queries.

Components:
    scene: Host-side ordered sphere collection with snapshots
    intersection: Taichi sphere storage and nearest-hit selection

The intersection module allocates Taichi fields at import time and is
not imported here. Import it directly after ti.init():
    from raycast_viewer.scene.intersection import intersect_scene, upload_scene
"""

from .scene import Scene, SphereInfo, create_default_scene

__all__ = [
    "Scene",
    "SphereInfo",
    "create_default_scene",
]
