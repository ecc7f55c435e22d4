"""Host-side scene model.

The Scene is an ordered, mutable list of spheres owned by the host
application. External logic may edit it between frames; a render pass
never reads it directly. Instead the renderer takes an immutable
snapshot and uploads that to the Taichi fields in
``raycast_viewer.scene.intersection``.

Order matters only for tie-breaking: when two spheres report exactly the
same hit distance, the one listed first wins.

Example:
    >>> from raycast_viewer.scene.scene import Scene
    >>> scene = Scene()
    >>> scene.add_sphere((0.0, 0.0, 0.0), 0.5, albedo=(1.0, 0.0, 1.0))
    0
    >>> len(scene.snapshot())
    1
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

Vec3Tuple = tuple[float, float, float]

DEFAULT_RADIUS = 0.5
DEFAULT_ALBEDO: Vec3Tuple = (1.0, 1.0, 1.0)


@dataclass(frozen=True)
class SphereInfo:
    """A sphere as placed in a scene.

    Attributes:
        position: Center of the sphere in world space.
        radius: Sphere radius. Not validated: zero or negative radii are
            degenerate but still well-defined for the intersection math.
        albedo: Base color (RGB). Not clamped.
    """

    position: Vec3Tuple = (0.0, 0.0, 0.0)
    radius: float = DEFAULT_RADIUS
    albedo: Vec3Tuple = DEFAULT_ALBEDO


@dataclass
class Scene:
    """Ordered collection of spheres.

    Attributes:
        spheres: The spheres in iteration order. An empty scene is valid
            and makes every ray miss.
    """

    spheres: list[SphereInfo] = field(default_factory=list)

    def add_sphere(
        self,
        position: Vec3Tuple,
        radius: float = DEFAULT_RADIUS,
        albedo: Vec3Tuple = DEFAULT_ALBEDO,
    ) -> int:
        """Append a sphere to the scene.

        Args:
            position: Center of the sphere.
            radius: Sphere radius (default 0.5).
            albedo: Base color (default white).

        Returns:
            The index of the added sphere.
        """
        sphere = SphereInfo(
            position=_as_vec3(position),
            radius=float(radius),
            albedo=_as_vec3(albedo),
        )
        self.spheres.append(sphere)
        return len(self.spheres) - 1

    def remove_sphere(self, index: int) -> SphereInfo:
        """Remove and return the sphere at ``index``.

        Raises:
            IndexError: If the index is out of range.
        """
        return self.spheres.pop(index)

    def clear(self) -> None:
        """Remove every sphere from the scene."""
        self.spheres.clear()

    def snapshot(self) -> tuple[SphereInfo, ...]:
        """Freeze the current contents for a render pass.

        SphereInfo is immutable, so the returned tuple is unaffected by
        later edits to this scene.
        """
        return tuple(self.spheres)

    def __len__(self) -> int:
        return len(self.spheres)

    def __iter__(self) -> Iterator[SphereInfo]:
        return iter(self.spheres)


def _as_vec3(value: Vec3Tuple) -> Vec3Tuple:
    x, y, z = value
    return (float(x), float(y), float(z))


def create_default_scene() -> Scene:
    """Create the viewer's startup scene.

    A magenta sphere of radius 0.5 at the origin and a larger blue sphere
    behind it and to the right.

    Returns:
        A new Scene with two spheres.
    """
    scene = Scene()
    scene.add_sphere((0.0, 0.0, 0.0), 0.5, albedo=(1.0, 0.0, 1.0))
    scene.add_sphere((1.0, 0.0, -5.0), 1.5, albedo=(0.2, 0.3, 1.0))
    logger.debug("Created default scene with %d spheres", len(scene))
    return scene
