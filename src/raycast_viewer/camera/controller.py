"""Keyboard camera controller.

Moves and turns a Camera in response to key presses. Keys are the
lower-case characters and names reported by Taichi GGUI
(``ti.ui.LEFT == "Left"``, ``ti.ui.RIGHT == "Right"``).

Bindings:
    w / s: move forward / backward
    a / d: move left / right
    q / e: move down / up
    Left / Right: turn left / right about the world up axis
"""

from __future__ import annotations

import logging

import numpy as np

from raycast_viewer.camera.camera import (
    Camera,
    quat_from_axis_angle,
    quat_multiply,
    quat_normalize,
)

logger = logging.getLogger(__name__)

_WORLD_UP = (0.0, 1.0, 0.0)

# key -> (basis axis index, sign); axes are (right, up, forward)
_MOVE_KEYS = {
    "w": (2, 1.0),
    "s": (2, -1.0),
    "d": (0, 1.0),
    "a": (0, -1.0),
    "e": (1, 1.0),
    "q": (1, -1.0),
}

_TURN_KEYS = {
    "Left": 1.0,
    "Right": -1.0,
}


class CameraController:
    """Translate key presses into camera movement.

    Attributes:
        speed: Distance moved per key press at dt == 1.
        turn_speed: Radians turned per key press at dt == 1.
    """

    def __init__(self, speed: float = 0.2, turn_speed: float = 0.05) -> None:
        self.speed = speed
        self.turn_speed = turn_speed

    def process_key(self, camera: Camera, key: str, dt: float = 1.0) -> bool:
        """Apply one key press to the camera.

        Args:
            camera: The camera to mutate.
            key: Key name as reported by the window.
            dt: Time scale for the step.

        Returns:
            True if the key is bound and the camera changed.
        """
        normalized = key.lower() if len(key) == 1 else key

        if normalized in _MOVE_KEYS:
            axis, sign = _MOVE_KEYS[normalized]
            direction = np.asarray(camera.basis()[axis])
            offset = direction * (sign * self.speed * dt)
            x, y, z = camera.view.position
            camera.view.position = (
                float(x + offset[0]),
                float(y + offset[1]),
                float(z + offset[2]),
            )
            logger.info("key press %s", normalized.upper())
            return True

        if normalized in _TURN_KEYS:
            turn = quat_from_axis_angle(_WORLD_UP, _TURN_KEYS[normalized] * self.turn_speed * dt)
            camera.view.rotation = quat_normalize(quat_multiply(turn, camera.view.rotation))
            logger.info("key press %s", normalized)
            return True

        return False
