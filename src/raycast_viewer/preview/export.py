"""Image export utilities for rendered frames.

Supported formats:
    - PNG (8-bit RGBA via Pillow)

Example:
    >>> from raycast_viewer.preview.export import save_png
    >>> from raycast_viewer.core.renderer import FrameRenderer
    >>>
    >>> renderer = FrameRenderer(512, 512, flip_y=True)
    >>> renderer.render(scene, camera)
    >>> save_png(renderer, "output.png")
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

if TYPE_CHECKING:
    from raycast_viewer.core.renderer import FrameRenderer

logger = logging.getLogger(__name__)


def image_to_uint8(image: npt.NDArray[np.floating]) -> npt.NDArray[np.uint8]:
    """Convert a float image to 8-bit channels.

    Uses the same rule as the renderer: floor(component * 255), saturating
    at 0 and 255. No rounding and no gamma.

    Args:
        image: Float array of shape (H, W, C), nominally in [0, 1].

    Returns:
        uint8 array of the same shape.
    """
    scaled = np.clip(np.asarray(image, dtype=np.float32) * 255.0, 0.0, 255.0)
    return scaled.astype(np.uint8)


def save_png_from_array(image: npt.NDArray, filepath: str) -> None:
    """Save an RGB or RGBA array as a PNG file.

    Args:
        image: Array of shape (H, W, 3) or (H, W, 4). uint8 data is
            written as-is; float data is converted with image_to_uint8().
        filepath: Output file path (should end in .png).

    Raises:
        ValueError: If the array does not have 3 or 4 channels.
    """
    if image.ndim != 3 or image.shape[2] not in (3, 4):
        raise ValueError(f"Expected an (H, W, 3) or (H, W, 4) image, got shape {image.shape}")

    if image.dtype != np.uint8:
        image = image_to_uint8(image)

    mode = "RGBA" if image.shape[2] == 4 else "RGB"
    pil_image = PILImage.fromarray(np.ascontiguousarray(image))
    pil_image.save(filepath)
    logger.info("Saved %dx%d %s image to %s", image.shape[1], image.shape[0], mode, filepath)


def save_png(renderer: FrameRenderer, filepath: str) -> None:
    """Save the renderer's current frame as an RGBA PNG.

    Rows are written in buffer order, so render with flip_y=True to get an
    upright file.

    Args:
        renderer: A FrameRenderer that has rendered at least one frame.
        filepath: Output file path (should end in .png).
    """
    save_png_from_array(renderer.get_pixels(), filepath)
