"""Matplotlib-based static preview of a rendered frame.

Example:
    >>> from raycast_viewer.preview.display import show_preview
    >>> renderer = FrameRenderer(512, 512, flip_y=True)
    >>> renderer.render(scene, camera)
    >>> show_preview(renderer)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from raycast_viewer.core.renderer import FrameRenderer


def show_preview(
    renderer: FrameRenderer,
    *,
    title: str | None = None,
    figsize: tuple[float, float] = (8, 8),
    block: bool = True,
) -> None:
    """Display the current frame as a Matplotlib figure.

    The image is drawn with origin="lower" unless the renderer writes
    top-row-first (flip_y), so the view is upright either way.

    Args:
        renderer: The FrameRenderer instance to display.
        title: Custom title (default shows the frame count).
        figsize: Figure size in inches (width, height).
        block: Whether to block execution until figure is closed.
    """
    import matplotlib.pyplot as plt

    pixels = renderer.get_pixels()

    fig, ax = plt.subplots(1, 1, figsize=figsize)

    ax.imshow(pixels, origin="upper" if renderer.flip_y else "lower")
    ax.axis("off")

    if title is None:
        title = f"Frame {renderer.frame_count} ({renderer.width}x{renderer.height})"
    ax.set_title(title)

    plt.tight_layout()
    plt.show(block=block)
