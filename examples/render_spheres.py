#!/usr/bin/env python3
"""Render the default sphere scene to a PNG file.

Headless counterpart of the interactive viewer: renders one frame with
the same ray caster and writes it with Pillow.

Usage:
    python -m examples.render_spheres [options]

Options:
    --width WIDTH       Image width in pixels (default: 800)
    --height HEIGHT     Image height in pixels (default: 800)
    --output OUTPUT     Output file path (default: spheres.png)
    --eye X Y Z         Camera position (default: 0 0 2)
    --light X Y Z       Light direction (default: -1 -1 -1)
    --preview           Show the result in a Matplotlib window
    --quiet             Suppress progress output

Example:
    python -m examples.render_spheres --width 256 --height 256 --eye 0 0 3
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

# Ensure the source tree is importable for direct execution
_src_root = Path(__file__).parent.parent / "src"
if str(_src_root) not in sys.path:
    sys.path.insert(0, str(_src_root))

import taichi as ti  # noqa: E402


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the default sphere scene to a PNG file.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=800,
        help="Image width in pixels (default: 800)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=800,
        help="Image height in pixels (default: 800)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="spheres.png",
        help="Output file path (default: spheres.png)",
    )
    parser.add_argument(
        "--eye",
        type=float,
        nargs=3,
        default=(0.0, 0.0, 2.0),
        metavar=("X", "Y", "Z"),
        help="Camera position (default: 0 0 2)",
    )
    parser.add_argument(
        "--light",
        type=float,
        nargs=3,
        default=(-1.0, -1.0, -1.0),
        metavar=("X", "Y", "Z"),
        help="Light direction (default: -1 -1 -1)",
    )
    parser.add_argument(
        "--preview",
        action="store_true",
        help="Show the rendered frame in a Matplotlib window",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    return parser.parse_args()


def render_spheres(
    width: int,
    height: int,
    output_path: str,
    eye: tuple[float, float, float],
    light: tuple[float, float, float],
    preview: bool = False,
    quiet: bool = False,
) -> Path:
    """Render the default scene and save it.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        output_path: Path for the output PNG.
        eye: Camera position.
        light: Light direction.
        preview: Whether to show the frame with Matplotlib.
        quiet: Suppress progress output.

    Returns:
        Path to the saved image.
    """
    from raycast_viewer.camera.camera import Camera, View
    from raycast_viewer.core.renderer import FrameRenderer
    from raycast_viewer.core.shading import ShadingConfig
    from raycast_viewer.preview.display import show_preview
    from raycast_viewer.preview.export import save_png
    from raycast_viewer.scene.scene import create_default_scene

    scene = create_default_scene()
    camera = Camera(view=View(position=tuple(eye)))
    camera.set_aspect_ratio(width, height)
    shading = ShadingConfig(light_direction=tuple(light))

    # PNG rows run top to bottom
    renderer = FrameRenderer(width, height, flip_y=True)

    if not quiet:
        print(f"Rendering {len(scene)} spheres at {width}x{height}...")

    start_time = time.time()
    renderer.render(scene, camera, shading)
    render_time = time.time() - start_time

    output_file = Path(output_path)
    save_png(renderer, str(output_file))

    if not quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Render time: {render_time:.2f}s")

    if preview:
        show_preview(renderer)

    return output_file


def main() -> int:
    """Main entry point."""
    args = parse_args()
    logging.basicConfig(
        level=logging.WARNING if args.quiet else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    ti.init(arch=ti.cpu)

    try:
        render_spheres(
            width=args.width,
            height=args.height,
            output_path=args.output,
            eye=tuple(args.eye),
            light=tuple(args.light),
            preview=args.preview,
            quiet=args.quiet,
        )
        return 0
    except (ValueError, RuntimeError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
