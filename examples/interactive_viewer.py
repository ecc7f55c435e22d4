#!/usr/bin/env python3
"""Interactive sphere viewer.

Opens a window showing the default two-sphere scene, ray cast on the CPU
every frame and displayed as a screen-filling image.

Usage:
    python -m examples.interactive_viewer [--width 800] [--height 800] [--gpu]

Controls:
    - W/S: move forward/backward
    - A/D: move left/right
    - Q/E: move down/up
    - Left/Right arrows: turn
    - Escape or close the window to exit
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

# Ensure the source tree is importable for direct execution
_src_root = Path(__file__).parent.parent / "src"
if str(_src_root) not in sys.path:
    sys.path.insert(0, str(_src_root))

import taichi as ti  # noqa: E402


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Interactive sphere ray-casting viewer.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--width", type=int, default=800, help="Image width (default: 800)")
    parser.add_argument("--height", type=int, default=800, help="Image height (default: 800)")
    parser.add_argument(
        "--gpu",
        action="store_true",
        help="Run the ray caster on the GPU backend instead of the CPU",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args()


def main() -> int:
    """Main entry point for the interactive viewer.

    Returns:
        Exit code (0 for success, non-zero for error).
    """
    args = parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Initialize Taichi first (before importing modules that allocate fields)
    ti.init(arch=ti.gpu if args.gpu else ti.cpu)

    from raycast_viewer.preview.interactive import InteractiveViewer, ViewerConfig

    if not InteractiveViewer.is_display_available():
        print("Error: No display available. Cannot open the viewer window.")
        print("Use examples/render_spheres.py for headless rendering.")
        return 1

    print(f"Creating viewer window ({args.width}x{args.height})...")
    viewer = InteractiveViewer(ViewerConfig(width=args.width, height=args.height))

    print("  - W/A/S/D/Q/E to move, arrow keys to turn")
    print("  - Escape or close the window to exit")
    print()

    try:
        viewer.run()
    except KeyboardInterrupt:
        print("\nInterrupted by user.")
    finally:
        viewer.close()

    return 0


if __name__ == "__main__":
    sys.exit(main())
