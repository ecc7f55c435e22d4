"""Import tests for the package and its Taichi modules.

Tests cover:
- Every module imports and defines its Taichi records and kernels
- Kernel-free packages import before ti.init() in a fresh interpreter
"""

import importlib
import os
import subprocess
import sys
import textwrap
from pathlib import Path

import pytest

SRC_ROOT = Path(__file__).resolve().parent.parent / "src"

MODULES = [
    "raycast_viewer",
    "raycast_viewer.core",
    "raycast_viewer.core.ray",
    "raycast_viewer.core.shading",
    "raycast_viewer.core.renderer",
    "raycast_viewer.geometry",
    "raycast_viewer.geometry.sphere",
    "raycast_viewer.scene",
    "raycast_viewer.scene.scene",
    "raycast_viewer.scene.intersection",
    "raycast_viewer.camera",
    "raycast_viewer.camera.camera",
    "raycast_viewer.camera.rays",
    "raycast_viewer.camera.controller",
    "raycast_viewer.preview",
    "raycast_viewer.preview.export",
    "raycast_viewer.preview.display",
    "raycast_viewer.preview.interactive",
]


def _run_fresh(code: str) -> subprocess.CompletedProcess:
    """Run code in a new interpreter with the source tree on the path."""
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(SRC_ROOT), env.get("PYTHONPATH")]))
    return subprocess.run(
        [sys.executable, "-c", textwrap.dedent(code)],
        env=env,
        capture_output=True,
        text=True,
        timeout=300,
    )


class TestImports:
    """Tests for module imports."""

    @pytest.mark.parametrize("name", MODULES)
    def test_module_imports(self, name):
        """Test that each module imports after ti.init()."""
        assert importlib.import_module(name) is not None

    def test_records_are_taichi_dataclasses(self):
        """Test that hit records build with concrete Taichi field types."""
        import taichi as ti

        from raycast_viewer.scene.intersection import SceneHitRecord

        hit = ti.field(dtype=ti.i32, shape=())
        index = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            rec = SceneHitRecord(hit=1, t=2.5, sphere_index=3)
            hit[None] = rec.hit
            index[None] = rec.sphere_index

        test_kernel()
        assert hit[None] == 1
        assert index[None] == 3

    def test_preview_imports_before_init(self):
        """Test the preview package imports before ti.init() and renders after."""
        result = _run_fresh(
            """
            from raycast_viewer.preview import InteractiveViewer, save_png
            from raycast_viewer.camera import Camera
            from raycast_viewer.scene import create_default_scene

            import taichi as ti
            ti.init(arch=ti.cpu)

            from raycast_viewer.core.renderer import FrameRenderer

            renderer = FrameRenderer(4, 4)
            renderer.render(create_default_scene(), Camera())
            print(tuple(int(c) for c in renderer.get_pixels()[2, 2]))
            """
        )
        assert result.returncode == 0, result.stderr
        assert "(147, 0, 147, 255)" in result.stdout
