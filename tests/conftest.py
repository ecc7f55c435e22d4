"""Pytest configuration for raycast_viewer tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Modules that allocate Taichi fields are imported inside tests, after
    this fixture has run.
    """
    ti.init(arch=ti.cpu, random_seed=42)
    yield


@pytest.fixture(autouse=True)
def reset_render_state():
    """Reset scene storage, camera and shading before and after each test.

    This ensures tests are isolated from each other.
    """
    from raycast_viewer.camera.camera import Camera
    from raycast_viewer.camera.rays import setup_camera
    from raycast_viewer.core.shading import setup_shading
    from raycast_viewer.scene.intersection import clear_scene

    def _reset():
        clear_scene()
        setup_camera(Camera())
        setup_shading()

    _reset()

    yield

    _reset()
