"""Shared pytest fixtures for circlr tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from circlr.core.layout.models import BoundingBox, LayoutParameters, Pose
from circlr.core.scene.memory import InMemoryScene

# ============================================================================
# Path Fixtures
# ============================================================================


@pytest.fixture
def project_root() -> Path:
    """Get project root directory."""
    return Path(__file__).parent.parent


# ============================================================================
# Geometry Fixtures
# ============================================================================


@pytest.fixture
def square_box() -> BoundingBox:
    """100x100 element."""
    return BoundingBox(width=100, height=100)


@pytest.fixture
def oblong_box() -> BoundingBox:
    """200x50 element (wider than high)."""
    return BoundingBox(width=200, height=50)


@pytest.fixture
def origin_pose() -> Pose:
    """Unrotated element at the origin."""
    return Pose(x=0, y=0, rotation_deg=0)


@pytest.fixture
def quarter_params() -> LayoutParameters:
    """Four instances spread over the full circle (90 degrees apart)."""
    return LayoutParameters(count=4, radius=50, sweep_angle_deg=270)


# ============================================================================
# Scene Fixtures
# ============================================================================


@pytest.fixture
def scene() -> InMemoryScene:
    """Empty in-memory scene."""
    return InMemoryScene()


@pytest.fixture
def rectangle(scene: InMemoryScene):
    """Unrotated 100x100 rectangle at (10, 20) on the page."""
    return scene.add_node("RECTANGLE", name="Rect", width=100, height=100, x=10, y=20)
