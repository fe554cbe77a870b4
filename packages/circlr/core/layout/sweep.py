"""Sweep angle helpers.

Because the first and last instance bound the sweep, a sweep of 360 puts
the last instance on top of the anchor. The largest useful sweep for
``count`` instances is therefore ``360 - 360 / count``, which spaces them
evenly around the full circle.
"""

from __future__ import annotations

from circlr.core.layout.models import BoundingBox
from circlr.core.utils.math import clamp

# Smallest sweep the handle can produce; the engine rejects 0
MIN_SWEEP_DEG = 1.0

# Angles the sweep handle snaps to when dragged close enough
SNAP_ANGLES: tuple[float, ...] = (90.0, 180.0, 270.0)


def full_circle_sweep(count: int) -> float:
    """Sweep that spreads ``count`` instances evenly around the whole circle."""
    if count < 1:
        raise ValueError(f"count must be positive, got {count}")
    return 360.0 - 360.0 / count


def sweep_percentage(sweep_angle_deg: float, count: int) -> float:
    """Sweep expressed as a percentage of the full-circle sweep."""
    full = full_circle_sweep(count)
    if full == 0:
        return 0.0
    return sweep_angle_deg / full * 100.0


def rescale_sweep(sweep_angle_deg: float, old_count: int, new_count: int) -> float:
    """Keep the sweep percentage when the instance count changes.

    Example:
        >>> rescale_sweep(270.0, 4, 8)
        315.0
    """
    percentage = sweep_percentage(sweep_angle_deg, old_count)
    return full_circle_sweep(new_count) * percentage / 100.0


def snap_sweep(
    angle_deg: float,
    count: int,
    step: float | None = None,
    threshold: float = 5.0,
) -> float:
    """Snap a dragged sweep angle.

    With ``step`` (shift held) the angle is rounded to multiples of the step.
    Otherwise it sticks to the full-circle sweep and the quarter angles when
    within ``threshold`` degrees, and is rounded to whole degrees.

    The result stays within [MIN_SWEEP_DEG, full-circle sweep].
    """
    full = full_circle_sweep(count)
    angle = clamp(angle_deg % 360.0, MIN_SWEEP_DEG, full)

    if step:
        return float(clamp(round(angle / step) * step, MIN_SWEEP_DEG, full))

    if full - threshold < angle < full:
        return full
    for target in SNAP_ANGLES:
        if target <= full and abs(angle - target) < threshold:
            return target
    return float(clamp(round(angle), MIN_SWEEP_DEG, full))


def adaptive_radius(box: BoundingBox) -> float:
    """Default radius derived from the selection size, rounded to 0.1.

    Keeps large selections from piling up on a small default radius.
    """
    return round((box.width + box.height) / 4, 1)
