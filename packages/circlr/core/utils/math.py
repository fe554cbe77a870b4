"""Math utilities for angle handling."""

from __future__ import annotations

import math
from typing import TypeVar

import numpy as np

Number = TypeVar("Number", int, float, np.number)


def clamp(value: Number, min_val: Number, max_val: Number) -> Number:
    """Clamp value to range [min_val, max_val].

    Args:
        value: Value to clamp
        min_val: Minimum allowed value
        max_val: Maximum allowed value

    Returns:
        Clamped value
    """
    return max(min_val, min(max_val, value))


def normalize_deg(deg: float) -> float:
    """Normalize an angle in degrees to (-180, 180].

    Examples:
        >>> normalize_deg(270.0)
        -90.0
        >>> normalize_deg(-180.0)
        180.0
    """
    wrapped = math.fmod(deg, 360.0)
    if wrapped > 180.0:
        wrapped -= 360.0
    elif wrapped <= -180.0:
        wrapped += 360.0
    # fmod keeps the sign of zero
    return wrapped + 0.0


def round_half_up(value: float) -> int:
    """Round to the nearest integer, ties toward positive infinity.

    Host rotations are snapped this way rather than with banker's rounding.

    Examples:
        >>> round_half_up(2.5)
        3
        >>> round_half_up(-2.5)
        -2
    """
    return int(math.floor(value + 0.5))


def angular_distance_deg(a: float, b: float) -> float:
    """Smallest absolute difference between two angles in degrees."""
    return abs(normalize_deg(a - b))
