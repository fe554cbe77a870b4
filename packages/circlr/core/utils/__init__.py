"""Shared utilities for circlr."""

from circlr.core.utils.json import dumps_json, read_json, write_json
from circlr.core.utils.math import angular_distance_deg, clamp, normalize_deg, round_half_up

__all__ = [
    "angular_distance_deg",
    "clamp",
    "dumps_json",
    "normalize_deg",
    "read_json",
    "round_half_up",
    "write_json",
]
