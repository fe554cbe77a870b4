"""Radial layout: placement engine, skip policies and sweep helpers."""

from circlr.core.layout.engine import (
    BASE_DEG,
    angular_step_deg,
    circle_center,
    circle_reach,
    circle_transform,
    compute_placements,
    initial_rotation_deg,
    instance_angle_deg,
    radius_correction,
    shape_correction,
    validate_parameters,
    visible_placements,
)
from circlr.core.layout.errors import (
    ERROR_MESSAGES,
    InvalidParameterError,
    PluginErrorCode,
    SkipPolicyViolation,
    UnsupportedSelectionError,
)
from circlr.core.layout.models import (
    Affine,
    BoundingBox,
    EveryNthSkip,
    InstancePlacement,
    LayoutParameters,
    LayoutPatch,
    NoSkip,
    Pose,
    SkipPolicy,
    SpecificSkip,
)
from circlr.core.layout.skip import (
    ANCHOR_NUMBER,
    MIN_VISIBLE,
    check_skip_policy,
    describe_policy,
    enforce_skip_policy,
    is_skipped,
    resolve_skipped,
    toggle_skip_index,
)
from circlr.core.layout.sweep import (
    adaptive_radius,
    full_circle_sweep,
    rescale_sweep,
    snap_sweep,
    sweep_percentage,
)

__all__ = [
    # Engine
    "BASE_DEG",
    "angular_step_deg",
    "circle_center",
    "circle_reach",
    "circle_transform",
    "compute_placements",
    "initial_rotation_deg",
    "instance_angle_deg",
    "radius_correction",
    "shape_correction",
    "validate_parameters",
    "visible_placements",
    # Errors
    "ERROR_MESSAGES",
    "InvalidParameterError",
    "PluginErrorCode",
    "SkipPolicyViolation",
    "UnsupportedSelectionError",
    # Models
    "Affine",
    "BoundingBox",
    "EveryNthSkip",
    "InstancePlacement",
    "LayoutParameters",
    "LayoutPatch",
    "NoSkip",
    "Pose",
    "SkipPolicy",
    "SpecificSkip",
    # Skip policies
    "ANCHOR_NUMBER",
    "MIN_VISIBLE",
    "check_skip_policy",
    "describe_policy",
    "enforce_skip_policy",
    "is_skipped",
    "resolve_skipped",
    "toggle_skip_index",
    # Sweep
    "adaptive_radius",
    "full_circle_sweep",
    "rescale_sweep",
    "snap_sweep",
    "sweep_percentage",
]
