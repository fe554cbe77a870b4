"""Radial layout engine - affine placement of instances around a circle.

The engine is a set of pure functions: the same (box, pose, params) always
yields bit-identical placements, nothing is cached and no state survives a
call. Instance 0 (the anchor) always lands exactly on the original element,
so the scene collaborator can swap the freshly created instance 0 for the
original node.

Angles: instance angles run clockwise on screen starting at 12 o'clock
(``BASE_DEG = -90``, since the host's zero points to 3 o'clock). The host
reports rotations in the opposite direction, hence the negated ``init_deg``.
"""

from __future__ import annotations

import logging
import math

from circlr.core.layout.errors import InvalidParameterError
from circlr.core.layout.models import (
    Affine,
    BoundingBox,
    InstancePlacement,
    LayoutParameters,
    Pose,
)
from circlr.core.layout.skip import resolve_skipped
from circlr.core.utils.math import round_half_up

logger = logging.getLogger(__name__)

BASE_DEG: float = -90.0


def validate_parameters(params: LayoutParameters) -> None:
    """Check engine preconditions.

    Raises:
        InvalidParameterError: naming the first offending field.
    """
    if params.count < 2:
        raise InvalidParameterError("count", params.count, "at least 2 instances are required")
    if not math.isfinite(params.radius) or params.radius < 0:
        raise InvalidParameterError("radius", params.radius, "must be a finite value >= 0")
    if not math.isfinite(params.sweep_angle_deg) or not 0 < params.sweep_angle_deg <= 360:
        raise InvalidParameterError(
            "sweep_angle_deg", params.sweep_angle_deg, "must lie in (0, 360]"
        )


def angular_step_deg(count: int, sweep_angle_deg: float) -> float:
    """Angle between consecutive instances.

    The sweep is anchored at both ends: the first instance sits at 0 and the
    last one at exactly ``sweep_angle_deg``, hence ``count - 1`` gaps.
    """
    return sweep_angle_deg / (count - 1)


def instance_angle_deg(index: int, count: int, sweep_angle_deg: float) -> float:
    """Absolute angle of instance ``index`` in degrees (``deg(i)``)."""
    return BASE_DEG + angular_step_deg(count, sweep_angle_deg) * index


def initial_rotation_deg(pose_rotation_deg: float) -> float:
    """Original rotation in the engine's convention (rounded and negated)."""
    return float(-round_half_up(pose_rotation_deg))


def shape_correction(box: BoundingBox, deg: float) -> float:
    """Horizontal offset that keeps oblong items on a round circle.

    Zero for square boxes. Depends on the instance angle only.
    """
    half_w = box.half_width
    half_h = box.half_height
    diff = abs(half_w - half_h)
    correction = diff * math.cos(math.radians(abs(deg)))
    return -correction if half_w >= half_h else correction


def radius_correction(box: BoundingBox, pose_rotation_deg: float) -> float:
    """Radius compensation for a pre-rotated oblong item.

    Zero for square boxes and for unrotated items.
    """
    half_w = box.half_width
    half_h = box.half_height
    if half_w == half_h:
        return 0.0
    init_rad = math.radians(initial_rotation_deg(pose_rotation_deg))
    correction = abs(half_w - half_h) * math.sin(abs(init_rad))
    return -correction if half_w > half_h else correction


def circle_transform(
    box: BoundingBox,
    params: LayoutParameters,
    index: int,
    pose_rotation_deg: float = 0.0,
) -> Affine:
    """Placement-on-circle transform ``P(i)``.

    Places instance ``index`` on the circle around a local origin at
    ``(radius + w/2, radius + h/2)``, so the circle plus the box fits in the
    positive quadrant.
    """
    half_w = box.half_width
    half_h = box.half_height
    r = params.radius

    deg = instance_angle_deg(index, params.count, params.sweep_angle_deg)
    rad = math.radians(deg)
    sc = shape_correction(box, deg)
    rc = radius_correction(box, pose_rotation_deg)

    tx = (r + half_w - rc) * math.cos(rad) + half_w * math.sin(rad) + (r + half_w) + sc
    ty = (r + half_h - rc) * math.sin(rad) - half_h * math.cos(rad) + (r + half_h)
    return Affine.rotation(rad, tx, ty)


def _rotation_shift(box: BoundingBox, init_rad: float) -> tuple[float, float]:
    """Offset caused by rotating the element about its top-left corner."""
    half_w = box.half_width
    half_h = box.half_height
    sin = math.sin(init_rad)
    cos = math.cos(init_rad)
    shift_x = half_w * (1 - sin) - half_w * (1 - cos)
    shift_y = half_h * (1 - sin) - half_h * (1 - cos) + half_h * sin
    return shift_x, shift_y


def _raw_placement(
    box: BoundingBox,
    pose: Pose,
    params: LayoutParameters,
    index: int,
) -> Affine:
    half_w = box.half_width
    half_h = box.half_height
    init_deg = initial_rotation_deg(pose.rotation_deg)
    init_rad = math.radians(init_deg)

    deg = instance_angle_deg(index, params.count, params.sweep_angle_deg)
    rad = math.radians(deg)
    on_circle = circle_transform(box, params, index, pose.rotation_deg)

    # Shift the circle so the original element becomes its origin
    shift_x, shift_y = _rotation_shift(box, init_rad)
    pos_x = on_circle.tx + pose.x + shift_x
    pos_y = on_circle.ty + pose.y + shift_y

    # Evaluated in degrees so that BASE_DEG cancels exactly for the anchor
    effective_deg = deg + init_deg - BASE_DEG if params.align_radially else init_deg
    eff = math.radians(effective_deg)

    # Rotate about the visual center; the host pivots at the top-left corner
    pivot_x = half_w - half_w * math.cos(eff) + half_h * math.sin(eff) - half_w * math.sin(rad)
    pivot_y = half_h - half_w * math.sin(eff) - half_h * math.cos(eff) + half_h * math.cos(rad)

    return Affine.rotation(eff, pivot_x + pos_x, pivot_y + pos_y)


def compute_placements(
    box: BoundingBox,
    pose: Pose,
    params: LayoutParameters,
) -> list[InstancePlacement]:
    """Compute the placement of every instance, anchor first.

    Args:
        box: Dimensions of the replicated element.
        pose: Position and rotation of the original element.
        params: Layout parameters.

    Returns:
        ``params.count`` placements ordered by index. Skip policies are not
        applied here; see ``visible_placements``.

    Raises:
        InvalidParameterError: if a precondition fails. Nothing is computed
            in that case.

    Example:
        >>> box = BoundingBox(width=100, height=100)
        >>> params = LayoutParameters(count=4, radius=50, sweep_angle_deg=270)
        >>> placements = compute_placements(box, Pose(x=10, y=20), params)
        >>> placements[0].x, placements[0].y
        (10.0, 20.0)
    """
    validate_parameters(params)

    raw = [_raw_placement(box, pose, params, i) for i in range(params.count)]

    # Re-base the whole circle on the anchor: instance 0 sits exactly at the
    # original position, the others keep their offsets relative to it.
    anchor = raw[0]
    placements = [
        InstancePlacement(
            index=i,
            affine=affine.model_copy(
                update={
                    "tx": (affine.tx - anchor.tx) + pose.x,
                    "ty": (affine.ty - anchor.ty) + pose.y,
                }
            ),
        )
        for i, affine in enumerate(raw)
    ]

    logger.debug(
        "Computed %d placements (radius=%s, sweep=%s, align=%s)",
        len(placements),
        params.radius,
        params.sweep_angle_deg,
        params.align_radially,
    )
    return placements


def visible_placements(
    box: BoundingBox,
    pose: Pose,
    params: LayoutParameters,
) -> list[InstancePlacement]:
    """Placements that survive the skip policy."""
    skipped = resolve_skipped(params)
    return [p for p in compute_placements(box, pose, params) if p.number not in skipped]


def circle_reach(box: BoundingBox, pose: Pose, params: LayoutParameters) -> float:
    """Distance from the circle center to each instance's visual center.

    The shape correction folds the wider half-extent back onto the narrower
    axis, so the reach is measured with the box height.
    """
    return params.radius + box.half_height - radius_correction(box, pose.rotation_deg)


def circle_center(box: BoundingBox, pose: Pose, params: LayoutParameters) -> tuple[float, float]:
    """Center of the circle the instance centers lie on, in scene coordinates.

    Every instance's visual center is ``circle_reach`` away from this point,
    whatever the aspect ratio or the alignment mode.
    """
    validate_parameters(params)
    anchor_center = compute_placements(box, pose, params)[0].center(box)
    rad0 = math.radians(BASE_DEG)
    reach = circle_reach(box, pose, params)
    return (
        anchor_center[0] - reach * math.cos(rad0),
        anchor_center[1] - reach * math.sin(rad0),
    )
