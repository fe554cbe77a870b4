"""Layout settings persisted on scene nodes.

A generated pattern records its parameters on the origin node (and on the
originally selected node) so a later selection can be recognized and
regenerated with the same settings. Values are stored as strings under the
``radial_items`` namespace.
"""

from __future__ import annotations

import logging

from circlr.core.layout.models import (
    EveryNthSkip,
    LayoutParameters,
    NoSkip,
    SkipPolicy,
    SpecificSkip,
)
from circlr.core.scene.protocols import NodeHandle, SceneOps

logger = logging.getLogger(__name__)

NAMESPACE = "radial_items"

KEY_PARENT_GROUP = "parentGroup"
KEY_NUM_ITEMS = "numItems"
KEY_RADIUS = "radius"
KEY_SKIP_SELECT = "skipSelect"
KEY_SKIP_EVERY = "skipEvery"
KEY_SKIP_SPECIFIC = "skipSpecific"
KEY_ROTATE_ITEMS = "rotateItems"
KEY_SWEEP_ANGLE = "sweepAngle"


def _format_number(value: float) -> str:
    return repr(float(value))


def encode_skip_policy(policy: SkipPolicy) -> tuple[str, str, str]:
    """Return ``(skipSelect, skipEvery, skipSpecific)`` strings for a policy."""
    if isinstance(policy, SpecificSkip):
        return ("specific", "", ",".join(str(i) for i in sorted(policy.indices)))
    if isinstance(policy, EveryNthSkip):
        return ("every", str(policy.n), "")
    return ("none", "", "")


def decode_skip_policy(select: str, every: str, specific: str) -> SkipPolicy:
    """Inverse of ``encode_skip_policy``.

    Raises:
        ValueError: if a number cannot be parsed.
    """
    if select == "specific":
        indices = frozenset(int(part) for part in specific.split(",") if part.strip())
        return SpecificSkip(indices=indices)
    if select == "every" and every:
        return EveryNthSkip(n=int(every))
    return NoSkip()


def read_parent_group(ops: SceneOps, node: NodeHandle) -> str:
    """Id of the pattern group recorded on ``node``, empty when none."""
    return ops.get_shared_data(node, NAMESPACE, KEY_PARENT_GROUP)


def store_layout_settings(
    ops: SceneOps,
    node: NodeHandle,
    group_id: str,
    params: LayoutParameters,
) -> None:
    """Record the generating group and parameters on ``node``."""
    select, every, specific = encode_skip_policy(params.skip_policy)
    values = {
        KEY_PARENT_GROUP: group_id,
        KEY_NUM_ITEMS: str(params.count),
        KEY_RADIUS: _format_number(params.radius),
        KEY_SKIP_SELECT: select,
        KEY_SKIP_EVERY: every,
        KEY_SKIP_SPECIFIC: specific,
        KEY_ROTATE_ITEMS: "1" if params.align_radially else "0",
        KEY_SWEEP_ANGLE: _format_number(params.sweep_angle_deg),
    }
    for key, value in values.items():
        ops.set_shared_data(node, NAMESPACE, key, value)


def load_layout_settings(ops: SceneOps, node: NodeHandle) -> LayoutParameters | None:
    """Read parameters stored by ``store_layout_settings``.

    Returns None when nothing was stored or the stored values are unreadable;
    a corrupt entry is treated like a missing one.
    """

    def read(key: str) -> str:
        return ops.get_shared_data(node, NAMESPACE, key)

    count = read(KEY_NUM_ITEMS)
    if not count:
        return None

    try:
        sweep = read(KEY_SWEEP_ANGLE)
        return LayoutParameters(
            count=int(count),
            radius=float(read(KEY_RADIUS) or 0),
            sweep_angle_deg=float(sweep) if sweep else None,
            align_radially=read(KEY_ROTATE_ITEMS) != "0",
            skip_policy=decode_skip_policy(
                read(KEY_SKIP_SELECT), read(KEY_SKIP_EVERY), read(KEY_SKIP_SPECIFIC)
            ),
        )
    except ValueError as e:
        logger.warning(f"Ignoring unreadable layout settings on {node.id}: {e}")
        return None
