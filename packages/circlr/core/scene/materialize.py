"""Turning computed placements into scene nodes.

``materialize_pattern`` is the only place where layout results meet the
scene. It follows the host's plugin flow:

1. Resolve a component template (the selection, its parent component, or a
   freshly componentized selection)
2. Dissolve a pattern generated earlier from the same selection
3. Create one instance per placement and group them
4. Remove skipped instances
5. Swap the anchor instance for the template itself ("Origin")
6. Persist the parameters on the template and the selection
"""

from __future__ import annotations

import logging

from pydantic import BaseModel, ConfigDict

from circlr.core.layout.engine import compute_placements, validate_parameters
from circlr.core.layout.errors import UnsupportedSelectionError
from circlr.core.layout.models import BoundingBox, LayoutParameters, Pose
from circlr.core.layout.skip import enforce_skip_policy, resolve_skipped
from circlr.core.scene.protocols import NodeHandle, SceneOps
from circlr.core.scene.shared_data import (
    KEY_PARENT_GROUP,
    NAMESPACE,
    read_parent_group,
    store_layout_settings,
)
from circlr.core.selection.classifier import (
    COMPONENT_TYPE,
    SUPPORTED_NODE_TYPES,
    can_apply,
    classify_selection,
)
from circlr.core.utils.logging import log_performance

logger = logging.getLogger(__name__)

ORIGIN_NAME = "Origin"
GROUP_NAME = "Radial Pattern"


class PatternRefs(BaseModel):
    """Ids of the nodes making up a generated pattern."""

    model_config = ConfigDict(frozen=True)

    selection_id: str
    template_id: str
    group_id: str


def resolve_template(ops: SceneOps, selection: NodeHandle) -> NodeHandle:
    """Component the instances are created from; may componentize ``selection``."""
    if selection.type == COMPONENT_TYPE:
        return selection
    parent = selection.parent
    if parent is not None and parent.type == COMPONENT_TYPE:
        return parent
    return ops.componentize(selection)


def _dissolve_previous(ops: SceneOps, selection: NodeHandle, template: NodeHandle) -> None:
    group_id = read_parent_group(ops, selection)
    if not group_id:
        return
    previous = ops.get_node(group_id)
    if previous is None or previous.removed:
        return
    if previous.parent is not None:
        ops.append_child(previous.parent, template)
    logger.debug(f"Replacing previously generated pattern {group_id}")
    ops.remove(previous)


@log_performance
def materialize_pattern(
    ops: SceneOps,
    selection: NodeHandle,
    params: LayoutParameters,
    *,
    box: BoundingBox | None = None,
    pose: Pose | None = None,
    supported_types: frozenset[str] | set[str] = SUPPORTED_NODE_TYPES,
) -> PatternRefs:
    """Generate the radial pattern for ``selection``.

    Args:
        ops: Scene collaborator.
        selection: The single selected node.
        params: Layout parameters.
        box: Dimensions override; defaults to the template's size.
        pose: Pose override; defaults to the template's pose.
        supported_types: Node types accepted as a selection.

    Returns:
        Ids of the selection, the template and the new group.

    Raises:
        UnsupportedSelectionError: if the selection cannot be replicated.
        InvalidParameterError: if the parameters are out of range.
        SkipPolicyViolation: if the skip policy hides the anchor or
            everything else.

    Parameters are checked before the scene is touched.
    """
    state = classify_selection([selection], supported_types)
    if not can_apply(state):
        raise UnsupportedSelectionError(state)
    validate_parameters(params)
    enforce_skip_policy(params)

    template = resolve_template(ops, selection)
    _dissolve_previous(ops, selection, template)

    parent = template.parent
    if parent is None:
        raise UnsupportedSelectionError(state)

    box = box or BoundingBox(width=template.width, height=template.height)
    pose = pose or Pose(x=template.x, y=template.y, rotation_deg=template.rotation)
    placements = compute_placements(box, pose, params)

    instances = []
    for placement in placements:
        instance = ops.create_instance(template)
        ops.set_affine(instance, placement.affine)
        instances.append(instance)

    group = ops.group(instances, parent)

    skipped = resolve_skipped(params)
    for placement, instance in zip(placements, instances, strict=True):
        if placement.number in skipped:
            ops.remove(instance)

    # The anchor placement coincides with the template, so the template
    # replaces instance 0 in place. Its rotation is the anchor rotation rounded
    # to whole degrees, matching how the host rounds it
    anchor = instances[0]
    ops.set_affine(template, placements[0].affine)
    ops.remove(anchor)
    ops.insert_child(group, 0, template)

    template.name = ORIGIN_NAME
    group.name = GROUP_NAME

    store_layout_settings(ops, template, group.id, params)
    if template.id != selection.id:
        store_layout_settings(ops, selection, group.id, params)

    logger.info(
        f"Generated {GROUP_NAME!r} with {params.count - len(skipped)} of {params.count} instances"
    )
    return PatternRefs(selection_id=selection.id, template_id=template.id, group_id=group.id)


def dissolve_pattern(ops: SceneOps, refs: PatternRefs) -> NodeHandle | None:
    """Remove a generated group, keeping the template where the anchor was.

    Clears the recorded group id so the selection is no longer treated as
    part of a pattern. Returns the template, or None if it no longer exists.
    """
    template = ops.get_node(refs.template_id)
    group = ops.get_node(refs.group_id)

    if group is not None and not group.removed:
        if template is not None and template.parent is not None and template.parent.id == group.id:
            if group.parent is not None:
                ops.append_child(group.parent, template)
        ops.remove(group)
        logger.debug(f"Dissolved pattern {refs.group_id}")

    for node_id in {refs.template_id, refs.selection_id}:
        node = ops.get_node(node_id)
        if node is not None and not node.removed:
            ops.set_shared_data(node, NAMESPACE, KEY_PARENT_GROUP, "")

    if template is None or template.removed:
        return None
    return template
