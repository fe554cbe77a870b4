"""Selection validity classification."""

from circlr.core.selection.classifier import (
    ACTION_LABELS,
    SUPPORTED_NODE_TYPES,
    SelectionProperties,
    SelectionState,
    TreeNode,
    action_label,
    can_apply,
    classify_selection,
    describe_selection,
    has_component_child,
    is_updateable,
)

__all__ = [
    "ACTION_LABELS",
    "SUPPORTED_NODE_TYPES",
    "SelectionProperties",
    "SelectionState",
    "TreeNode",
    "action_label",
    "can_apply",
    "classify_selection",
    "describe_selection",
    "has_component_child",
    "is_updateable",
]
