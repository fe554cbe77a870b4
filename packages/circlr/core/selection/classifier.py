"""Selection classification.

Pure function of the current host selection, recomputed on every
selection-change event. The resulting state gates which actions the UI and
the scene collaborator allow; the layout engine never consults it.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from enum import Enum
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict


class SelectionState(str, Enum):
    """Classification of the current selection."""

    EMPTY = "EMPTY"
    INVALID = "INVALID"
    MULTIPLE = "MULTIPLE"
    VALID = "VALID"
    IS_INSTANCE_CHILD = "IS_INSTANCE_CHILD"
    HAS_COMPONENT_CHILD = "HAS_COMPONENT_CHILD"


COMPONENT_TYPE = "COMPONENT"
GROUP_LIKE_TYPES: frozenset[str] = frozenset({"GROUP"})

SUPPORTED_NODE_TYPES: frozenset[str] = frozenset(
    {
        "BOOLEAN_OPERATION",
        "COMPONENT",
        "ELLIPSE",
        "FRAME",
        "GROUP",
        "INSTANCE",
        "LINE",
        "POLYGON",
        "RECTANGLE",
        "STAR",
        "TEXT",
        "VECTOR",
    }
)

# States that allow generating a pattern
_APPLICABLE_STATES = frozenset({SelectionState.VALID, SelectionState.IS_INSTANCE_CHILD})

ACTION_LABELS: dict[SelectionState, str] = {
    SelectionState.EMPTY: "No items selected",
    SelectionState.INVALID: "Node type not supported",
    SelectionState.MULTIPLE: "Group multiple nodes before rotation",
    SelectionState.VALID: "Rotate items",
    SelectionState.IS_INSTANCE_CHILD: "Rotate items",
    SelectionState.HAS_COMPONENT_CHILD: "Group contains a component",
}
UPDATE_LABEL = "Update items"


@runtime_checkable
class TreeNode(Protocol):
    """Minimal read-only view of a scene node."""

    @property
    def type(self) -> str: ...

    @property
    def parent(self) -> TreeNode | None: ...

    @property
    def children(self) -> Sequence[TreeNode]: ...


class SelectionProperties(BaseModel):
    """Selection details forwarded to the UI for the preview."""

    model_config = ConfigDict(frozen=True)

    width: float | None = None
    height: float | None = None
    rotation: float | None = None
    type: str | None = None


def has_component_child(node: TreeNode) -> bool:
    """Whether ``node`` is or contains a component through nested groups.

    Iterative depth-first search; stops at the first component found. Only
    group-like containers are descended into.
    """
    stack: list[TreeNode] = [node]
    while stack:
        current = stack.pop()
        if current.type == COMPONENT_TYPE:
            return True
        if current.type in GROUP_LIKE_TYPES:
            # Reversed so children are visited in document order
            stack.extend(reversed(list(current.children)))
    return False


def classify_selection(
    selection: Sequence[TreeNode],
    supported_types: frozenset[str] | set[str] = SUPPORTED_NODE_TYPES,
) -> SelectionState:
    """Classify the current selection; the first matching rule wins.

    Example:
        >>> classify_selection([])
        <SelectionState.EMPTY: 'EMPTY'>
    """
    if not selection:
        return SelectionState.EMPTY
    if len(selection) > 1:
        return SelectionState.MULTIPLE

    node = selection[0]
    if node.type not in supported_types:
        return SelectionState.INVALID
    if node.parent is not None and node.parent.type == COMPONENT_TYPE:
        return SelectionState.IS_INSTANCE_CHILD
    if node.type in GROUP_LIKE_TYPES and has_component_child(node):
        return SelectionState.HAS_COMPONENT_CHILD
    return SelectionState.VALID


def describe_selection(selection: Sequence[TreeNode]) -> SelectionProperties:
    """Dimensions and type of a single selected node; empty otherwise."""
    if len(selection) != 1:
        return SelectionProperties()
    node = selection[0]
    return SelectionProperties(
        width=getattr(node, "width", None),
        height=getattr(node, "height", None),
        rotation=getattr(node, "rotation", None),
        type=node.type,
    )


def can_apply(state: SelectionState) -> bool:
    """Whether the commit action is enabled for ``state``."""
    return state in _APPLICABLE_STATES


def action_label(state: SelectionState, updateable: bool = False) -> str:
    """Text for the commit button."""
    if updateable and can_apply(state):
        return UPDATE_LABEL
    return ACTION_LABELS[state]


def is_updateable(node: TreeNode, read_parent_group: Callable[[TreeNode], str]) -> bool:
    """Whether ``node`` belongs to a pattern generated earlier.

    ``read_parent_group`` returns the group id recorded on a node's shared
    data (empty when none). The node counts as updateable when it sits in that
    group directly or one level deeper, inside the origin component.
    """
    group_id = read_parent_group(node)
    if not group_id:
        return False
    parent = node.parent
    if parent is None:
        return False
    if getattr(parent, "id", None) == group_id:
        return True
    grandparent = parent.parent
    return grandparent is not None and getattr(grandparent, "id", None) == group_id
