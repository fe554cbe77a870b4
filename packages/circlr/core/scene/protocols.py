"""Protocols for the host scene collaborator.

The core never touches a document directly. Everything that mutates or
queries the scene goes through ``SceneOps`` so a host adapter, or the
``InMemoryScene`` used in tests and the CLI, can be plugged in.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from circlr.core.layout.models import Affine


@runtime_checkable
class NodeHandle(Protocol):
    """Opaque handle to a scene node.

    Coordinates are relative to the parent container; ``rotation`` follows
    the host convention (degrees, counter-clockwise on screen).
    """

    @property
    def id(self) -> str: ...

    @property
    def type(self) -> str: ...

    name: str

    @property
    def x(self) -> float: ...

    @property
    def y(self) -> float: ...

    @property
    def rotation(self) -> float: ...

    @property
    def width(self) -> float: ...

    @property
    def height(self) -> float: ...

    @property
    def parent(self) -> NodeHandle | None: ...

    @property
    def children(self) -> Sequence[NodeHandle]: ...

    @property
    def removed(self) -> bool: ...


@runtime_checkable
class SceneOps(Protocol):
    """
    Protocol for scene mutation and lookup.

    All operations are synchronous. Implementations must:
    - Keep a node's relative transform when it is moved to another parent
    - Treat groups as transparent containers (children keep parent space)
    - Return an empty string for missing shared data entries
    """

    def create_instance(self, template: NodeHandle) -> NodeHandle:
        """
        Create an instance of a component node.

        Args:
            template: Component to instantiate

        Returns:
            New instance with an identity transform

        Raises:
            ValueError: If ``template`` is not a component
        """
        ...

    def set_affine(self, node: NodeHandle, affine: Affine) -> None:
        """Replace the node's relative transform."""
        ...

    def set_rotation(self, node: NodeHandle, deg: float) -> None:
        """Set the rotation about the node's top-left corner, keeping x/y."""
        ...

    def set_position(self, node: NodeHandle, x: float, y: float) -> None:
        """Move the node's top-left corner, keeping its rotation."""
        ...

    def remove(self, node: NodeHandle) -> None:
        """Detach the node and mark it (and its subtree) removed."""
        ...

    def group(self, nodes: Sequence[NodeHandle], parent: NodeHandle) -> NodeHandle:
        """
        Group ``nodes`` under a new group created inside ``parent``.

        Raises:
            ValueError: If ``nodes`` is empty
        """
        ...

    def insert_child(self, group: NodeHandle, index: int, node: NodeHandle) -> None:
        """Move ``node`` into ``group`` at ``index``."""
        ...

    def append_child(self, parent: NodeHandle, node: NodeHandle) -> None:
        """Move ``node`` to the end of ``parent``'s children."""
        ...

    def componentize(self, node: NodeHandle) -> NodeHandle:
        """
        Wrap ``node`` in a new component that takes over its place and pose.

        Zero-width or zero-height shapes get a square component so they can
        rotate about a meaningful center.
        """
        ...

    def get_node(self, node_id: str) -> NodeHandle | None:
        """Look up a node by id (removed nodes included), None if unknown."""
        ...

    def get_shared_data(self, node: NodeHandle, namespace: str, key: str) -> str:
        """Read a shared string value, empty string when unset."""
        ...

    def set_shared_data(self, node: NodeHandle, namespace: str, key: str, value: str) -> None:
        """Write a shared string value."""
        ...
