"""In-memory scene backend.

Implements ``SceneOps`` over plain Python objects. Used by the CLI and the
tests; a host adapter replaces it in a real plugin.
"""

from __future__ import annotations

import itertools
import logging
import math
from collections.abc import Sequence

from circlr.core.layout.models import Affine

logger = logging.getLogger(__name__)

PAGE_TYPE = "PAGE"
GROUP_TYPE = "GROUP"
COMPONENT_TYPE = "COMPONENT"
INSTANCE_TYPE = "INSTANCE"


class SceneNode:
    """Mutable scene node holding a transform relative to its parent."""

    def __init__(
        self,
        node_id: str,
        node_type: str,
        name: str = "",
        width: float = 0.0,
        height: float = 0.0,
        transform: Affine | None = None,
    ) -> None:
        self._id = node_id
        self._type = node_type
        self.name = name or node_type.title()
        self._width = float(width)
        self._height = float(height)
        self.transform = transform or Affine.identity()
        self._parent: SceneNode | None = None
        self._children: list[SceneNode] = []
        self._removed = False
        self.shared_data: dict[tuple[str, str], str] = {}
        self.main_component: SceneNode | None = None

    def __repr__(self) -> str:
        return f"SceneNode(id={self._id!r}, type={self._type!r}, name={self.name!r})"

    @property
    def id(self) -> str:
        return self._id

    @property
    def type(self) -> str:
        return self._type

    @property
    def parent(self) -> SceneNode | None:
        return self._parent

    @property
    def children(self) -> list[SceneNode]:
        return list(self._children)

    @property
    def removed(self) -> bool:
        return self._removed

    @property
    def x(self) -> float:
        if self._type == GROUP_TYPE:
            return self.bounds()[0]
        return self.transform.tx

    @property
    def y(self) -> float:
        if self._type == GROUP_TYPE:
            return self.bounds()[1]
        return self.transform.ty

    @property
    def rotation(self) -> float:
        if self._type == GROUP_TYPE:
            return 0.0
        return self.transform.rotation_deg

    @property
    def width(self) -> float:
        if self._type == GROUP_TYPE:
            min_x, _, max_x, _ = self.bounds()
            return max_x - min_x
        return self._width

    @property
    def height(self) -> float:
        if self._type == GROUP_TYPE:
            _, min_y, _, max_y = self.bounds()
            return max_y - min_y
        return self._height

    def bounds(self) -> tuple[float, float, float, float]:
        """Axis-aligned bounds ``(min_x, min_y, max_x, max_y)`` in parent space."""
        if self._type == GROUP_TYPE:
            if not self._children:
                return (0.0, 0.0, 0.0, 0.0)
            boxes = [child.bounds() for child in self._children]
            return (
                min(b[0] for b in boxes),
                min(b[1] for b in boxes),
                max(b[2] for b in boxes),
                max(b[3] for b in boxes),
            )
        corners = [
            self.transform.apply(cx, cy)
            for cx, cy in (
                (0.0, 0.0),
                (self._width, 0.0),
                (0.0, self._height),
                (self._width, self._height),
            )
        ]
        xs = [c[0] for c in corners]
        ys = [c[1] for c in corners]
        return (min(xs), min(ys), max(xs), max(ys))

    def center(self) -> tuple[float, float]:
        """Visual center in parent space."""
        if self._type == GROUP_TYPE:
            min_x, min_y, max_x, max_y = self.bounds()
            return ((min_x + max_x) / 2, (min_y + max_y) / 2)
        return self.transform.apply(self._width / 2, self._height / 2)

    def resize(self, width: float, height: float) -> None:
        self._width = float(width)
        self._height = float(height)


class InMemoryScene:
    """
    ``SceneOps`` implementation backed by ``SceneNode`` objects.

    Groups are transparent: their children are positioned in the group's
    parent space, and moving a group moves every child.

    Example:
        >>> scene = InMemoryScene()
        >>> rect = scene.add_node("RECTANGLE", width=100, height=50, x=10, y=20)
        >>> rect.parent is scene.page
        True
    """

    def __init__(self) -> None:
        self._ids = itertools.count(1)
        self._nodes: dict[str, SceneNode] = {}
        self.page = self._new_node(PAGE_TYPE, name="Page")

    def _new_node(self, node_type: str, **kwargs) -> SceneNode:
        node = SceneNode(f"0:{next(self._ids)}", node_type, **kwargs)
        self._nodes[node.id] = node
        return node

    def _detach(self, node: SceneNode) -> None:
        parent = node._parent
        if parent is not None:
            parent._children.remove(node)
            node._parent = None

    def _attach(self, parent: SceneNode, node: SceneNode, index: int | None = None) -> None:
        if node is parent:
            raise ValueError("A node cannot contain itself")
        self._detach(node)
        if index is None:
            parent._children.append(node)
        else:
            parent._children.insert(index, node)
        node._parent = parent

    def add_node(
        self,
        node_type: str,
        name: str = "",
        width: float = 0.0,
        height: float = 0.0,
        x: float = 0.0,
        y: float = 0.0,
        rotation: float = 0.0,
        parent: SceneNode | None = None,
    ) -> SceneNode:
        """Create a node in ``parent`` (the page by default)."""
        node = self._new_node(
            node_type,
            name=name,
            width=width,
            height=height,
            transform=Affine.rotation(-math.radians(rotation), x, y),
        )
        self._attach(parent or self.page, node)
        return node

    def nodes(self) -> list[SceneNode]:
        """All live nodes, page included."""
        return [node for node in self._nodes.values() if not node.removed]

    # SceneOps

    def create_instance(self, template: SceneNode) -> SceneNode:
        if template.type != COMPONENT_TYPE:
            raise ValueError(f"Cannot instantiate a {template.type} node")
        instance = self._new_node(
            INSTANCE_TYPE,
            name=template.name,
            width=template.width,
            height=template.height,
        )
        instance.main_component = template
        self._attach(self.page, instance)
        return instance

    def set_affine(self, node: SceneNode, affine: Affine) -> None:
        node.transform = affine

    def set_rotation(self, node: SceneNode, deg: float) -> None:
        t = node.transform
        node.transform = Affine.rotation(-math.radians(deg), t.tx, t.ty)

    def set_position(self, node: SceneNode, x: float, y: float) -> None:
        dx = x - node.x
        dy = y - node.y
        if node.type == GROUP_TYPE:
            for child in node.children:
                self.set_position(child, child.x + dx, child.y + dy)
            return
        node.transform = node.transform.translated(dx, dy)

    def remove(self, node: SceneNode) -> None:
        self._detach(node)
        stack = [node]
        while stack:
            current = stack.pop()
            current._removed = True
            stack.extend(current._children)

    def group(self, nodes: Sequence[SceneNode], parent: SceneNode) -> SceneNode:
        if not nodes:
            raise ValueError("Cannot group an empty list of nodes")
        group = self._new_node(GROUP_TYPE, name="Group")
        # The group takes the z-position of the first grouped node when it
        # already lives in ``parent``
        first = nodes[0]
        index = parent._children.index(first) if first._parent is parent else None
        self._attach(parent, group, index)
        for node in nodes:
            self._attach(group, node)
        return group

    def insert_child(self, group: SceneNode, index: int, node: SceneNode) -> None:
        self._attach(group, node, index)

    def append_child(self, parent: SceneNode, node: SceneNode) -> None:
        self._attach(parent, node)

    def componentize(self, node: SceneNode) -> SceneNode:
        w = node.width
        h = node.height
        is_hairline = w == 0 or h == 0
        is_wider_or_square = w >= h
        inherit = w if is_wider_or_square else h

        component = self._new_node(
            COMPONENT_TYPE,
            name=node.name,
            width=inherit if is_hairline else w,
            height=inherit if is_hairline else h,
        )
        parent = node.parent or self.page
        index = parent._children.index(node) if node.parent is parent else None
        self._attach(parent, component, index)

        # The component takes over the node's pose, the node resets inside it
        component.transform = node.transform
        node.transform = Affine.identity()
        self._attach(component, node)

        if is_hairline:
            rad = math.radians(component.rotation)
            half = inherit / 2
            if is_wider_or_square:
                node.transform = node.transform.translated(0.0, half)
                component.transform = component.transform.translated(
                    -half * math.sin(rad), -half * math.cos(rad)
                )
            else:
                node.transform = node.transform.translated(half, 0.0)
                component.transform = component.transform.translated(
                    -half * math.cos(rad), half * math.sin(rad)
                )

        logger.debug(
            f"Componentized {node.id} into {component.id} "
            f"({component.width}x{component.height})"
        )
        return component

    def get_node(self, node_id: str) -> SceneNode | None:
        return self._nodes.get(node_id)

    def get_shared_data(self, node: SceneNode, namespace: str, key: str) -> str:
        return node.shared_data.get((namespace, key), "")

    def set_shared_data(self, node: SceneNode, namespace: str, key: str, value: str) -> None:
        node.shared_data[(namespace, key)] = str(value)
