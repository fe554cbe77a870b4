"""Scene collaborator: protocols, in-memory backend and pattern materialization."""

from circlr.core.scene.materialize import (
    GROUP_NAME,
    ORIGIN_NAME,
    PatternRefs,
    dissolve_pattern,
    materialize_pattern,
    resolve_template,
)
from circlr.core.scene.memory import InMemoryScene, SceneNode
from circlr.core.scene.protocols import NodeHandle, SceneOps
from circlr.core.scene.shared_data import (
    NAMESPACE,
    load_layout_settings,
    read_parent_group,
    store_layout_settings,
)

__all__ = [
    # Materialization
    "GROUP_NAME",
    "ORIGIN_NAME",
    "PatternRefs",
    "dissolve_pattern",
    "materialize_pattern",
    "resolve_template",
    # Backends
    "InMemoryScene",
    "SceneNode",
    # Protocols
    "NodeHandle",
    "SceneOps",
    # Shared data
    "NAMESPACE",
    "load_layout_settings",
    "read_parent_group",
    "store_layout_settings",
]
