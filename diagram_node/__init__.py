"""
Diagram Node - Observable node model and connection rules for diagram editors.

This package provides the state of a single diagram node, the actions that
mutate it consistently, and the rule evaluation a graph controller runs
before connecting two nodes.
"""

from .constants import (
    ElementType,
    ModelType,
    ElementState,
    DEFAULT_Z_INDEX,
    ELEMENT_MAX_Z_INDEX,
    NO_ACTIVE_ANCHOR,
)

from .models import TextLabel, Anchor, UpdateNodeRequest, normalize_keys
from .rules import (
    ConnectRule,
    ConnectRuleResult,
    evaluate_rules,
    no_self_connection,
    allowed_node_types,
)
from .theme import NodeTheme, Theme, default_theme, default_node_config, load_theme
from .node import BaseNodeModel, generate_node_id
from .shapes import (
    RectNodeModel,
    CircleNodeModel,
    EllipseNodeModel,
    DiamondNodeModel,
    TextNodeModel,
    NODE_MODELS,
    create_node,
)

__all__ = [
    # Constants
    "ElementType",
    "ModelType",
    "ElementState",
    "DEFAULT_Z_INDEX",
    "ELEMENT_MAX_Z_INDEX",
    "NO_ACTIVE_ANCHOR",
    # Value types
    "TextLabel",
    "Anchor",
    "UpdateNodeRequest",
    "normalize_keys",
    # Rules
    "ConnectRule",
    "ConnectRuleResult",
    "evaluate_rules",
    "no_self_connection",
    "allowed_node_types",
    # Theme
    "NodeTheme",
    "Theme",
    "default_theme",
    "default_node_config",
    "load_theme",
    # Nodes
    "BaseNodeModel",
    "generate_node_id",
    "RectNodeModel",
    "CircleNodeModel",
    "EllipseNodeModel",
    "DiamondNodeModel",
    "TextNodeModel",
    "NODE_MODELS",
    "create_node",
]
