"""
Shared constants for diagram elements.

Element kinds, interaction states and stacking limits used by node models
and by whatever graph controller owns them.
"""

from enum import Enum, IntEnum


class ElementType(str, Enum):
    """Base kinds of diagram elements."""
    NODE = "node"
    EDGE = "edge"
    GRAPH = "graph"


class ModelType(str, Enum):
    """Model discriminators. A node model always reports NODE."""
    NODE = "node"
    EDGE = "edge"
    GRAPH = "graph"


class ElementState(IntEnum):
    """Interaction modes a node can be in."""
    DEFAULT = 1
    TEXT_EDIT = 2
    SHOW_MENU = 3
    ALLOW_CONNECT = 4
    NOT_ALLOW_CONNECT = 5


# Stacking order
DEFAULT_Z_INDEX = 1
ELEMENT_MAX_Z_INDEX = 9999

NO_ACTIVE_ANCHOR = -1
