"""
Value types carried by node models.

- TextLabel: the label sub-record of a node
- Anchor: a connection point on the node perimeter
- UpdateNodeRequest: partial update accepted by BaseNodeModel.update_data

Field Naming Convention:
- Attributes are snake_case in Python
- Payloads written by a browser editor use camelCase (fillOpacity, zIndex, ...)
  and `type` for the node type; normalize_keys() converts them on input
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Optional, Union

from pydantic import BaseModel


# camelCase / legacy payload key -> attribute name
ATTRIBUTE_ALIASES = {
    "type": "node_type",
    "nodeType": "node_type",
    "fillOpacity": "fill_opacity",
    "strokeOpacity": "stroke_opacity",
    "strokeWidth": "stroke_width",
    "outlineColor": "outline_color",
    "zIndex": "z_index",
    "isSelected": "is_selected",
    "isHovered": "is_hovered",
    "isHitable": "is_hitable",
    "isContextMenu": "is_context_menu",
    "activeAnchor": "active_anchor",
    "additionStateData": "addition_state_data",
    "sourceRules": "source_rules",
    "targetRules": "target_rules",
}


def normalize_keys(data: Mapping) -> dict:
    """
    Copy a payload, renaming aliased keys to attribute names.

    When both spellings are present the snake_case key wins.
    """
    result: dict[str, Any] = {}
    for key, value in data.items():
        name = ATTRIBUTE_ALIASES.get(key, key)
        if name in result and key != name:
            continue
        result[name] = value
    return result


@dataclass
class TextLabel:
    """The label of a node: content plus its own position."""
    value: str = ""
    x: float = 0
    y: float = 0
    draggable: bool = False  # Whether the label can be dragged apart from the node

    @classmethod
    def from_value(cls, text: Any, x: float, y: float) -> "TextLabel":
        """
        Build a label from any accepted payload form.

        - None or empty: empty label at (x, y)
        - str: label with that value at (x, y)
        - TextLabel: a copy
        - Mapping: its keys, with missing ones defaulted as above
        """
        if isinstance(text, TextLabel):
            return cls(text.value, text.x, text.y, text.draggable)
        if isinstance(text, Mapping):
            return cls(
                value=text.get("value", ""),
                x=text.get("x", x),
                y=text.get("y", y),
                draggable=text.get("draggable", False),
            )
        if not text:
            return cls(value="", x=x, y=y)
        return cls(value=text, x=x, y=y)

    def to_dict(self) -> dict:
        """Convert to the exported label shape (draggable is not exported)."""
        return {
            "x": self.x,
            "y": self.y,
            "value": self.value,
        }


@dataclass
class Anchor:
    """A point on the node perimeter where an edge may attach."""
    x: float
    y: float
    id: Optional[str] = None

    def to_dict(self) -> dict:
        result = {"x": self.x, "y": self.y}
        if self.id:
            result["id"] = self.id
        return result


class UpdateNodeRequest(BaseModel):
    """Partial node update. Only set fields are applied."""
    type: Optional[str] = None
    x: Optional[float] = None
    y: Optional[float] = None
    text: Optional[Union[str, dict[str, Any]]] = None
    properties: Optional[dict[str, Any]] = None
