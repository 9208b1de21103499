"""
Node model - The mutable, observable state of one diagram node.

This module implements:
- Construction from a payload merged over per-kind theme defaults
- Mutation actions (move, select, hover, text, style, properties)
- Change notification: each action commits one changeset and observers are
  called once with every field it changed
- Export of the persisted snapshot
- Connection-rule queries used before an edge is created

The model does not lay out, hit-test or persist anything. The graph
controller that owns the node decides when to call it.
"""

import copy
import functools
import logging
import uuid
from collections.abc import Callable, Mapping
from contextlib import contextmanager
from dataclasses import asdict, replace
from typing import Any, Optional

from pydantic import BaseModel

from .constants import (
    DEFAULT_Z_INDEX,
    ELEMENT_MAX_Z_INDEX,
    NO_ACTIVE_ANCHOR,
    ElementState,
    ElementType,
    ModelType,
)
from .models import Anchor, TextLabel, UpdateNodeRequest, normalize_keys
from .rules import ConnectRule, ConnectRuleResult, evaluate_rules
from .theme import DEFAULT_KIND, Theme, default_node_config

logger = logging.getLogger(__name__)

ChangeCallback = Callable[["BaseNodeModel", dict[str, Any]], None]


def generate_node_id() -> str:
    """Generate a unique node ID."""
    return f"n{uuid.uuid4().hex[:8]}"


def action(method):
    """Run a method as one changeset; nested actions join the outer one."""
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._changeset():
            return method(self, *args, **kwargs)
    return wrapper


class BaseNodeModel:
    """
    A node in the diagram.

    Attributes are plain instance attributes so renderers can read them
    directly. Mutate through the action methods: they keep derived state
    consistent (the label follows the node, z-order follows selection) and
    notify observers registered with on_change().

    Subclasses pick their theme entry with `theme_kind`, their default type
    with `default_node_type`, and may override get_default_anchors() and the
    get_connected_*_rules() hooks.
    """

    theme_kind = DEFAULT_KIND
    default_node_type = ""

    # Attributes a construction payload or theme entry may set
    ASSIGNABLE_FIELDS = frozenset({
        "node_type", "x", "y", "width", "height",
        "fill", "fill_opacity", "stroke", "stroke_opacity", "stroke_width",
        "outline_color", "opacity", "z_index", "text", "properties",
        "is_selected", "is_hovered", "is_hitable", "is_context_menu",
        "active_anchor", "state", "addition_state_data", "anchors",
        "source_rules", "target_rules", "menu",
    })
    # Attributes update_data() accepts
    UPDATABLE_FIELDS = frozenset({"node_type", "x", "y", "text", "properties"})
    # Never writable after construction
    PROTECTED_FIELDS = frozenset({"id", "model_type", "base_type"})

    def __init__(self, data: Optional[Mapping] = None, theme: Optional[Theme] = None):
        data = normalize_keys(data or {})
        self._id: str = data.pop("id", None) or generate_node_id()
        self._on_change_callbacks: list[ChangeCallback] = []
        self._changes: Optional[dict[str, Any]] = None
        self._version = 0
        self._anchors: Optional[list[Anchor]] = None

        # Per-kind defaults, built fresh for this instance
        self.node_type: str = self.default_node_type
        self.x: float = 0
        self.y: float = 0
        config = default_node_config(self.theme_kind, theme)
        self.width: float = config["width"]
        self.height: float = config["height"]
        self.fill: str = config["fill"]
        self.fill_opacity: float = config["fill_opacity"]
        self.stroke: str = config["stroke"]
        self.stroke_opacity: float = config["stroke_opacity"]
        self.stroke_width: float = config["stroke_width"]
        self.outline_color: str = config["outline_color"]
        self.opacity: float = config["opacity"]

        self.z_index: int = DEFAULT_Z_INDEX
        self.is_selected = False
        self.is_hovered = False
        self.is_hitable = True  # Whether the node reacts to user interaction
        self.is_context_menu = False
        self.active_anchor: int = NO_ACTIVE_ANCHOR
        self.state: int = ElementState.DEFAULT
        self.addition_state_data: Any = None
        self.menu: Any = None
        self.source_rules: list[ConnectRule] = []
        self.target_rules: list[ConnectRule] = []

        # Label and properties are normalized before the merge
        x = data.get("x", self.x)
        y = data.get("y", self.y)
        data["text"] = TextLabel.from_value(data.get("text"), x, y)
        data["properties"] = copy.deepcopy(data.get("properties") or {})
        self.text: TextLabel = data["text"]
        self.properties: dict[str, Any] = data["properties"]

        for name, value in data.items():
            if name in self.PROTECTED_FIELDS or name not in self.ASSIGNABLE_FIELDS:
                logger.debug("Ignoring payload key %r for node %s", name, self._id)
                continue
            if name in ("source_rules", "target_rules"):
                value = list(value)
            setattr(self, name, value)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(id={self._id!r}, type={self.node_type!r}, "
            f"x={self.x!r}, y={self.y!r})"
        )

    # --- Identity ---

    @property
    def id(self) -> str:
        """Unique node ID, fixed at construction."""
        return self._id

    @property
    def model_type(self) -> ModelType:
        return ModelType.NODE

    @property
    def base_type(self) -> ElementType:
        return ElementType.NODE

    @property
    def version(self) -> int:
        """Number of changesets committed since construction."""
        return self._version

    # --- Anchors ---

    @property
    def anchors(self) -> list[Anchor]:
        """Connection anchors; the shape defaults unless set explicitly."""
        if self._anchors is not None:
            return self._anchors
        return self.get_default_anchors()

    @anchors.setter
    def anchors(self, value: Optional[list[Anchor]]):
        self._anchors = list(value) if value is not None else None

    def get_default_anchors(self) -> list[Anchor]:
        """Anchors used when none were set. The base node has none."""
        return []

    # --- Change Callbacks ---

    def on_change(self, callback: ChangeCallback):
        """Register a callback called as callback(node, changes) after each changeset."""
        self._on_change_callbacks.append(callback)

    def off_change(self, callback: ChangeCallback):
        """Remove a previously registered callback."""
        if callback in self._on_change_callbacks:
            self._on_change_callbacks.remove(callback)

    def _notify_change(self, changes: dict[str, Any]):
        """Notify all registered callbacks of a committed changeset."""
        for callback in list(self._on_change_callbacks):
            callback(self, changes)

    @contextmanager
    def _changeset(self):
        """
        Collect field writes into one changeset.

        Observers are notified once, after the outermost changeset closes,
        and only if something actually changed.
        """
        if self._changes is not None:
            yield self._changes
            return

        self._changes = {}
        try:
            yield self._changes
        finally:
            changes, self._changes = self._changes, None

        if changes:
            self._version += 1
            self._notify_change(changes)

    def _set(self, name: str, value: Any):
        """Write one attribute, recording it in the open changeset if it changed."""
        if getattr(self, name) == value:
            return
        setattr(self, name, value)
        if self._changes is not None:
            self._changes[name] = value

    # --- Export ---

    def export_data(self) -> dict:
        """
        Get the snapshot persisted by the owning graph.

        Style and interaction fields, and the label's draggable flag, are
        not part of the snapshot. Properties are deep-copied.
        """
        return {
            "id": self.id,
            "type": self.node_type,
            "x": self.x,
            "y": self.y,
            "text": self.text.to_dict(),
            "properties": self.export_properties(),
        }

    def export_properties(self) -> dict:
        """Get a deep copy of the node properties."""
        return copy.deepcopy(self.properties)

    # --- Connection Rules ---

    def get_connected_source_rules(self) -> list[ConnectRule]:
        """Rules checked when this node is the source of a new edge."""
        return self.source_rules

    def get_connected_target_rules(self) -> list[ConnectRule]:
        """Rules checked when this node is the target of a new edge."""
        return self.target_rules

    def is_allow_connected_as_source(self, target: "BaseNodeModel") -> ConnectRuleResult:
        """Check whether an edge may run from this node to `target`."""
        return evaluate_rules(self.get_connected_source_rules(), self, target)

    def is_allow_connected_as_target(self, source: "BaseNodeModel") -> ConnectRuleResult:
        """Check whether an edge may run from `source` to this node."""
        return evaluate_rules(self.get_connected_target_rules(), source, self)

    # --- Actions ---

    @action
    def move(self, delta_x: float, delta_y: float):
        """Translate the node, and its label by the same delta."""
        self._set("x", self.x + delta_x)
        self._set("y", self.y + delta_y)
        if self.text is not None:
            self.move_text(delta_x, delta_y)

    @action
    def move_to(self, x: float, y: float):
        """Move the node to an absolute position, shifting the label along."""
        if self.text is not None:
            self.move_text(x - self.x, y - self.y)
        self._set("x", x)
        self._set("y", y)

    @action
    def move_text(self, delta_x: float, delta_y: float):
        """Translate only the label."""
        text = self.text
        self._set("text", TextLabel(
            value=text.value,
            x=text.x + delta_x,
            y=text.y + delta_y,
            draggable=text.draggable,
        ))

    @action
    def update_text(self, value: str):
        """Replace the label content, keeping its position."""
        self._set("text", replace(self.text, value=value))

    @action
    def set_selected(self, flag: bool = True, update_z_index: bool = True):
        """Select or deselect; selected nodes are raised to the top unless told otherwise."""
        self._set("is_selected", flag)
        if update_z_index:
            self._set("z_index", ELEMENT_MAX_Z_INDEX if flag else DEFAULT_Z_INDEX)

    @action
    def set_hovered(self, flag: bool = True):
        self._set("is_hovered", flag)

    @action
    def set_hitable(self, flag: bool = True):
        self._set("is_hitable", flag)

    @action
    def set_anchor_active(self, index: int):
        self._set("active_anchor", index)

    @action
    def set_element_state(self, state: int, addition_state_data: Any = None):
        """Set the interaction mode together with its auxiliary data."""
        self._set("state", state)
        self._set("addition_state_data", addition_state_data)

    @action
    def show_menu(self, flag: bool = True):
        self._set("is_context_menu", flag)

    @action
    def update_stroke(self, color: str):
        self._set("stroke", color)

    @action
    def update_data(self, partial: Mapping | UpdateNodeRequest):
        """
        Apply a partial update of the persisted fields.

        Only type, x, y, text and properties are applied; any other key is
        dropped. A string text replaces the label value, a mapping is merged
        over the current label.
        """
        if isinstance(partial, BaseModel):
            partial = partial.model_dump(exclude_unset=True)

        values = {
            name: value
            for name, value in normalize_keys(partial).items()
            if name in self.UPDATABLE_FIELDS
        }

        for name, value in values.items():
            if name == "text":
                if value is None:
                    continue
                if isinstance(value, str):
                    value = replace(self.text, value=value)
                elif isinstance(value, Mapping):
                    value = TextLabel.from_value({**asdict(self.text), **value}, self.x, self.y)
                else:
                    value = TextLabel.from_value(value, self.x, self.y)
            elif name == "properties":
                value = copy.deepcopy(value or {})
            self._set(name, value)

    @action
    def set_property(self, key: str, value: Any):
        """Set a single property."""
        self._set("properties", {**self.properties, key: value})

    @action
    def set_properties(self, properties: Mapping):
        """Merge entries into the properties, overwriting existing keys."""
        self._set("properties", {**self.properties, **properties})

    @action
    def set_style_from_theme(self, type_key: str, graph_model: Any):
        """
        Apply the graph theme entry for `type_key`, if there is one.

        `graph_model.theme` may be a Theme or a mapping of kind to entry;
        entries may be NodeTheme models or mappings.
        """
        theme = getattr(graph_model, "theme", None)
        if theme is None:
            return

        entry = theme.get(type_key)
        if not entry:
            return

        if isinstance(entry, BaseModel):
            values = entry.model_dump()
        else:
            values = normalize_keys(entry)

        for name, value in values.items():
            if name in self.PROTECTED_FIELDS or name not in self.ASSIGNABLE_FIELDS:
                logger.debug("Ignoring theme key %r for node %s", name, self.id)
                continue
            if name == "text":
                value = TextLabel.from_value(value, self.x, self.y)
            self._set(name, value)
