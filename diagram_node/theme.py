"""
Node themes - default geometry and style per node shape kind.

A theme is plain configuration: each shape kind (rect, circle, ...) maps to a
NodeTheme holding the values a freshly created node of that kind starts with.
Theme files use the camelCase keys a browser editor writes (fillOpacity,
strokeWidth, ...); snake_case keys are accepted too.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)

# Environment variable naming a JSON theme file
THEME_ENV_VAR = "DIAGRAM_NODE_THEME"

DEFAULT_KIND = "rect"


class NodeTheme(BaseModel):
    """Default geometry and style for one node kind."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    width: float = 100
    height: float = 80
    fill: str = "#FFFFFF"
    fill_opacity: float = 1.0
    stroke: str = "#000000"
    stroke_opacity: float = 1.0
    stroke_width: float = 2
    outline_color: str = "#000000"
    opacity: float = 1.0


class Theme(BaseModel):
    """Node themes keyed by shape kind."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    rect: NodeTheme = Field(default_factory=NodeTheme)
    circle: NodeTheme = Field(default_factory=lambda: NodeTheme(width=100, height=100))
    ellipse: NodeTheme = Field(default_factory=lambda: NodeTheme(width=100, height=60))
    diamond: NodeTheme = Field(default_factory=lambda: NodeTheme(width=60, height=60))
    text: NodeTheme = Field(default_factory=lambda: NodeTheme(
        width=60,
        height=20,
        fill="transparent",
        stroke="none",
        stroke_width=0,
        outline_color="transparent",
    ))

    def get(self, kind: str) -> Optional[NodeTheme]:
        """Get the theme entry for a kind, or None if the kind is unknown."""
        if kind in type(self).model_fields:
            return getattr(self, kind)
        return None

    def __getitem__(self, kind: str) -> NodeTheme:
        entry = self.get(kind)
        if entry is None:
            raise KeyError(kind)
        return entry

    def __contains__(self, kind: object) -> bool:
        return isinstance(kind, str) and kind in type(self).model_fields


def default_theme() -> Theme:
    """Build a fresh copy of the built-in theme."""
    return Theme()


def default_node_config(kind: str = DEFAULT_KIND, theme: Optional[Theme] = None) -> dict[str, Any]:
    """
    Get the starting attribute values for a node of the given kind.

    Unknown kinds fall back to the rect entry. The returned dict is new on
    every call, so callers may mutate it freely.

    Args:
        kind: Shape kind key (rect, circle, ellipse, diamond, text)
        theme: Theme to read from (built-in theme if None)

    Returns:
        Dict of snake_case attribute names to values
    """
    theme = theme or default_theme()
    entry = theme.get(kind) or theme.get(DEFAULT_KIND)
    return entry.model_dump()


def load_theme(path: str | Path | None = None) -> Theme:
    """
    Load a theme from a JSON file, layered over the built-in theme.

    Only the kinds and fields present in the file override the defaults.
    With no path, the DIAGRAM_NODE_THEME environment variable is used; with
    neither, the built-in theme is returned.

    Raises:
        FileNotFoundError: If the theme file does not exist
        json.JSONDecodeError: If the file is not valid JSON
        pydantic.ValidationError: If a value has the wrong type
    """
    if path is None:
        env_path = os.environ.get(THEME_ENV_VAR)
        if not env_path:
            return default_theme()
        path = env_path

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Theme file not found: {path}")

    with open(path, 'r') as f:
        data = json.load(f)

    merged = default_theme().model_dump()
    for kind, overrides in data.items():
        if kind not in merged:
            logger.debug("Ignoring unknown theme kind %r in %s", kind, path)
            continue
        # Validate the partial entry on its own so aliases resolve to field names
        partial = NodeTheme.model_validate(overrides).model_dump(exclude_unset=True)
        merged[kind].update(partial)

    logger.debug("Loaded node theme from %s", path)
    return Theme.model_validate(merged)
