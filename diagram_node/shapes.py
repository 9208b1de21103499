"""
Shape variants of the base node model.

Each variant reads its defaults from its own theme entry and supplies
default anchors at the midpoints of its bounding box sides. Node x/y is the
center of the shape.
"""

from collections.abc import Mapping
from typing import Optional

from .models import Anchor, normalize_keys
from .node import BaseNodeModel
from .theme import Theme


def _side_anchors(node: BaseNodeModel) -> list[Anchor]:
    """Top, right, bottom and left midpoints of the node's bounding box."""
    half_w = node.width / 2
    half_h = node.height / 2
    points = [
        (node.x, node.y - half_h),
        (node.x + half_w, node.y),
        (node.x, node.y + half_h),
        (node.x - half_w, node.y),
    ]
    return [Anchor(x=px, y=py, id=f"{node.id}_{i}") for i, (px, py) in enumerate(points)]


class RectNodeModel(BaseNodeModel):
    """Rectangle node."""
    theme_kind = "rect"
    default_node_type = "rect"

    def get_default_anchors(self) -> list[Anchor]:
        return _side_anchors(self)


class CircleNodeModel(BaseNodeModel):
    """Circle node. The radius follows the width."""
    theme_kind = "circle"
    default_node_type = "circle"

    @property
    def r(self) -> float:
        return self.width / 2

    def get_default_anchors(self) -> list[Anchor]:
        return _side_anchors(self)


class EllipseNodeModel(BaseNodeModel):
    """Ellipse node."""
    theme_kind = "ellipse"
    default_node_type = "ellipse"

    @property
    def rx(self) -> float:
        return self.width / 2

    @property
    def ry(self) -> float:
        return self.height / 2

    def get_default_anchors(self) -> list[Anchor]:
        return _side_anchors(self)


class DiamondNodeModel(BaseNodeModel):
    """Diamond node. Its vertices are the side midpoints of the bounding box."""
    theme_kind = "diamond"
    default_node_type = "diamond"

    @property
    def points(self) -> list[tuple[float, float]]:
        """Vertices clockwise from the top."""
        return [(a.x, a.y) for a in _side_anchors(self)]

    def get_default_anchors(self) -> list[Anchor]:
        return _side_anchors(self)


class TextNodeModel(BaseNodeModel):
    """Free-standing text. Has no anchors, so edges cannot attach by default."""
    theme_kind = "text"
    default_node_type = "text"


# node type -> model class, for controllers building nodes from saved data
NODE_MODELS: dict[str, type[BaseNodeModel]] = {
    "rect": RectNodeModel,
    "circle": CircleNodeModel,
    "ellipse": EllipseNodeModel,
    "diamond": DiamondNodeModel,
    "text": TextNodeModel,
}


def create_node(data: Mapping, theme: Optional[Theme] = None) -> BaseNodeModel:
    """Build the model class registered for the payload's type, or a BaseNodeModel."""
    model_class = NODE_MODELS.get(normalize_keys(data).get("node_type", ""), BaseNodeModel)
    return model_class(data, theme=theme)
