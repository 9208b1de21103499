"""Unit tests for shape node variants."""

from diagram_node import (
    Anchor,
    BaseNodeModel,
    CircleNodeModel,
    DiamondNodeModel,
    EllipseNodeModel,
    RectNodeModel,
    TextNodeModel,
    create_node,
)


def test_rect_default_anchors():
    """Test a rectangle anchors at its side midpoints."""
    node = RectNodeModel({"id": "r", "x": 100, "y": 100})
    assert node.anchors == [
        Anchor(x=100, y=60, id="r_0"),
        Anchor(x=150, y=100, id="r_1"),
        Anchor(x=100, y=140, id="r_2"),
        Anchor(x=50, y=100, id="r_3"),
    ]


def test_anchors_follow_node():
    """Test default anchors are recomputed after a move."""
    node = RectNodeModel({"x": 0, "y": 0})
    node.move(10, 20)
    assert node.anchors[0].x == 10
    assert node.anchors[0].y == 20 - 40


def test_explicit_anchors_override_defaults():
    """Test anchors from the payload replace the shape defaults."""
    node = RectNodeModel({"anchors": [Anchor(x=1, y=2)]})
    assert node.anchors == [Anchor(x=1, y=2)]


def test_circle_radius():
    """Test the circle radius follows its width."""
    node = CircleNodeModel({"x": 0, "y": 0})
    assert node.node_type == "circle"
    assert node.r == 50
    assert node.anchors[1] == Anchor(x=50, y=0, id=f"{node.id}_1")


def test_ellipse_radii():
    """Test ellipse radii come from width and height."""
    node = EllipseNodeModel({"width": 80, "height": 30})
    assert (node.rx, node.ry) == (40, 15)


def test_diamond_points():
    """Test diamond vertices clockwise from the top."""
    node = DiamondNodeModel({"x": 0, "y": 0})
    assert node.points == [(0, -30), (30, 0), (0, 30), (-30, 0)]


def test_text_node():
    """Test a text node has no anchors and a transparent style."""
    node = TextNodeModel({"text": "Note"})
    assert node.anchors == []
    assert node.fill == "transparent"
    assert node.text.value == "Note"


def test_create_node_by_type():
    """Test nodes are built from the class registered for their type."""
    assert isinstance(create_node({"type": "diamond"}), DiamondNodeModel)
    assert isinstance(create_node({"nodeType": "circle"}), CircleNodeModel)
    plain = create_node({"type": "custom"})
    assert type(plain) is BaseNodeModel
    assert plain.node_type == "custom"


def test_create_node_round_trips_export():
    """Test a node rebuilt from its export matches the original snapshot."""
    original = RectNodeModel({"x": 5, "y": 6, "text": "hi", "properties": {"k": [1]}})
    rebuilt = create_node(original.export_data())
    assert isinstance(rebuilt, RectNodeModel)
    assert rebuilt.export_data() == original.export_data()
