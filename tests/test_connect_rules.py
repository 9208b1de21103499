"""Unit tests for connection rule evaluation."""

import logging

import pytest

from diagram_node import (
    BaseNodeModel,
    ConnectRule,
    ConnectRuleResult,
    allowed_node_types,
    evaluate_rules,
    no_self_connection,
)


def make_rule(message, result, calls=None):
    """Build a rule returning a fixed result and recording its arguments."""
    def validate(source, target):
        if calls is not None:
            calls.append((message, source, target))
        return result
    return ConnectRule(message=message, validate=validate)


@pytest.fixture
def source():
    return BaseNodeModel({"id": "a", "type": "start"})


@pytest.fixture
def target():
    return BaseNodeModel({"id": "b", "type": "task"})


def test_no_rules_pass(source, target):
    """Test a node without rules accepts any connection."""
    result = source.is_allow_connected_as_source(target)
    assert result == ConnectRuleResult(is_all_pass=True, msg=None)


def test_all_rules_pass(source, target):
    """Test passing rules give an all-pass result without a message."""
    source.source_rules = [make_rule("A", True), make_rule("B", True)]
    result = source.is_allow_connected_as_source(target)
    assert result.is_all_pass is True
    assert result.msg is None


def test_first_failure_short_circuits(source, target):
    """Test evaluation stops at the first failing rule."""
    calls = []
    source.source_rules = [make_rule("A failed", False, calls), make_rule("B", True, calls)]
    result = source.is_allow_connected_as_source(target)
    assert result == ConnectRuleResult(is_all_pass=False, msg="A failed")
    assert [c[0] for c in calls] == ["A failed"]


def test_rules_evaluated_in_order(source, target):
    """Test the first failing rule in list order supplies the message."""
    source.source_rules = [make_rule("ok", True), make_rule("second", False), make_rule("third", False)]
    assert source.is_allow_connected_as_source(target).msg == "second"


def test_source_rules_receive_self_as_source(source, target):
    """Test source rules are called with (this node, target)."""
    calls = []
    source.source_rules = [make_rule("A", True, calls)]
    source.is_allow_connected_as_source(target)
    assert calls == [("A", source, target)]


def test_target_rules_receive_self_as_target(source, target):
    """Test target rules are called with (source, this node)."""
    calls = []
    target.target_rules = [make_rule("T", False, calls)]
    result = target.is_allow_connected_as_target(source)
    assert calls == [("T", source, target)]
    assert result.to_dict() == {"isAllPass": False, "msg": "T"}


def test_target_rules_independent_of_source_rules(source, target):
    """Test source rules are not consulted for the target query."""
    target.source_rules = [make_rule("source only", False)]
    assert target.is_allow_connected_as_target(source).is_all_pass is True


def test_raising_validator_denies(source, target, caplog):
    """Test a validator that raises counts as a failure and stops evaluation."""
    calls = []

    def broken(src, tgt):
        raise RuntimeError("boom")

    source.source_rules = [ConnectRule("broken rule", broken), make_rule("later", True, calls)]
    with caplog.at_level(logging.WARNING, logger="diagram_node.rules"):
        result = source.is_allow_connected_as_source(target)

    assert result == ConnectRuleResult(is_all_pass=False, msg="broken rule")
    assert calls == []
    assert "broken rule" in caplog.text


def test_rules_do_not_mutate_nodes(source, target):
    """Test evaluating rules leaves both nodes unchanged."""
    before = (source.export_data(), target.export_data())
    source.source_rules = [no_self_connection(), allowed_node_types(["task"])]
    source.is_allow_connected_as_source(target)
    assert (source.export_data(), target.export_data()) == before
    assert source.version == 0
    assert target.version == 0


def test_rule_getter_override(source, target):
    """Test subclasses can supply rules through the getter hooks."""
    class GuardedNode(BaseNodeModel):
        def get_connected_target_rules(self):
            return [no_self_connection("no loops")]

    guarded = GuardedNode({"id": "g"})
    assert guarded.is_allow_connected_as_target(guarded).msg == "no loops"
    assert guarded.is_allow_connected_as_target(source).is_all_pass is True


def test_no_self_connection(source, target):
    """Test the self-connection rule."""
    rule = no_self_connection()
    assert evaluate_rules([rule], source, source).is_all_pass is False
    assert evaluate_rules([rule], source, target).is_all_pass is True


def test_allowed_node_types(source, target):
    """Test the node type rule on either endpoint."""
    to_task = allowed_node_types(["task"], message="tasks only")
    from_start = allowed_node_types(["start"], check="source")

    assert evaluate_rules([to_task], source, target).is_all_pass is True
    assert evaluate_rules([to_task], target, source).msg == "tasks only"
    assert evaluate_rules([from_start], source, target).is_all_pass is True
    assert evaluate_rules([from_start], target, source).is_all_pass is False


def test_allowed_node_types_invalid_endpoint():
    """Test an unknown endpoint name is rejected."""
    with pytest.raises(ValueError):
        allowed_node_types(["task"], check="edge")
