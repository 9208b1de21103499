"""
Connection rules - Decide whether two nodes may be joined by an edge.

A rule is a message plus a predicate over (source, target). Rules are
evaluated in order and the first failing rule decides the outcome; later
rules are never called. "Cannot connect" is a normal result, reported as a
ConnectRuleResult rather than an exception.
"""

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .node import BaseNodeModel

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConnectRule:
    """A named predicate that must hold for an edge to be created."""
    message: str
    validate: Callable[["BaseNodeModel", "BaseNodeModel"], bool]


@dataclass
class ConnectRuleResult:
    """Outcome of evaluating a list of connection rules."""
    is_all_pass: bool
    msg: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "isAllPass": self.is_all_pass,
            "msg": self.msg,
        }


def evaluate_rules(
    rules: Iterable[ConnectRule],
    source: "BaseNodeModel",
    target: "BaseNodeModel",
) -> ConnectRuleResult:
    """
    Evaluate rules in order, stopping at the first failure.

    A validator that raises counts as a failed rule: the connection is
    denied with that rule's message and the error is logged.

    Args:
        rules: Rules to check, in evaluation order
        source: Proposed source node of the edge
        target: Proposed target node of the edge

    Returns:
        ConnectRuleResult with the failing rule's message, if any
    """
    for rule in rules:
        try:
            passed = rule.validate(source, target)
        except Exception:
            logger.warning(
                "Connection rule %r raised for %s -> %s; denying connection",
                rule.message, source.id, target.id, exc_info=True,
            )
            return ConnectRuleResult(is_all_pass=False, msg=rule.message)

        if not passed:
            logger.debug(
                "Connection %s -> %s rejected: %s", source.id, target.id, rule.message
            )
            return ConnectRuleResult(is_all_pass=False, msg=rule.message)

    return ConnectRuleResult(is_all_pass=True)


# --- Built-in rules ---

def no_self_connection(message: str = "A node cannot connect to itself") -> ConnectRule:
    """Rule rejecting edges whose source and target are the same node."""
    return ConnectRule(
        message=message,
        validate=lambda source, target: source.id != target.id,
    )


def allowed_node_types(
    node_types: Iterable[str],
    message: str = "Connection to this node type is not allowed",
    check: str = "target",
) -> ConnectRule:
    """
    Rule restricting the node type of one endpoint.

    Args:
        node_types: Node types that are accepted
        message: Message surfaced when the rule fails
        check: Which endpoint to check, "source" or "target"
    """
    if check not in ("source", "target"):
        raise ValueError(f"check must be 'source' or 'target', got {check!r}")

    allowed = frozenset(node_types)

    def validate(source: "BaseNodeModel", target: "BaseNodeModel") -> bool:
        node = source if check == "source" else target
        return node.node_type in allowed

    return ConnectRule(message=message, validate=validate)
