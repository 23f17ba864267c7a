"""Core abstractions for estreelib.

This package holds the child-rule registry and the traversal engine that
consumes it, plus the node access helpers both rely on.
"""

from .node import EstreeNode, get_field, get_list, is_node, node_kind
from .rules import DEFAULT_RULES, ChildRule, fields, many
from .registry import (
    ChildRuleRegistry,
    default_registry,
    register_child_rule,
)
from .traverser import Traversal, TraversalResult

__all__ = [
    "EstreeNode",
    "get_field",
    "get_list",
    "is_node",
    "node_kind",
    "DEFAULT_RULES",
    "ChildRule",
    "fields",
    "many",
    "ChildRuleRegistry",
    "default_registry",
    "register_child_rule",
    "Traversal",
    "TraversalResult",
]
