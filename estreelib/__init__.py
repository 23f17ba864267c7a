"""estreelib - Deterministic traversal for ESTree abstract syntax trees.

estreelib visits every node of an ESTree-style AST (as produced by esprima,
acorn, espree and friends, either as JSON dicts or as node objects) exactly
once, in a stable pre-order, without per-tool traversal code.

Quick start:
━━━━━━━━━━━━━━━━━━━━━━━━━━
Low level:
    from estreelib import Traversal
    for node in Traversal(program): ...

High level:
    from estreelib import traverse, find_by_kind, get_tree_stats
━━━━━━━━━━━━━━━━━━━━━━━━━━

The traversal is iterative, so arbitrarily deep trees are safe. Node kinds
without a registered child rule are treated as leaves; teach the library new
kinds with ``register_child_rule`` or a private ``ChildRuleRegistry``.
"""

__version__ = "0.1.0"

# Core components
from .core.node import EstreeNode, get_field, get_list, is_node, node_kind
from .core.rules import DEFAULT_RULES, ChildRule, fields, many
from .core.registry import (
    ChildRuleRegistry,
    default_registry,
    register_child_rule,
)
from .core.traverser import Traversal, TraversalResult

# Errors
from .errors import (
    EstreeLibError,
    InvalidNodeError,
    InvalidChildRuleError,
    ChildRuleError,
    ConfigurationError,
)

# Configuration and planning
from .config import TraversalConfig, FilterConfig, LimitConfig, ErrorPolicy
from .planning import ExecutionPlan

# High-level API
from .api import (
    traverse,
    count_nodes,
    find_nodes,
    find_by_kind,
    get_leaf_nodes,
    get_tree_stats,
)

__all__ = [
    "__version__",
    # Core
    'EstreeNode',
    'get_field',
    'get_list',
    'is_node',
    'node_kind',
    'DEFAULT_RULES',
    'ChildRule',
    'fields',
    'many',
    'ChildRuleRegistry',
    'default_registry',
    'register_child_rule',
    'Traversal',
    'TraversalResult',
    # Errors
    'EstreeLibError',
    'InvalidNodeError',
    'InvalidChildRuleError',
    'ChildRuleError',
    'ConfigurationError',
    # Config
    'TraversalConfig',
    'FilterConfig',
    'LimitConfig',
    'ErrorPolicy',
    'ExecutionPlan',
    # API
    'traverse',
    'count_nodes',
    'find_nodes',
    'find_by_kind',
    'get_leaf_nodes',
    'get_tree_stats',
]
