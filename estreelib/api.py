"""High-level API for estreelib.

This module provides simple, functional interfaces for common traversal
operations. These functions wrap Traversal and ExecutionPlan for the common
case of "walk this tree and give me the nodes".

All functions accept the same keyword options:

    registry        ChildRuleRegistry to navigate with (default: process-wide)
    kinds           Only yield nodes of these kinds (string or iterable)
    include_filter  Only yield nodes for which this returns True
    exclude_filter  Never yield nodes for which this returns True
    prune_filter    Do not visit the children of nodes for which this is True
    max_nodes       Stop after yielding this many nodes
    on_error        Callback ``(node, error)`` for child rule failures
    skip_errors     Skip the children of nodes whose rule fails instead of raising
"""

from collections import Counter
from typing import Any, Callable, Dict, Iterator, Optional

from .config import (
    ErrorPolicy,
    FilterConfig,
    LimitConfig,
    TraversalConfig,
    as_kind_set,
)
from .core.registry import ChildRuleRegistry, default_registry
from .planning import ExecutionPlan


def traverse(
    root: Any,
    registry: Optional[ChildRuleRegistry] = None,
    **options
) -> Iterator[Any]:
    """Walk every node under ``root`` in pre-order.

    This is the primary high-level function. Without options it yields
    exactly what ``Traversal(root)`` yields.

    Args:
        root: Root node
        registry: Child rules to navigate with
        **options: Filtering, limit and error options (see module docstring)

    Returns:
        Lazy iterator over the matching nodes

    Raises:
        InvalidNodeError: If ``root`` is not a node
        ConfigurationError: If the options are invalid

    Example:
        >>> for node in traverse(program, kinds="CallExpression"):
        ...     print(node["callee"]["name"])
    """
    plan = ExecutionPlan(_build_config(**options), registry)
    return plan.execute(root)


def count_nodes(root: Any, **options) -> int:
    """Count nodes in a tree that match the given options.

    Example:
        >>> count_nodes(program, kinds={"Identifier"})
        12
    """
    count = 0
    for _ in traverse(root, **options):
        count += 1
    return count


def find_nodes(
    root: Any,
    predicate: Callable[[Any], bool],
    **options
) -> Iterator[Any]:
    """Find nodes that match a predicate, in pre-order.

    Args:
        root: Root node
        predicate: Function that returns True for matching nodes
        **options: Traversal options (see module docstring)
    """
    options['include_filter'] = predicate
    return traverse(root, **options)


def find_by_kind(root: Any, *kinds: str, **options) -> Iterator[Any]:
    """Find nodes whose kind is one of ``kinds``, in pre-order.

    Example:
        >>> [n["name"] for n in find_by_kind(program, "Identifier")]
        ['x', 'y']
    """
    options['kinds'] = kinds
    return traverse(root, **options)


def get_leaf_nodes(root: Any, **options) -> Iterator[Any]:
    """Yield nodes with no present children.

    With ``skip_errors``, a node whose child rule failed counts as a leaf.
    """
    is_leaf = _leaf_check(options)
    for node in traverse(root, **options):
        if is_leaf(node):
            yield node


def get_tree_stats(root: Any, **options) -> Dict[str, Any]:
    """Get statistics about a tree.

    Returns:
        Dictionary with:
        - total_nodes: Number of values yielded
        - leaf_nodes: Values without present children
        - internal_nodes: Nodes with at least one child
        - kinds: Mapping of kind tag to count
        - non_nodes: Values without a kind tag, as returned by custom rules
        - unknown_kinds: Sorted kinds that have no registered rule
    """
    registry = _registry_from(options)
    is_leaf = _leaf_check(options)
    kinds: Counter = Counter()
    total = leaves = non_nodes = 0

    for node in traverse(root, **options):
        total += 1
        kind = registry.kind_of(node)
        if kind is None:
            non_nodes += 1
        else:
            kinds[kind] += 1
        if is_leaf(node):
            leaves += 1

    return {
        'total_nodes': total,
        'leaf_nodes': leaves,
        'internal_nodes': total - leaves,
        'kinds': dict(kinds),
        'non_nodes': non_nodes,
        'unknown_kinds': sorted(kind for kind in kinds if kind not in registry),
    }


# Helper functions

def _build_config(
    kinds: Any = None,
    include_filter: Optional[Callable[[Any], bool]] = None,
    exclude_filter: Optional[Callable[[Any], bool]] = None,
    prune_filter: Optional[Callable[[Any], bool]] = None,
    max_nodes: Optional[int] = None,
    on_error: Optional[Callable[[Any, Exception], None]] = None,
    skip_errors: bool = False,
    **kwargs
) -> TraversalConfig:
    """Build TraversalConfig from keyword arguments.

    Unrecognized keywords that name a TraversalConfig attribute (such as
    ``progress_callback``) are applied directly; anything else is an error.
    """
    config = TraversalConfig(
        filter=FilterConfig(
            kinds=as_kind_set(kinds),
            include_filter=include_filter,
            exclude_filter=exclude_filter,
            prune_filter=prune_filter,
        ),
        limits=LimitConfig(max_nodes=max_nodes),
        error_policy=ErrorPolicy.SKIP if skip_errors else ErrorPolicy.RAISE,
        on_error=on_error,
    )

    for key, value in kwargs.items():
        if not hasattr(config, key):
            raise TypeError(f"Unknown traversal option: {key!r}")
        setattr(config, key, value)

    return config


def _registry_from(options: Dict[str, Any]) -> ChildRuleRegistry:
    registry = options.get('registry')
    return registry if registry is not None else default_registry()


def _leaf_check(options: Dict[str, Any]) -> Callable[[Any], bool]:
    """Return a leaf test that does not re-run child rules that already failed.

    Wraps ``options['on_error']`` in place to record the failing nodes.
    """
    registry = _registry_from(options)
    failed = set()
    on_error = options.get('on_error')
    if on_error is not None and not callable(on_error):
        # Leave it for TraversalConfig.validate to reject
        return registry.is_leaf

    def record(node: Any, error: Exception) -> None:
        failed.add(id(node))
        if on_error is not None:
            on_error(node, error)

    options['on_error'] = record
    return lambda node: id(node) in failed or registry.is_leaf(node)
