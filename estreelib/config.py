"""Configuration system for estreelib.

This module defines how callers describe a traversal beyond the plain
pre-order walk: which nodes to yield, which subtrees to skip, how many nodes
to produce at most, and what to do when a child rule fails.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, FrozenSet, Iterable, List, Optional


class ErrorPolicy(Enum):
    """What to do when a child rule raises during traversal."""
    RAISE = "raise"     # Propagate the ChildRuleError to the caller
    SKIP = "skip"       # Record it, keep the node but skip its children


@dataclass
class FilterConfig:
    """Configuration for filtering nodes during traversal."""

    # Only yield nodes of these kinds (None = all kinds)
    kinds: Optional[FrozenSet[str]] = None

    # Custom filter functions
    include_filter: Optional[Callable[[Any], bool]] = None  # Include predicate
    exclude_filter: Optional[Callable[[Any], bool]] = None  # Exclude predicate

    # Nodes matching this are yielded but their children are not visited
    prune_filter: Optional[Callable[[Any], bool]] = None

    def should_include(self, node: Any, kind: Optional[str]) -> bool:
        """Check if a node should be yielded.

        Args:
            node: Node to check
            kind: The node's kind tag

        Returns:
            True if node passes all filters
        """
        # Exclusion takes precedence
        if self.exclude_filter and self.exclude_filter(node):
            return False

        if self.kinds is not None and kind not in self.kinds:
            return False

        if self.include_filter:
            return bool(self.include_filter(node))

        return True

    def should_prune(self, node: Any) -> bool:
        """Check if a node's children should be skipped."""
        return bool(self.prune_filter and self.prune_filter(node))


@dataclass
class LimitConfig:
    """Configuration for bounding a traversal."""

    max_nodes: Optional[int] = None  # Maximum nodes to yield

    def check_node_limit(self, node_count: int) -> bool:
        """Check whether another node may be yielded after ``node_count``."""
        if self.max_nodes is None:
            return True
        return node_count < self.max_nodes


@dataclass
class TraversalConfig:
    """Complete configuration for a traversal.

    The ExecutionPlan validates this configuration before walking.
    """

    filter: FilterConfig = field(default_factory=FilterConfig)
    limits: LimitConfig = field(default_factory=LimitConfig)

    # Error handling
    error_policy: ErrorPolicy = ErrorPolicy.RAISE
    on_error: Optional[Callable[[Any, Exception], None]] = None

    # Progress reporting
    progress_callback: Optional[Callable[[int], None]] = None
    progress_interval: int = 100  # Report every N yielded nodes

    @classmethod
    def for_kinds(cls, *kinds: str) -> 'TraversalConfig':
        """Create config that yields only nodes of the given kinds.

        Args:
            *kinds: Kind tags to keep, e.g. ``"CallExpression"``

        Returns:
            TraversalConfig with a kind filter
        """
        return cls(filter=FilterConfig(kinds=frozenset(kinds)))

    @classmethod
    def shallow(cls, max_nodes: int) -> 'TraversalConfig':
        """Create config that stops after ``max_nodes`` nodes."""
        return cls(limits=LimitConfig(max_nodes=max_nodes))

    def validate(self) -> List[str]:
        """Validate configuration for consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if self.limits.max_nodes is not None and self.limits.max_nodes < 0:
            errors.append("max_nodes cannot be negative")

        if self.progress_interval <= 0:
            errors.append("progress_interval must be positive")

        if not isinstance(self.error_policy, ErrorPolicy):
            errors.append(f"error_policy must be an ErrorPolicy, got {self.error_policy!r}")

        if self.filter.kinds is not None:
            bad = [k for k in self.filter.kinds if not isinstance(k, str) or not k]
            if bad:
                errors.append(f"kinds must be non-empty strings: {bad!r}")

        for name in ("include_filter", "exclude_filter", "prune_filter"):
            predicate = getattr(self.filter, name)
            if predicate is not None and not callable(predicate):
                errors.append(f"{name} must be callable")

        if self.on_error is not None and not callable(self.on_error):
            errors.append("on_error must be callable")

        return errors


def as_kind_set(kinds: Optional[Iterable[str]]) -> Optional[FrozenSet[str]]:
    """Normalize a kind argument (a single string or an iterable) to a frozenset."""
    if kinds is None:
        return None
    if isinstance(kinds, str):
        return frozenset([kinds])
    return frozenset(kinds)
