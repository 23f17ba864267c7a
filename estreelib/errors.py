"""Exception types raised by estreelib.

Traversal is permissive: unknown node kinds and missing fields are
data, not faults. The exceptions below cover the few contract violations that
are reported to callers.
"""

from typing import Any, Optional


class EstreeLibError(Exception):
    """Base class for all estreelib errors."""
    pass


class InvalidNodeError(EstreeLibError, TypeError):
    """Raised when a value that is not an AST node is used as a traversal root."""

    def __init__(self, value: Any, kind_field: str = "type"):
        self.value = value
        self.kind_field = kind_field
        super().__init__(
            f"Expected an AST node with a string {kind_field!r} field, "
            f"got {type(value).__name__}: {value!r:.80}"
        )


class InvalidChildRuleError(EstreeLibError, TypeError):
    """Raised when a child rule cannot be registered."""
    pass


class ChildRuleError(EstreeLibError, RuntimeError):
    """Raised when a child rule fails while expanding a node.

    The original exception is available as ``__cause__``.
    """

    def __init__(self, node: Any, kind: Optional[str], message: str):
        self.node = node
        self.kind = kind
        super().__init__(f"Child rule for {kind!r} failed: {message}")


class ConfigurationError(EstreeLibError, ValueError):
    """Raised when a TraversalConfig fails validation."""
    pass
