"""Child-rule registry for estreelib.

The registry maps a node kind to the rule that lists that node's children.
It plays the role a tree adapter plays for other tree types: the traversal
engine knows nothing about ESTree and asks the registry how to navigate.

Kinds without a rule are leaves, so trees that mix known kinds with newer or
vendor-specific ones (JSX, TypeScript) still traverse. Callers can teach the
registry about those kinds with ``register``.
"""

import inspect
import logging
from typing import Any, Dict, Iterator, List, Mapping, Optional, Set

from ..errors import InvalidChildRuleError
from .node import DEFAULT_KIND_FIELD, node_kind
from .rules import DEFAULT_RULES, ChildRule, Slot

logger = logging.getLogger(__name__)


class ChildRuleRegistry:
    """Mapping from node kind to child rule.

    Each registry is independent; traversals take one explicitly so they can
    be configured and tested in isolation. ``default_registry()`` returns the
    shared, pre-populated instance used when none is given.
    """

    def __init__(self,
                 rules: Optional[Mapping[str, ChildRule]] = None,
                 kind_field: str = DEFAULT_KIND_FIELD):
        """Create a registry.

        Args:
            rules: Initial rules; defaults to the full ESTree table
            kind_field: Name of the field holding a node's kind tag
        """
        self.kind_field = kind_field
        self._rules: Dict[str, ChildRule] = {}
        self._unknown_kinds: Set[str] = set()
        for kind, rule in (DEFAULT_RULES if rules is None else rules).items():
            self.register(kind, rule)

    @classmethod
    def empty(cls, kind_field: str = DEFAULT_KIND_FIELD) -> 'ChildRuleRegistry':
        """Create a registry with no rules, where every node is a leaf."""
        return cls(rules={}, kind_field=kind_field)

    def register(self, kind: str, rule: ChildRule) -> None:
        """Register or override the child rule for ``kind``.

        The last registration for a kind wins.

        Args:
            kind: Node kind tag, e.g. ``"JSXElement"``
            rule: Callable taking one node and returning an iterable of
                child nodes or None (empty slots)

        Raises:
            InvalidChildRuleError: If ``kind`` is not a non-empty string or
                ``rule`` cannot be called with exactly one argument
        """
        if not isinstance(kind, str) or not kind:
            raise InvalidChildRuleError(
                f"Node kind must be a non-empty string, got {kind!r}"
            )
        _check_rule_signature(kind, rule)

        if kind in self._rules:
            logger.debug("Overriding child rule for %s", kind)
        self._rules[kind] = rule
        self._unknown_kinds.discard(kind)

    def unregister(self, kind: str) -> None:
        """Remove the rule for ``kind``; nodes of that kind become leaves.

        Raises:
            KeyError: If no rule is registered for ``kind``
        """
        del self._rules[kind]
        logger.debug("Removed child rule for %s", kind)

    def get_rule(self, kind: str) -> Optional[ChildRule]:
        """Return the rule for ``kind``, or None if it is a leaf kind."""
        return self._rules.get(kind)

    def kind_of(self, node: Any) -> Optional[str]:
        """Return the kind tag of ``node`` using this registry's kind field."""
        return node_kind(node, self.kind_field)

    def slots_of(self, node: Any) -> List[Slot]:
        """Return the raw child slots of ``node``, empty slots included.

        Unknown kinds and non-node values have no slots.
        """
        kind = self.kind_of(node)
        if kind is None:
            return []
        rule = self._rules.get(kind)
        if rule is None:
            if kind not in self._unknown_kinds:
                self._unknown_kinds.add(kind)
                logger.debug("No child rule for %s; treating as leaf", kind)
            return []
        return list(rule(node))

    def children_of(self, node: Any) -> List[Any]:
        """Return the present children of ``node`` in emission order."""
        return [child for child in self.slots_of(node) if child is not None]

    def is_leaf(self, node: Any) -> bool:
        """Check whether ``node`` has no present children."""
        return not self.children_of(node)

    def unknown_kinds(self) -> Set[str]:
        """Kinds seen by ``slots_of`` that had no registered rule."""
        return set(self._unknown_kinds)

    def kinds(self) -> List[str]:
        """Return the registered kinds, sorted."""
        return sorted(self._rules)

    def copy(self) -> 'ChildRuleRegistry':
        """Return an independent registry with the same rules."""
        return ChildRuleRegistry(rules=self._rules, kind_field=self.kind_field)

    def __contains__(self, kind: object) -> bool:
        return kind in self._rules

    def __iter__(self) -> Iterator[str]:
        return iter(self.kinds())

    def __len__(self) -> int:
        return len(self._rules)

    def __repr__(self) -> str:
        return (f"ChildRuleRegistry(kinds={len(self._rules)}, "
                f"kind_field={self.kind_field!r})")


def _check_rule_signature(kind: str, rule: Any) -> None:
    """Reject rules that cannot be called as ``rule(node)``."""
    if not callable(rule):
        raise InvalidChildRuleError(
            f"Child rule for {kind!r} must be callable, got {type(rule).__name__}"
        )
    try:
        signature = inspect.signature(rule)
    except (TypeError, ValueError):
        # Some builtins and C callables expose no signature
        return
    try:
        signature.bind(object())
    except TypeError as e:
        raise InvalidChildRuleError(
            f"Child rule for {kind!r} must accept exactly one positional "
            f"argument (the node): {rule!r}{signature}"
        ) from e


_default_registry: Optional[ChildRuleRegistry] = None


def default_registry() -> ChildRuleRegistry:
    """Return the process-wide registry, creating it on first use."""
    global _default_registry
    if _default_registry is None:
        _default_registry = ChildRuleRegistry()
    return _default_registry


def register_child_rule(kind: str, rule: ChildRule) -> None:
    """Register a rule in the process-wide registry.

    Affects every traversal created afterwards that uses the default
    registry. See ``ChildRuleRegistry.register``.
    """
    default_registry().register(kind, rule)
