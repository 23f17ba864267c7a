"""Pre-order traversal engine for estreelib.

The engine walks a tree with a single explicit stack (the fringe) instead of
recursion, so arbitrarily deep trees cannot exhaust the call stack, and it
produces one node per call so callers can stop at any point.
"""

from typing import Any, Callable, List, NamedTuple, Optional

from ..errors import ChildRuleError, InvalidNodeError
from .registry import ChildRuleRegistry, default_registry


class TraversalResult(NamedTuple):
    """One step of a traversal: the produced node and the terminal flag."""
    value: Any
    done: bool


class Traversal:
    """Lazy pre-order, left-to-right, depth-first walk over an ESTree tree.

    Each ``step()`` pops the top of the fringe, pushes its present children
    in reverse order, and returns the popped node. Once the fringe is empty
    the traversal is done for good; construct a new one to walk again.

    The input must be a tree: a node reachable from two parents is produced
    once per parent, and a cycle never terminates. Neither is detected.

    Example:
        >>> walk = Traversal(program)
        >>> for node in walk:
        ...     print(node["type"])
    """

    def __init__(self,
                 root: Any,
                 registry: Optional[ChildRuleRegistry] = None,
                 *,
                 prune: Optional[Callable[[Any], bool]] = None):
        """Start a traversal at ``root``.

        Args:
            root: Root node
            registry: Child rules to navigate with (default: process-wide)
            prune: Optional predicate; when it returns True for a node, the
                node is still produced but its children are not visited

        Raises:
            InvalidNodeError: If ``root`` is not a node
        """
        self.registry = registry if registry is not None else default_registry()
        if self.registry.kind_of(root) is None:
            raise InvalidNodeError(root, self.registry.kind_field)
        self.prune = prune
        self._fringe: List[Any] = [root]

    @property
    def is_done(self) -> bool:
        """True once every node has been produced."""
        return not self._fringe

    @property
    def pending(self) -> int:
        """Number of nodes waiting on the fringe."""
        return len(self._fringe)

    def step(self) -> TraversalResult:
        """Produce the next node.

        Returns:
            ``TraversalResult(node, False)``, or ``TraversalResult(None, True)``
            once the traversal is done (and on every call after that)

        Raises:
            ChildRuleError: If the rule or the prune predicate raised for the
                popped node. Its children are skipped and the node itself is
                carried on the error as ``error.node``; the traversal can
                continue with the next call.
        """
        if not self._fringe:
            return TraversalResult(None, True)

        current = self._fringe.pop()
        try:
            if self.prune is not None and self.prune(current):
                slots = []
            else:
                slots = self.registry.slots_of(current)
        except Exception as e:
            raise ChildRuleError(current, self.registry.kind_of(current), str(e)) from e

        # Reverse order so the leftmost child is popped first
        fringe = self._fringe
        for child in reversed(slots):
            if child is not None:
                fringe.append(child)
        return TraversalResult(current, False)

    def __iter__(self) -> 'Traversal':
        return self

    def __next__(self) -> Any:
        result = self.step()
        if result.done:
            raise StopIteration
        return result.value

    def __repr__(self) -> str:
        state = "done" if self.is_done else f"pending={self.pending}"
        return f"Traversal({state})"
