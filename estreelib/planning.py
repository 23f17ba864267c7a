"""Execution planning for estreelib.

The ExecutionPlan validates a TraversalConfig against the registry it will
run with and coordinates the actual walk: filtering, limits, error policy and
progress reporting all live here so the traversal engine stays minimal.
"""

import logging
from typing import Any, Dict, Iterator, List, Optional, Tuple

from .config import ErrorPolicy, TraversalConfig
from .core.registry import ChildRuleRegistry, default_registry
from .core.traverser import Traversal, TraversalResult
from .errors import ChildRuleError, ConfigurationError

logger = logging.getLogger(__name__)


class ExecutionPlan:
    """Validated execution plan for an AST traversal.

    The plan is the bridge between caller intent (TraversalConfig) and the
    traversal engine. Configuration problems are reported when the plan is
    built, before any node is visited.
    """

    def __init__(self,
                 config: Optional[TraversalConfig] = None,
                 registry: Optional[ChildRuleRegistry] = None):
        """Create and validate an execution plan.

        Args:
            config: Traversal configuration (default: plain full walk)
            registry: Child rules to navigate with (default: process-wide)

        Raises:
            ConfigurationError: If the configuration is invalid
        """
        self.config = config if config is not None else TraversalConfig()
        self.registry = registry if registry is not None else default_registry()

        config_errors = self.config.validate()
        if config_errors:
            raise ConfigurationError(
                f"Invalid configuration: {'; '.join(config_errors)}"
            )

        # Track execution state
        self.nodes_processed = 0
        self.errors_encountered: List[Tuple[Optional[str], str]] = []

    def execute(self, root: Any) -> Iterator[Any]:
        """Execute the traversal plan.

        The root is checked immediately; the walk itself is lazy.

        Args:
            root: Root node to start traversal from

        Returns:
            Iterator over the nodes that pass the configured filters, in
            pre-order

        Raises:
            InvalidNodeError: If ``root`` is not a node
        """
        node_filter = self.config.filter
        traversal = Traversal(
            root,
            self.registry,
            prune=node_filter.should_prune if node_filter.prune_filter else None,
        )

        # Reset execution state
        self.nodes_processed = 0
        self.errors_encountered = []

        return self._run(traversal)

    def _run(self, traversal: Traversal) -> Iterator[Any]:
        node_filter = self.config.filter
        limits = self.config.limits

        while True:
            if not limits.check_node_limit(self.nodes_processed):
                if not traversal.is_done:
                    logger.info(
                        "Traversal stopped after %d nodes (max_nodes reached)",
                        self.nodes_processed,
                    )
                return

            try:
                result = traversal.step()
            except ChildRuleError as e:
                self._handle_error(e)
                if self.config.error_policy is ErrorPolicy.RAISE:
                    raise
                logger.warning("Skipping children after rule failure: %s", e)
                result = TraversalResult(e.node, False)

            if result.done:
                return

            node = result.value
            if not node_filter.should_include(node, self.registry.kind_of(node)):
                continue

            self.nodes_processed += 1
            self._report_progress()
            yield node

    def _handle_error(self, error: ChildRuleError) -> None:
        """Record a rule failure and notify the caller's error handler."""
        self.errors_encountered.append((error.kind, str(error)))

        if self.config.on_error:
            self.config.on_error(error.node, error)

    def _report_progress(self) -> None:
        """Report progress if callback configured."""
        if self.config.progress_callback:
            if self.nodes_processed % self.config.progress_interval == 0:
                self.config.progress_callback(self.nodes_processed)

    def get_summary(self) -> Dict[str, Any]:
        """Get summary of execution plan.

        Useful for debugging and logging.

        Returns:
            Dictionary with plan details
        """
        node_filter = self.config.filter
        return {
            'registry_kinds': len(self.registry),
            'kind_field': self.registry.kind_field,
            'kinds': sorted(node_filter.kinds) if node_filter.kinds is not None else None,
            'has_include_filter': node_filter.include_filter is not None,
            'has_exclude_filter': node_filter.exclude_filter is not None,
            'has_prune_filter': node_filter.prune_filter is not None,
            'max_nodes': self.config.limits.max_nodes,
            'error_policy': self.config.error_policy.value,
            'nodes_processed': self.nodes_processed,
            'errors_encountered': len(self.errors_encountered),
        }
