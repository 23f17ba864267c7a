#!/usr/bin/env python3
"""
Traversal throughput benchmark for estreelib.

Compares the rule-driven Traversal against a naive recursive walker that
inspects every field of every dict. This benchmark:
1. Runs multiple iterations and reports the median
2. Collects garbage before each run
3. Uses wide, deep and realistic-shaped synthetic trees
"""

import gc
import statistics
import sys
import time
from pathlib import Path
from typing import Callable, Dict

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from estreelib import ChildRuleRegistry, Traversal, count_nodes


def wide_tree(statements: int = 20_000) -> dict:
    """A Program with many small call statements."""
    body = []
    for i in range(statements):
        body.append({
            "type": "ExpressionStatement",
            "expression": {
                "type": "CallExpression",
                "callee": {"type": "Identifier", "name": f"f{i}"},
                "arguments": [{"type": "Literal", "value": i}],
            },
        })
    return {"type": "Program", "body": body}


def deep_tree(depth: int = 50_000) -> dict:
    """A single chain of nested unary expressions."""
    node = {"type": "Identifier", "name": "x"}
    for _ in range(depth):
        node = {"type": "UnaryExpression", "operator": "!", "argument": node}
    return {"type": "Program", "body": [{"type": "ExpressionStatement", "expression": node}]}


def naive_walk(node) -> int:
    """Recursive walk over every dict value; fails on deep trees."""
    count = 1
    for value in node.values():
        if isinstance(value, dict) and "type" in value:
            count += naive_walk(value)
        elif isinstance(value, list):
            for item in value:
                if isinstance(item, dict) and "type" in item:
                    count += naive_walk(item)
    return count


class TraversalBenchmark:
    """Times one walker over one tree."""

    def __init__(self, iterations: int = 5):
        self.iterations = iterations
        self.registry = ChildRuleRegistry()

    def measure(self, walker: Callable[[dict], int], tree: dict) -> Dict[str, float]:
        times = []
        count = 0
        for _ in range(self.iterations):
            gc.collect()
            start = time.perf_counter()
            count = walker(tree)
            times.append(time.perf_counter() - start)
        median = statistics.median(times)
        return {
            'nodes': count,
            'median': median,
            'nodes_per_sec': count / median if median else 0.0,
        }

    def traversal(self, tree: dict) -> int:
        return sum(1 for _ in Traversal(tree, self.registry))

    def api(self, tree: dict) -> int:
        return count_nodes(tree, registry=self.registry)

    def run(self):
        trees = {
            'wide (20k statements)': wide_tree(),
            'deep (50k nesting)': deep_tree(),
        }
        walkers = {
            'Traversal': self.traversal,
            'count_nodes': self.api,
            'naive recursive': naive_walk,
        }

        print("=" * 70)
        print("ESTREELIB TRAVERSAL BENCHMARK")
        print("=" * 70)

        for tree_name, tree in trees.items():
            print(f"\n{tree_name}")
            print("-" * 70)
            for walker_name, walker in walkers.items():
                try:
                    result = self.measure(walker, tree)
                except RecursionError:
                    print(f"  {walker_name:<18} RecursionError")
                    continue
                print(f"  {walker_name:<18} {result['nodes']:>8} nodes  "
                      f"{result['median'] * 1000:>9.2f} ms  "
                      f"{result['nodes_per_sec']:>12,.0f} nodes/s")


def main():
    iterations = int(sys.argv[1]) if len(sys.argv) > 1 else 5
    TraversalBenchmark(iterations).run()


if __name__ == "__main__":
    main()
