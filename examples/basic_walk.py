#!/usr/bin/env python3
"""
Basic estreelib usage.

This example demonstrates:
- Walking an ESTree JSON dump in pre-order
- Querying nodes by kind
- Teaching the library about a node kind it does not know (JSX)

Usage:
    python examples/basic_walk.py [ast.json]

Without an argument, a small built-in AST is used. Any ESTree JSON dump works,
e.g. the output of ``acorn --ecma2020 file.js`` or ``esprima.parseScript(...)``.
"""

import json
import sys
from pathlib import Path

# Add parent directory to path for development
sys.path.insert(0, str(Path(__file__).parent.parent))

from estreelib import (
    ChildRuleRegistry,
    Traversal,
    fields,
    find_by_kind,
    get_tree_stats,
    many,
)

# const greet = (name) => <b>{`hi ${name}`}</b>;
SAMPLE = {
    "type": "Program",
    "sourceType": "module",
    "body": [{
        "type": "VariableDeclaration",
        "kind": "const",
        "declarations": [{
            "type": "VariableDeclarator",
            "id": {"type": "Identifier", "name": "greet"},
            "init": {
                "type": "ArrowFunctionExpression",
                "id": None,
                "params": [{"type": "Identifier", "name": "name"}],
                "body": {
                    "type": "JSXElement",
                    "openingElement": {"type": "JSXOpeningElement",
                                       "name": {"type": "JSXIdentifier", "name": "b"}},
                    "children": [{
                        "type": "JSXExpressionContainer",
                        "expression": {
                            "type": "TemplateLiteral",
                            "quasis": [
                                {"type": "TemplateElement", "value": {"raw": "hi "}},
                                {"type": "TemplateElement", "value": {"raw": ""}},
                            ],
                            "expressions": [{"type": "Identifier", "name": "name"}],
                        },
                    }],
                    "closingElement": {"type": "JSXClosingElement",
                                       "name": {"type": "JSXIdentifier", "name": "b"}},
                },
            },
        }],
    }],
}


def print_tree(root, registry=None):
    """Print every node, indented by its depth."""
    walk = Traversal(root, registry)
    registry = walk.registry
    depth = {id(root): 0}
    for node in walk:
        level = depth[id(node)]
        for child in registry.children_of(node):
            depth[id(child)] = level + 1
        label = node.get("name") or ""
        print(f"{'  ' * level}{node['type']} {label}".rstrip())


def main():
    if len(sys.argv) > 1:
        root = json.loads(Path(sys.argv[1]).read_text())
    else:
        root = SAMPLE

    print("=== Default rules (JSX is opaque) ===")
    print_tree(root)

    jsx = ChildRuleRegistry()
    jsx.register("JSXElement", fields("openingElement", many("children"), "closingElement"))
    jsx.register("JSXExpressionContainer", fields("expression"))

    print("\n=== With JSX rules ===")
    print_tree(root, jsx)

    names = [node["name"] for node in find_by_kind(root, "Identifier", registry=jsx)]
    print(f"\nIdentifiers: {names}")

    stats = get_tree_stats(root, registry=jsx)
    print(f"Total nodes: {stats['total_nodes']}  leaves: {stats['leaf_nodes']}")
    print(f"Kinds without rules: {', '.join(stats['unknown_kinds'])}")


if __name__ == "__main__":
    main()
