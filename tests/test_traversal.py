"""Tests for the Traversal engine: ordering, lifecycle and robustness."""

import itertools

import pytest

from estreelib import (
    ChildRuleError,
    ChildRuleRegistry,
    EstreeNode,
    InvalidNodeError,
    Traversal,
    TraversalResult,
)


def n(kind, /, **fields):
    node = {"type": kind}
    node.update(fields)
    return node


def assert_same_nodes(actual, expected):
    assert len(actual) == len(expected), (
        f"Expected {len(expected)} nodes, got {len(actual)}"
    )
    for position, (got, want) in enumerate(zip(actual, expected)):
        assert got is want, f"Position {position}: expected {want!r}, got {got!r}"


class TestScenarios:
    """Reference scenarios for the pre-order contract."""

    def test_program_with_two_leaves(self):
        a, b = n("EmptyStatement"), n("EmptyStatement")
        program = n("Program", body=[a, b])

        assert_same_nodes(list(Traversal(program)), [program, a, b])

    def test_if_without_alternate(self, registry):
        test, consequent = n("Identifier", name="t"), n("EmptyStatement")
        node = n("IfStatement", test=test, consequent=consequent, alternate=None)

        assert_same_nodes(registry.children_of(node), [test, consequent])

    def test_array_with_hole(self, registry):
        e1, e2 = n("Literal", value=1), n("Literal", value=2)
        node = n("ArrayExpression", elements=[e1, None, e2])

        assert_same_nodes(registry.children_of(node), [e1, e2])

    def test_nested_blocks(self):
        test = n("Identifier", name="t")
        inner = n("BlockStatement", body=[])
        if_stmt = n("IfStatement", test=test, consequent=inner, alternate=None)
        outer = n("BlockStatement", body=[if_stmt])

        assert_same_nodes(list(Traversal(outer)), [outer, if_stmt, test, inner])


class TestLifecycle:
    """The step() state machine and the iterator protocol."""

    def test_single_node(self):
        program = n("Program", body=[])
        walk = Traversal(program)

        assert walk.step() == TraversalResult(program, False)
        assert walk.step() == TraversalResult(None, True)

    def test_done_is_permanent(self):
        walk = Traversal(n("Program", body=[n("EmptyStatement")]))
        list(walk)

        for _ in range(5):
            result = walk.step()
            assert result.done
            assert result.value is None
        assert walk.is_done

    def test_done_reported_on_call_after_last_node(self):
        leaf = n("EmptyStatement")
        walk = Traversal(n("Program", body=[leaf]))

        walk.step()
        last = walk.step()
        assert last.value is leaf and not last.done
        assert walk.is_done
        assert walk.step().done

    def test_iterator_protocol(self):
        program = n("Program", body=[n("EmptyStatement")])
        walk = Traversal(program)

        assert iter(walk) is walk
        assert next(walk) is program
        next(walk)
        with pytest.raises(StopIteration):
            next(walk)
        with pytest.raises(StopIteration):
            next(walk)

    def test_not_restartable(self):
        walk = Traversal(n("Program", body=[n("EmptyStatement")]))

        assert len(list(walk)) == 2
        assert list(walk) == []

    def test_lazy_consumption(self):
        statements = [n("EmptyStatement") for _ in range(10)]
        walk = Traversal(n("Program", body=statements))

        first_three = list(itertools.islice(walk, 3))

        assert len(first_three) == 3
        assert first_three[1] is statements[0]
        assert walk.pending == 8

    def test_pending_tracks_fringe(self):
        program = n("Program", body=[n("EmptyStatement"), n("EmptyStatement")])
        walk = Traversal(program)

        assert walk.pending == 1
        walk.step()
        assert walk.pending == 2

    def test_independent_traversals_of_same_tree(self):
        program = n("Program", body=[n("EmptyStatement")])
        first = Traversal(program)
        second = Traversal(program)

        next(first)
        assert_same_nodes(list(second), [program, program["body"][0]])
        assert_same_nodes(list(first), [program["body"][0]])

    def test_repr(self):
        walk = Traversal(n("Program", body=[]))
        assert "pending=1" in repr(walk)
        list(walk)
        assert "done" in repr(walk)


class TestWholeTree:
    """Global properties over a realistic tree."""

    def build_tree(self):
        # function add(a, b = 1) { return a + b; }
        # const xs = [1, , add(2)];
        add_id = n("Identifier", name="add")
        a, b = n("Identifier", name="a"), n("Identifier", name="b")
        default_b = n("AssignmentPattern", left=b, right=n("Literal", value=1))
        sum_expr = n("BinaryExpression", operator="+",
                     left=n("Identifier", name="a"), right=n("Identifier", name="b"))
        body = n("BlockStatement", body=[n("ReturnStatement", argument=sum_expr)])
        func = n("FunctionDeclaration", id=add_id, params=[a, default_b], body=body)

        call = n("CallExpression", callee=n("Identifier", name="add"),
                 arguments=[n("Literal", value=2)])
        array = n("ArrayExpression", elements=[n("Literal", value=1), None, call])
        declarator = n("VariableDeclarator", id=n("Identifier", name="xs"), init=array)
        declaration = n("VariableDeclaration", declarations=[declarator], kind="const")

        return n("Program", body=[func, declaration], sourceType="module")

    def test_each_node_visited_once(self):
        nodes = list(Traversal(self.build_tree()))
        ids = [id(node) for node in nodes]

        assert len(ids) == len(set(ids))
        assert len(nodes) == 20

    def test_parents_precede_descendants(self, registry):
        nodes = list(Traversal(self.build_tree()))
        position = {id(node): i for i, node in enumerate(nodes)}

        for node in nodes:
            for child in registry.children_of(node):
                assert position[id(node)] < position[id(child)]

    def test_siblings_in_rule_order(self, registry):
        nodes = list(Traversal(self.build_tree()))
        position = {id(node): i for i, node in enumerate(nodes)}

        for node in nodes:
            child_positions = [position[id(c)] for c in registry.children_of(node)]
            assert child_positions == sorted(child_positions)

    def test_kind_sequence(self, registry):
        kinds = [registry.kind_of(node) for node in Traversal(self.build_tree())]

        assert kinds == [
            "Program",
            "FunctionDeclaration", "Identifier", "Identifier",
            "AssignmentPattern", "Identifier", "Literal",
            "BlockStatement", "ReturnStatement", "BinaryExpression",
            "Identifier", "Identifier",
            "VariableDeclaration", "VariableDeclarator", "Identifier",
            "ArrayExpression", "Literal", "CallExpression", "Identifier", "Literal",
        ]

    def test_attribute_nodes(self):
        tree = EstreeNode.from_dict(self.build_tree())
        nodes = list(Traversal(tree))

        assert nodes[0] is tree
        assert all(isinstance(node, EstreeNode) for node in nodes)
        assert len(nodes) == 20


class TestUnknownKinds:
    """Kinds without a rule are produced once, as leaves."""

    def test_unknown_root(self):
        root = n("JSXElement", children=[n("JSXText", value="hi")])

        assert_same_nodes(list(Traversal(root)), [root])

    def test_unknown_kind_inside_known_tree(self):
        unknown = n("JSXElement", openingElement=n("JSXOpeningElement"))
        after = n("EmptyStatement")
        program = n("Program", body=[n("ExpressionStatement", expression=unknown), after])

        nodes = list(Traversal(program))

        assert_same_nodes(nodes, [program, program["body"][0], unknown, after])

    def test_non_node_child_values_are_leaves(self, registry):
        # A rule that returns something without a kind tag does not break the walk
        registry.register("Wrapper", lambda node: [node["payload"]])
        root = n("Wrapper", payload="not a node")

        assert list(Traversal(root, registry)) == [root, "not a node"]


class TestInvalidRoot:

    @pytest.mark.parametrize("value", [None, 42, "Program", [], {}, {"type": ""},
                                       {"type": 3}, object()])
    def test_non_node_root_rejected(self, value):
        with pytest.raises(InvalidNodeError):
            Traversal(value)

    def test_invalid_node_error_is_type_error(self):
        with pytest.raises(TypeError):
            Traversal({"kind": "Program"})

    def test_custom_kind_field(self):
        registry = ChildRuleRegistry(rules={}, kind_field="kind")
        root = {"kind": "Root"}

        assert list(Traversal(root, registry)) == [root]
        with pytest.raises(InvalidNodeError):
            Traversal({"type": "Program"}, registry)


class TestPrune:

    def test_pruned_node_produced_without_children(self):
        inner = n("BlockStatement", body=[n("EmptyStatement")])
        func = n("FunctionDeclaration", id=n("Identifier", name="f"), params=[], body=inner)
        after = n("EmptyStatement")
        program = n("Program", body=[func, after])

        walk = Traversal(program, prune=lambda node: node["type"] == "FunctionDeclaration")

        assert_same_nodes(list(walk), [program, func, after])

    def test_prune_root(self):
        program = n("Program", body=[n("EmptyStatement")])

        assert_same_nodes(list(Traversal(program, prune=lambda node: True)), [program])


class TestRuleFailures:

    def failing_registry(self):
        registry = ChildRuleRegistry()

        def broken(node):
            raise KeyError("missing")

        registry.register("Broken", broken)
        return registry

    def test_rule_error_wraps_cause(self):
        walk = Traversal(n("Broken"), self.failing_registry())

        with pytest.raises(ChildRuleError) as excinfo:
            walk.step()

        assert excinfo.value.kind == "Broken"
        assert isinstance(excinfo.value.__cause__, KeyError)

    def test_traversal_continues_after_rule_error(self):
        broken = n("Broken", child=n("EmptyStatement"))
        after = n("EmptyStatement")
        program = n("Program", body=[broken, after])
        walk = Traversal(program, self.failing_registry())

        assert walk.step().value is program
        with pytest.raises(ChildRuleError) as excinfo:
            walk.step()
        assert excinfo.value.node is broken
        assert walk.step().value is after
        assert walk.step().done

    def test_failing_prune_reported_like_rule_error(self):
        def prune(node):
            if node["type"] == "IfStatement":
                raise AttributeError("no depth")
            return False

        branch = n("IfStatement", test=n("Literal"), consequent=n("EmptyStatement"))
        after = n("EmptyStatement")
        program = n("Program", body=[branch, after])
        walk = Traversal(program, prune=prune)

        assert walk.step().value is program
        with pytest.raises(ChildRuleError) as excinfo:
            walk.step()

        assert excinfo.value.node is branch
        assert isinstance(excinfo.value.__cause__, AttributeError)
        assert walk.step().value is after
        assert walk.step().done


class TestDeepTrees:
    """The engine must not recurse, whatever the tree depth."""

    def chain(self, depth):
        node = n("Identifier", name="x")
        leaf = node
        for _ in range(depth):
            node = n("UnaryExpression", operator="!", argument=node)
        return node, leaf

    def test_deep_chain(self):
        root, leaf = self.chain(50_000)
        count = 0
        last = None
        for node in Traversal(root):
            count += 1
            last = node

        assert count == 50_001
        assert last is leaf

    def test_deep_nesting_of_blocks(self):
        root = n("BlockStatement", body=[])
        current = root
        for _ in range(20_000):
            nested = n("BlockStatement", body=[])
            current["body"].append(nested)
            current["body"].append(n("EmptyStatement"))
            current = nested

        nodes = list(Traversal(root))

        assert len(nodes) == 40_001
        assert nodes[-1]["type"] == "EmptyStatement"

    @pytest.mark.slow
    def test_wide_and_deep(self):
        root = n("Program", body=[])
        for _ in range(200):
            node = n("Literal", value=0)
            for _ in range(2_000):
                node = n("ExpressionStatement", expression=node)
            root["body"].append(node)

        walk = Traversal(root)
        count = sum(1 for _ in walk)

        assert count == 1 + 200 * 2_001
        assert walk.is_done
