"""Child rules for the ESTree node catalogue.

A child rule maps one node to its immediate children as an ordered sequence
of slots. A slot is either a child node or None; the traversal discards None
slots, so optional fields and array holes need no special handling here.
Fields are read tolerantly: a missing field is an empty slot (or an empty
list), never an error.

The table at the bottom is the single source of truth for emission order.
"""

from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, Union

from .node import get_field, get_list

Slot = Optional[Any]
ChildRule = Callable[[Any], Iterable[Slot]]


class many:
    """Marks a list-valued field whose elements are emitted in order."""

    __slots__ = ("name",)

    def __init__(self, name: str):
        self.name = name

    def __repr__(self) -> str:
        return f"many({self.name!r})"


FieldSpec = Union[str, many]


def fields(*specs: FieldSpec) -> ChildRule:
    """Build a child rule that emits the given fields left to right.

    A plain string names a single-child field; ``many(name)`` names a list
    field whose elements are emitted in list order.

    Example:
        >>> rule = fields("id", many("params"), "body")
        >>> body = {"type": "BlockStatement", "body": []}
        >>> rule({"type": "FunctionExpression", "id": None, "params": [], "body": body})
        [None, {'type': 'BlockStatement', 'body': []}]
    """
    plan: Tuple[Tuple[bool, str], ...] = tuple(
        (True, spec.name) if isinstance(spec, many) else (False, spec)
        for spec in specs
    )

    def rule(node: Any) -> List[Slot]:
        slots: List[Slot] = []
        for is_list, name in plan:
            if is_list:
                slots.extend(get_list(node, name))
            else:
                slots.append(get_field(node, name))
        return slots

    rule.field_specs = specs
    rule.__qualname__ = rule.__name__ = "fields(" + ", ".join(
        repr(spec) for spec in specs
    ) + ")"
    return rule


_body = fields(many("body"))
_function = fields("id", many("params"), "body")
_argument = fields("argument")
_label = fields("label")
_test_branches = fields("test", "consequent", "alternate")
_for_each = fields("left", "right", "body")
_elements = fields(many("elements"))
_key_value = fields("key", "value")
_properties = fields(many("properties"))
_left_right = fields("left", "right")
_class = fields("id", "superClass", "body")
_local = fields("local")


DEFAULT_RULES: Dict[str, ChildRule] = {
    # Program and blocks
    "Program": _body,
    "BlockStatement": _body,
    "ClassBody": _body,
    # Functions
    "FunctionDeclaration": _function,
    "FunctionExpression": _function,
    "ArrowFunctionExpression": _function,
    # Statements
    "ExpressionStatement": fields("expression"),
    "WithStatement": fields("object", "body"),
    "ReturnStatement": _argument,
    "ThrowStatement": _argument,
    "LabeledStatement": fields("label", "body"),
    "BreakStatement": _label,
    "ContinueStatement": _label,
    "IfStatement": _test_branches,
    "SwitchStatement": fields("discriminant", many("cases")),
    "SwitchCase": fields("test", many("consequent")),
    "TryStatement": fields("block", "handler", "finalizer"),
    "CatchClause": fields("param", "body"),
    "WhileStatement": fields("test", "body"),
    "DoWhileStatement": fields("body", "test"),
    "ForStatement": fields("init", "test", "update", "body"),
    "ForInStatement": _for_each,
    "ForOfStatement": _for_each,
    # Declarations
    "VariableDeclaration": fields(many("declarations")),
    "VariableDeclarator": fields("id", "init"),
    "ClassDeclaration": _class,
    # Expressions
    "UnaryExpression": _argument,
    "UpdateExpression": _argument,
    "SpreadElement": _argument,
    "YieldExpression": _argument,
    "AwaitExpression": _argument,
    "ArrayExpression": _elements,
    "ObjectExpression": _properties,
    "Property": _key_value,
    "MethodDefinition": _key_value,
    "BinaryExpression": _left_right,
    "AssignmentExpression": _left_right,
    "LogicalExpression": _left_right,
    "MemberExpression": fields("object", "property"),
    "ConditionalExpression": _test_branches,
    "CallExpression": fields("callee", many("arguments")),
    "SequenceExpression": fields(many("expressions")),
    "TemplateLiteral": fields(many("quasis"), many("expressions")),
    "ClassExpression": _class,
    "MetaProperty": fields("meta", "property"),
    # Patterns
    "ArrayPattern": _elements,
    "ObjectPattern": _properties,
    "AssignmentProperty": _key_value,
    "RestElement": _argument,
    "AssignmentPattern": _left_right,
    # Modules
    "ImportDeclaration": fields(many("specifiers"), "source"),
    "ImportSpecifier": _local,
    "ImportDefaultSpecifier": _local,
    "ImportNamespaceSpecifier": _local,
    "ExportNamedDeclaration": fields("declaration", many("specifiers"), "source"),
    "ExportSpecifier": fields("exported"),
    "ExportDefaultDeclaration": fields("declaration"),
    "ExportAllDeclaration": fields("source"),
}
