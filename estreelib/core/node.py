"""Node access helpers for estreelib.

ESTree nodes reach us in two shapes: plain mappings (``json.load`` of a
parser dump) and attribute objects (parser node classes, or ``EstreeNode``).
Everything in the library reads nodes through the helpers here so both shapes
traverse identically. A missing field always reads as absent.
"""

from collections.abc import Mapping
from typing import Any, Dict, List, Optional

DEFAULT_KIND_FIELD = "type"


def get_field(node: Any, name: str, default: Any = None) -> Any:
    """Read a field from a mapping or attribute node.

    Args:
        node: Node to read from
        name: Field name (e.g. ``"body"``)
        default: Value returned when the field does not exist

    Returns:
        The field value, or ``default`` if the node has no such field
    """
    if isinstance(node, Mapping):
        return node.get(name, default)
    return getattr(node, name, default)


def get_list(node: Any, name: str) -> List[Any]:
    """Read a list-valued field, treating a missing or null field as empty."""
    value = get_field(node, name)
    if value is None:
        return []
    return list(value)


def node_kind(value: Any, kind_field: str = DEFAULT_KIND_FIELD) -> Optional[str]:
    """Return the kind tag of ``value``, or None if it is not a node."""
    if value is None:
        return None
    kind = get_field(value, kind_field)
    if isinstance(kind, str) and kind:
        return kind
    return None


def is_node(value: Any, kind_field: str = DEFAULT_KIND_FIELD) -> bool:
    """Check whether ``value`` carries a non-empty string kind tag."""
    return node_kind(value, kind_field) is not None


class EstreeNode:
    """Minimal attribute-style ESTree node.

    Fields are plain attributes; ``type`` holds the kind tag. Two nodes are
    only equal if they are the same object, so structurally identical leaves
    (two ``Identifier`` nodes, say) stay distinguishable in traversal output.
    """

    def __init__(self, type: str, **fields: Any):
        self.type = type
        for name, value in fields.items():
            setattr(self, name, value)

    def fields(self) -> Dict[str, Any]:
        """Return every field except the kind tag."""
        return {k: v for k, v in vars(self).items() if k != "type"}

    def __repr__(self) -> str:
        names = ", ".join(sorted(self.fields()))
        return f"EstreeNode({self.type!r}{', ' if names else ''}{names})"

    @classmethod
    def from_dict(cls, data: Any, kind_field: str = DEFAULT_KIND_FIELD) -> Any:
        """Convert a nested dict/list ESTree dump into ``EstreeNode`` objects.

        Mappings with a string kind tag become nodes; lists are converted
        element-wise; every other value (including mappings without a tag,
        such as ``loc`` blocks) is kept as-is. Conversion uses an explicit
        work list, so very deep dumps are safe.

        Args:
            data: Parsed JSON value
            kind_field: Name of the tag field

        Returns:
            The converted value
        """
        def convert(value: Any) -> Any:
            if isinstance(value, Mapping) and is_node(value, kind_field):
                node = cls(value[kind_field])
                pending.append((node, value))
                return node
            if isinstance(value, list):
                converted = []
                pending.append((converted, value))
                return converted
            return value

        pending: List[Any] = []
        result = convert(data)

        while pending:
            target, source = pending.pop()
            if isinstance(target, list):
                target.extend(convert(item) for item in source)
                continue
            for name, value in source.items():
                setattr(target, name, convert(value))

        return result
