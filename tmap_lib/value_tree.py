# --- tmap_lib/value_tree.py ---
"""
tmap_lib/value_tree.py: A minimal document model for the builder's output.

Nodes are one of String, Number, Object or Array. Trees are built bottom-up and
flattened once by `serialize`, which always emits Object keys in sorted order so
that the same map produces byte-identical output.
"""
import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Union

from .errors import DuplicateKey


class _Node:
    """Common base so a node can only be attached to one parent."""

    _attached = False

    def _attach(self):
        if self._attached:
            raise ValueError(f"{type(self).__name__} node is already part of a tree")
        self._attached = True


@dataclass(eq=True)
class String(_Node):
    value: str

    def __post_init__(self):
        if not isinstance(self.value, str):
            raise TypeError(f"String node requires str, got {type(self.value).__name__}")


@dataclass(eq=True)
class Number(_Node):
    value: Union[int, float]

    def __post_init__(self):
        if isinstance(self.value, bool) or not isinstance(self.value, (int, float)):
            raise TypeError(f"Number node requires int or float, got {self.value!r}")


@dataclass(eq=True)
class Object(_Node):
    members: Dict[str, "Node"] = field(default_factory=dict)

    def add(self, key: str, node: "Node") -> "Object":
        """Adds a member. Keys are unique; re-adding one raises DuplicateKey."""
        if key in self.members:
            raise DuplicateKey(key)
        node._attach()
        self.members[key] = node
        return self


@dataclass(eq=True)
class Array(_Node):
    items: List["Node"] = field(default_factory=list)

    def append(self, node: "Node") -> "Array":
        node._attach()
        self.items.append(node)
        return self


Node = Union[String, Number, Object, Array]


def _render_number(value: Union[int, float]) -> str:
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return repr(value)
    return str(value)


def serialize(node: Node) -> str:
    """Renders a tree as compact JSON text with sorted object keys."""
    if isinstance(node, String):
        return json.dumps(node.value)
    if isinstance(node, Number):
        return _render_number(node.value)
    if isinstance(node, Object):
        parts = [
            f"{json.dumps(key)}:{serialize(node.members[key])}"
            for key in sorted(node.members)
        ]
        return "{" + ",".join(parts) + "}"
    if isinstance(node, Array):
        return "[" + ",".join(serialize(item) for item in node.items) + "]"
    raise TypeError(f"Cannot serialize {type(node).__name__}")


def to_python(node: Node) -> Any:
    """Converts a tree into plain dicts, lists, strings and numbers."""
    if isinstance(node, (String, Number)):
        return node.value
    if isinstance(node, Object):
        return {key: to_python(value) for key, value in node.members.items()}
    if isinstance(node, Array):
        return [to_python(item) for item in node.items]
    raise TypeError(f"Cannot convert {type(node).__name__}")

