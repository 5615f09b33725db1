"""
document.py — KDL document tree
===============================

Immutable tree produced by :func:`kdlcore.parse_document`::

    KdlDocument
      └── KdlNode            name, ty, values, properties, children
            └── KdlValue     kind, value, ty

All classes are frozen dataclasses; equality is structural.  ``str()`` on any
of them renders KDL text through :mod:`kdlcore.formatter`.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple, Union

Scalar = Union[str, int, float, bool, None]


class ValueKind(enum.Enum):
    """Variant tag of a :class:`KdlValue`."""
    STRING = "String"
    INT = "Int"
    FLOAT = "Float"
    BOOLEAN = "Boolean"
    NULL = "Null"

    def __str__(self) -> str:
        return self.value


_PYTHON_TYPES: Mapping[ValueKind, Tuple[type, ...]] = MappingProxyType({
    ValueKind.STRING: (str,),
    ValueKind.INT: (int,),
    ValueKind.FLOAT: (float,),
    ValueKind.BOOLEAN: (bool,),
    ValueKind.NULL: (type(None),),
})


# ─────────────────────────────────────────────────────────────
# Values
# ─────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class KdlValue:
    """A typed literal: a node argument or a property value."""
    kind: ValueKind
    value: Scalar
    ty: Optional[str] = None

    def __post_init__(self) -> None:
        expected = _PYTHON_TYPES[self.kind]
        # bool is a subclass of int; keep the two variants apart.
        if type(self.value) not in expected:
            raise ValueError(
                f"KdlValue::{self.kind} cannot hold {type(self.value).__name__}"
            )

    @classmethod
    def string(cls, value: str, ty: Optional[str] = None) -> "KdlValue":
        return cls(ValueKind.STRING, value, ty)

    @classmethod
    def integer(cls, value: int, ty: Optional[str] = None) -> "KdlValue":
        return cls(ValueKind.INT, value, ty)

    @classmethod
    def float_(cls, value: float, ty: Optional[str] = None) -> "KdlValue":
        return cls(ValueKind.FLOAT, value, ty)

    @classmethod
    def boolean(cls, value: bool, ty: Optional[str] = None) -> "KdlValue":
        return cls(ValueKind.BOOLEAN, value, ty)

    @classmethod
    def null(cls, ty: Optional[str] = None) -> "KdlValue":
        return cls(ValueKind.NULL, None, ty)

    def with_type(self, ty: Optional[str]) -> "KdlValue":
        return KdlValue(self.kind, self.value, ty)

    def to_dict(self) -> Any:
        if self.ty is None:
            return self.value
        return {"type": self.ty, "value": self.value}

    def __str__(self) -> str:
        from .formatter import format_value
        return format_value(self)


# ─────────────────────────────────────────────────────────────
# Nodes
# ─────────────────────────────────────────────────────────────

def _freeze_properties(props: Mapping[str, KdlValue]) -> Mapping[str, KdlValue]:
    if isinstance(props, MappingProxyType):
        return props
    return MappingProxyType(dict(props))


@dataclass(frozen=True)
class KdlNode:
    """A named unit with positional values, properties and optional children."""
    name: str
    values: Tuple[KdlValue, ...] = ()
    properties: Mapping[str, KdlValue] = field(
        default_factory=lambda: MappingProxyType({}))
    children: Optional[Tuple["KdlNode", ...]] = None
    ty: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", tuple(self.values))
        object.__setattr__(self, "properties", _freeze_properties(self.properties))
        if self.children is not None:
            object.__setattr__(self, "children", tuple(self.children))

    def __hash__(self) -> int:
        # mappingproxy is unhashable, and equality ignores property order.
        return hash((self.name, self.values, frozenset(self.properties.items()),
                     self.children, self.ty))

    def get(self, key: str) -> Optional[KdlValue]:
        """Property lookup; ``None`` when the node has no such property."""
        return self.properties.get(key)

    def __getitem__(self, index: int) -> KdlValue:
        return self.values[index]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "type": self.ty,
            "values": [v.to_dict() for v in self.values],
            "properties": {k: v.to_dict() for k, v in self.properties.items()},
            "children": (None if self.children is None
                         else [c.to_dict() for c in self.children]),
        }

    def __str__(self) -> str:
        from .formatter import format_node
        return format_node(self)


# ─────────────────────────────────────────────────────────────
# Documents
# ─────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class KdlDocument:
    """Ordered sequence of top-level nodes."""
    nodes: Tuple[KdlNode, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "nodes", tuple(self.nodes))

    def get(self, name: str) -> Optional[KdlNode]:
        """First top-level node called *name*, if any."""
        for node in self.nodes:
            if node.name == name:
                return node
        return None

    def __iter__(self) -> Iterator[KdlNode]:
        return iter(self.nodes)

    def __len__(self) -> int:
        return len(self.nodes)

    def to_dict(self) -> List[Dict[str, Any]]:
        return [node.to_dict() for node in self.nodes]

    def __str__(self) -> str:
        from .formatter import format_document
        return format_document(self)
