"""
vmbind Node Records
===================

The compiled description of a markup subtree.

A record is one of three variants, told apart by `kind`:

- `ElementRecord`: tag name, attributes sorted into props, directives and
  events, and child records
- `TextRecord`: original text and the property names its markers use
- `CommentRecord`: comment text; never rendered

Records are built once by the compiler and kept for the lifetime of the
view model. Their collections are read-only (tuples and mapping proxies).
The one attribute that changes afterwards is `rendered_node`, which points
at the live node most recently materialized for the record.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, ClassVar, Dict, Iterable, Iterator, Mapping, Optional, Tuple, Union

from vmbind.dom.nodes import Element, Text


class RecordKind(Enum):
    ELEMENT = "element"
    TEXT = "text"
    COMMENT = "comment"


def _frozen(mapping: Optional[Mapping[str, str]]) -> Mapping[str, str]:
    return MappingProxyType(dict(mapping or {}))


@dataclass(eq=False)
class ElementRecord:
    """Compiled element."""

    tag_name: str
    attributes: Mapping[str, str] = field(default_factory=dict)
    props: Mapping[str, str] = field(default_factory=dict)
    directives: Mapping[str, str] = field(default_factory=dict)
    events: Mapping[str, str] = field(default_factory=dict)
    children: Tuple["NodeRecord", ...] = ()
    rendered_node: Optional[Element] = field(default=None, repr=False)

    kind: ClassVar[RecordKind] = RecordKind.ELEMENT

    def __post_init__(self) -> None:
        self.attributes = _frozen(self.attributes)
        self.props = _frozen(self.props)
        self.directives = _frozen(self.directives)
        self.events = _frozen(self.events)
        self.children = tuple(self.children)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "tag_name": self.tag_name,
            "props": dict(self.props),
            "directives": dict(self.directives),
            "events": dict(self.events),
            "children": [child.to_dict() for child in self.children],
        }


@dataclass(eq=False)
class TextRecord:
    """Compiled text node."""

    raw_value: str
    interpolation_keys: Tuple[str, ...] = ()
    rendered_node: Optional[Text] = field(default=None, repr=False)

    kind: ClassVar[RecordKind] = RecordKind.TEXT
    children: ClassVar[Tuple[()]] = ()

    def __post_init__(self) -> None:
        self.interpolation_keys = tuple(self.interpolation_keys)

    def references(self, key: str) -> bool:
        return key in self.interpolation_keys

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "raw_value": self.raw_value,
            "interpolation_keys": list(self.interpolation_keys),
        }


@dataclass(eq=False)
class CommentRecord:
    """Compiled comment. Kept in the tree, skipped when rendering."""

    raw_value: str

    kind: ClassVar[RecordKind] = RecordKind.COMMENT
    children: ClassVar[Tuple[()]] = ()
    rendered_node: ClassVar[None] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind.value, "raw_value": self.raw_value}


NodeRecord = Union[ElementRecord, TextRecord, CommentRecord]


def walk(records: Iterable[NodeRecord]) -> Iterator[NodeRecord]:
    """Yield records depth-first, pre-order."""
    for record in records:
        yield record
        yield from walk(record.children)
