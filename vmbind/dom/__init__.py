"""
vmbind DOM Module
=================

In-memory document tree used as the host runtime of the binding engine.

Components:
- Nodes: Element, Text, Comment, DocumentFragment, Document, Event
- Parser: HTML markup to node tree
"""

from vmbind.dom.nodes import (
    INPUT_ELEMENTS,
    VOID_ELEMENTS,
    Comment,
    Document,
    DocumentFragment,
    Element,
    Event,
    Node,
    NodeType,
    Text,
)
from vmbind.dom.parser import MarkupParser, parse_html

__all__ = [
    "INPUT_ELEMENTS",
    "VOID_ELEMENTS",
    "Comment",
    "Document",
    "DocumentFragment",
    "Element",
    "Event",
    "Node",
    "NodeType",
    "Text",
    "MarkupParser",
    "parse_html",
]
