"""
vmbind Markup Parser
====================

Builds a `vmbind.dom` tree from HTML markup using the standard library
`html.parser.HTMLParser`.

The parser is forgiving, the way browsers are:

- Void elements (`<input>`, `<br>`, ...) never take children
- An end tag closes the nearest open element with the same name, along
  with anything still open inside it
- End tags without a matching open element are ignored
- Elements left open at the end of input are closed implicitly

Attribute names are lower-cased by `HTMLParser`; attributes written
without a value (`<input disabled>`) get an empty string. Character
references in text and attribute values are decoded.

Example:
    fragment = parse_html('<p class="lead">Hi {{ name }}</p><!-- note -->')
    print([node.node_name for node in fragment.child_nodes])  # ['P', '#comment']
"""

from __future__ import annotations

from html.parser import HTMLParser
from typing import List, Optional, Tuple

from vmbind.dom.nodes import (
    VOID_ELEMENTS,
    Document,
    DocumentFragment,
    Element,
    Node,
)


class MarkupParser(HTMLParser):
    """
    Tree builder on top of `HTMLParser`.

    Example:
        parser = MarkupParser()
        parser.feed("<ul><li>One</li><li>Two</li></ul>")
        fragment = parser.finish()
    """

    def __init__(self, document: Optional[Document] = None) -> None:
        super().__init__(convert_charrefs=True)
        self.document = document or Document()
        self.fragment = self.document.create_document_fragment()
        self._stack: List[Node] = [self.fragment]

    @property
    def _current(self) -> Node:
        return self._stack[-1]

    def handle_starttag(self, tag: str, attrs: List[Tuple[str, Optional[str]]]) -> None:
        element = self.document.create_element(tag)
        for name, value in attrs:
            element.set_attribute(name, "" if value is None else value)

        self._current.append_child(element)

        if tag not in VOID_ELEMENTS:
            self._stack.append(element)

    def handle_startendtag(self, tag: str, attrs: List[Tuple[str, Optional[str]]]) -> None:
        # <div/> is treated as an empty element, not as an open one
        self.handle_starttag(tag, attrs)
        if tag not in VOID_ELEMENTS:
            self._stack.pop()

    def handle_endtag(self, tag: str) -> None:
        if tag in VOID_ELEMENTS:
            return

        for depth in range(len(self._stack) - 1, 0, -1):
            node = self._stack[depth]
            if isinstance(node, Element) and node.tag_name == tag:
                del self._stack[depth:]
                return

    def handle_data(self, data: str) -> None:
        if data:
            self._current.append_child(self.document.create_text_node(data))

    def handle_comment(self, data: str) -> None:
        self._current.append_child(self.document.create_comment(data))

    def finish(self) -> DocumentFragment:
        """Flush buffered input and return the built fragment."""
        self.close()
        self._stack = [self.fragment]
        return self.fragment


def parse_html(markup: str, document: Optional[Document] = None) -> DocumentFragment:
    """
    Parse markup into a document fragment.

    Args:
        markup: HTML source
        document: Document used as node factory

    Returns:
        Fragment holding the parsed top-level nodes
    """
    parser = MarkupParser(document)
    parser.feed(markup)
    return parser.finish()
