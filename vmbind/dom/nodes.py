"""
vmbind DOM Nodes
================

A small in-memory document tree that plays the part of the browser DOM
for the binding engine.

Only what the engine and its users need is modelled:

- Elements with ordered attributes, a live `value` for form inputs and
  event listeners
- Text and comment nodes whose character data can be patched in place
- Document fragments, used to build a subtree off-tree and attach it in
  a single step
- A document acting as node factory and selector root

Example:
    doc = Document.from_html('<div id="app"><p>Hello {{ name }}</p></div>')
    app = doc.query_selector("#app")
    print(app.inner_html)  # <p>Hello {{ name }}</p>
"""

from __future__ import annotations

import re
from enum import IntEnum
from html import escape as html_escape
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple


class NodeType(IntEnum):
    """Node type numbers, matching the DOM constants."""
    ELEMENT = 1
    TEXT = 3
    COMMENT = 8
    DOCUMENT = 9
    DOCUMENT_FRAGMENT = 11


# Elements that never have children or an end tag
VOID_ELEMENTS = frozenset({
    "area", "base", "br", "col", "embed", "hr", "img", "input",
    "link", "meta", "param", "source", "track", "wbr",
})

# Elements carrying a user-editable value
INPUT_ELEMENTS = frozenset({"input", "textarea", "select"})

# Elements whose text content is serialized without escaping
RAW_TEXT_ELEMENTS = frozenset({"script", "style"})

_SELECTOR_PATTERN = re.compile(
    r"^(?P<tag>\*|[a-zA-Z][a-zA-Z0-9-]*)?(?P<rest>(?:[#.][a-zA-Z0-9_-]+)*)$"
)


class Event:
    """
    Event passed to listeners by `Element.dispatch_event`.

    Example:
        button.add_event_listener("click", lambda event: print(event.target))
        button.dispatch_event(Event("click", bubbles=True))
    """

    def __init__(self, type: str, bubbles: bool = False, detail: Any = None) -> None:
        self.type = type
        self.bubbles = bubbles
        self.detail = detail
        self.target: Optional[Element] = None
        self.current_target: Optional[Element] = None
        self.default_prevented = False
        self._propagation_stopped = False

    def prevent_default(self) -> None:
        self.default_prevented = True

    def stop_propagation(self) -> None:
        self._propagation_stopped = True

    def __repr__(self) -> str:
        return f"<Event {self.type!r} target={self.target!r}>"


Listener = Callable[[Event], Any]


class Node:
    """Base class of every node in the tree."""

    node_type: NodeType
    accepts_children = True

    def __init__(self) -> None:
        self.parent: Optional[Node] = None
        self.child_nodes: List[Node] = []

    @property
    def node_name(self) -> str:
        raise NotImplementedError

    @property
    def node_value(self) -> Optional[str]:
        return None

    @property
    def text_content(self) -> str:
        """Concatenated text of all descendant text nodes."""
        return "".join(
            child.text_content
            for child in self.child_nodes
            if child.node_type != NodeType.COMMENT
        )

    @property
    def first_child(self) -> Optional[Node]:
        return self.child_nodes[0] if self.child_nodes else None

    @property
    def last_child(self) -> Optional[Node]:
        return self.child_nodes[-1] if self.child_nodes else None

    def has_child_nodes(self) -> bool:
        return bool(self.child_nodes)

    def append_child(self, child: Node) -> Node:
        """
        Append a node as last child.

        Appending a document fragment moves all of its children, in order,
        and leaves the fragment empty. A node that already has a parent is
        detached from it first.

        Args:
            child: Node to append

        Returns:
            The appended node

        Raises:
            ValueError: If this node cannot hold children or the append
                would create a cycle
        """
        if not self.accepts_children:
            raise ValueError(f"{self.node_name} nodes cannot have children")

        if child.node_type == NodeType.DOCUMENT_FRAGMENT:
            for grandchild in list(child.child_nodes):
                self.append_child(grandchild)
            return child

        if child.node_type == NodeType.DOCUMENT:
            raise ValueError("A document cannot be inserted into a tree")

        ancestor: Optional[Node] = self
        while ancestor is not None:
            if ancestor is child:
                raise ValueError("Cannot append a node to its own descendant")
            ancestor = ancestor.parent

        if child.parent is not None:
            child.parent.remove_child(child)

        child.parent = self
        self.child_nodes.append(child)
        return child

    def remove_child(self, child: Node) -> Node:
        """Detach a direct child."""
        if child.parent is not self:
            raise ValueError("Node is not a child of this node")
        for index, node in enumerate(self.child_nodes):
            if node is child:
                del self.child_nodes[index]
                break
        child.parent = None
        return child

    def clear_children(self) -> None:
        """Detach all children."""
        for child in self.child_nodes:
            child.parent = None
        self.child_nodes = []

    def iter_descendants(self) -> Iterator[Node]:
        """Yield all descendants depth-first, pre-order."""
        for child in self.child_nodes:
            yield child
            yield from child.iter_descendants()

    def query_selector_all(self, selector: str) -> List[Element]:
        """
        Find all descendant elements matching a simple selector.

        Supported forms are `tag`, `#id`, `.class`, `*` and compounds of
        them such as `input.wide#name`.
        """
        parsed = parse_selector(selector)
        return [
            node
            for node in self.iter_descendants()
            if isinstance(node, Element) and node._matches(parsed)
        ]

    def query_selector(self, selector: str) -> Optional[Element]:
        """Find the first descendant element matching a simple selector."""
        parsed = parse_selector(selector)
        for node in self.iter_descendants():
            if isinstance(node, Element) and node._matches(parsed):
                return node
        return None

    def to_html(self) -> str:
        raise NotImplementedError

    def _children_html(self) -> str:
        return "".join(child.to_html() for child in self.child_nodes)


class CharacterData(Node):
    """Leaf node holding character data (text or comment)."""

    accepts_children = False

    def __init__(self, data: str = "") -> None:
        super().__init__()
        self.data = data

    @property
    def node_value(self) -> str:
        return self.data

    @node_value.setter
    def node_value(self, value: str) -> None:
        self.data = value

    @property
    def text_content(self) -> str:
        return self.data

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.data!r}>"


class Text(CharacterData):
    node_type = NodeType.TEXT

    @property
    def node_name(self) -> str:
        return "#text"

    def to_html(self) -> str:
        if isinstance(self.parent, Element) and self.parent.tag_name in RAW_TEXT_ELEMENTS:
            return self.data
        return html_escape(self.data, quote=False)


class Comment(CharacterData):
    node_type = NodeType.COMMENT

    @property
    def node_name(self) -> str:
        return "#comment"

    def to_html(self) -> str:
        return f"<!--{self.data}-->"


class Element(Node):
    """
    Element node.

    Tag names are stored lower-cased in `tag_name`; `node_name` gives the
    upper-cased form the DOM reports.

    Input-capable elements (`input`, `textarea`, `select`) have a live
    `value`. It starts out from the markup and is independent of the
    `value` attribute once assigned, as in a browser.
    """

    node_type = NodeType.ELEMENT

    def __init__(
        self,
        tag_name: str,
        attributes: Optional[Dict[str, str]] = None,
    ) -> None:
        super().__init__()
        self.tag_name = tag_name.lower()
        self.attributes: Dict[str, str] = {}
        self._listeners: Dict[str, List[Listener]] = {}
        self._value: Optional[str] = None

        for name, value in (attributes or {}).items():
            self.set_attribute(name, value)

    @property
    def node_name(self) -> str:
        return self.tag_name.upper()

    @property
    def accepts_children(self) -> bool:  # type: ignore[override]
        return self.tag_name not in VOID_ELEMENTS

    # Attributes

    def get_attribute(self, name: str) -> Optional[str]:
        return self.attributes.get(name.lower())

    def set_attribute(self, name: str, value: Any) -> None:
        self.attributes[name.lower()] = "" if value is None else str(value)

    def has_attribute(self, name: str) -> bool:
        return name.lower() in self.attributes

    def remove_attribute(self, name: str) -> None:
        self.attributes.pop(name.lower(), None)

    @property
    def id(self) -> str:
        return self.attributes.get("id", "")

    @property
    def class_list(self) -> List[str]:
        return self.attributes.get("class", "").split()

    # Form value

    @property
    def is_input(self) -> bool:
        return self.tag_name in INPUT_ELEMENTS

    @property
    def value(self) -> str:
        """Current value of an input-capable element."""
        if not self.is_input:
            raise AttributeError(f"<{self.tag_name}> elements have no value")
        if self._value is not None:
            return self._value
        if self.tag_name == "textarea":
            return self.text_content
        if self.tag_name == "select":
            return self._default_select_value()
        return self.attributes.get("value", "")

    @value.setter
    def value(self, value: Any) -> None:
        if not self.is_input:
            raise AttributeError(f"<{self.tag_name}> elements have no value")
        self._value = "" if value is None else str(value)

    def _default_select_value(self) -> str:
        options = self.query_selector_all("option")
        if not options:
            return ""
        chosen = next(
            (option for option in options if option.has_attribute("selected")),
            options[0],
        )
        value = chosen.get_attribute("value")
        return value if value is not None else chosen.text_content

    # Events

    def add_event_listener(self, type: str, listener: Listener) -> None:
        """Register a listener; registering the same one twice is a no-op."""
        listeners = self._listeners.setdefault(type, [])
        if listener not in listeners:
            listeners.append(listener)

    def remove_event_listener(self, type: str, listener: Listener) -> None:
        listeners = self._listeners.get(type, [])
        if listener in listeners:
            listeners.remove(listener)

    def event_listeners(self, type: str) -> Tuple[Listener, ...]:
        return tuple(self._listeners.get(type, ()))

    def dispatch_event(self, event: Event) -> bool:
        """
        Dispatch an event at this element.

        Listeners run synchronously in registration order. Bubbling events
        continue to each ancestor element until `stop_propagation()` is
        called. Exceptions raised by listeners propagate to the caller.

        Returns:
            False if a listener called `prevent_default()`, True otherwise
        """
        event.target = self
        node: Optional[Node] = self

        while node is not None:
            if isinstance(node, Element):
                event.current_target = node
                for listener in node.event_listeners(event.type):
                    listener(event)
            if not event.bubbles or event._propagation_stopped:
                break
            node = node.parent

        event.current_target = None
        return not event.default_prevented

    # Selectors

    def matches(self, selector: str) -> bool:
        return self._matches(parse_selector(selector))

    def _matches(self, parsed: Tuple[Optional[str], Optional[str], Tuple[str, ...]]) -> bool:
        tag, element_id, classes = parsed
        if tag is not None and tag != "*" and tag != self.tag_name:
            return False
        if element_id is not None and element_id != self.id:
            return False
        own_classes = self.class_list
        return all(cls in own_classes for cls in classes)

    # Markup

    @property
    def inner_html(self) -> str:
        return self._children_html()

    @inner_html.setter
    def inner_html(self, markup: str) -> None:
        from vmbind.dom.parser import parse_html

        self.clear_children()
        if markup:
            self.append_child(parse_html(markup))

    @property
    def outer_html(self) -> str:
        return self.to_html()

    def to_html(self) -> str:
        attrs = "".join(
            f' {name}="{html_escape(value, quote=True)}"'
            for name, value in self.attributes.items()
        )
        if self.tag_name in VOID_ELEMENTS:
            return f"<{self.tag_name}{attrs}>"
        return f"<{self.tag_name}{attrs}>{self._children_html()}</{self.tag_name}>"

    def __repr__(self) -> str:
        return f"<Element {self.tag_name}>"


class DocumentFragment(Node):
    """Parentless container whose children move out when it is appended."""

    node_type = NodeType.DOCUMENT_FRAGMENT

    @property
    def node_name(self) -> str:
        return "#document-fragment"

    def to_html(self) -> str:
        return self._children_html()

    def __repr__(self) -> str:
        return f"<DocumentFragment children={len(self.child_nodes)}>"


class Document(Node):
    """
    Document root and node factory.

    Example:
        doc = Document.from_html(open("index.html").read())
        root = doc.query_selector("#app")
    """

    node_type = NodeType.DOCUMENT

    @classmethod
    def from_html(cls, markup: str) -> "Document":
        """Parse markup into a new document."""
        from vmbind.dom.parser import parse_html

        document = cls()
        document.append_child(parse_html(markup))
        return document

    @property
    def node_name(self) -> str:
        return "#document"

    @property
    def document_element(self) -> Optional[Element]:
        for child in self.child_nodes:
            if isinstance(child, Element):
                return child
        return None

    def create_element(
        self,
        tag_name: str,
        attributes: Optional[Dict[str, str]] = None,
    ) -> Element:
        return Element(tag_name, attributes)

    def create_text_node(self, data: str) -> Text:
        return Text(data)

    def create_comment(self, data: str) -> Comment:
        return Comment(data)

    def create_document_fragment(self) -> DocumentFragment:
        return DocumentFragment()

    def to_html(self) -> str:
        return self._children_html()

    def __repr__(self) -> str:
        return f"<Document children={len(self.child_nodes)}>"


def parse_selector(selector: str) -> Tuple[Optional[str], Optional[str], Tuple[str, ...]]:
    """
    Split a simple compound selector into (tag, id, classes).

    Raises:
        ValueError: For empty or unsupported selectors
    """
    match = _SELECTOR_PATTERN.match(selector.strip())
    if not match or not selector.strip():
        raise ValueError(f"Unsupported selector: {selector!r}")

    tag = match.group("tag")
    element_id: Optional[str] = None
    classes: List[str] = []

    for part in re.findall(r"[#.][a-zA-Z0-9_-]+", match.group("rest")):
        if part[0] == "#":
            if element_id is not None and element_id != part[1:]:
                raise ValueError(f"Selector has more than one id: {selector!r}")
            element_id = part[1:]
        else:
            classes.append(part[1:])

    return (tag.lower() if tag else None, element_id, tuple(classes))
