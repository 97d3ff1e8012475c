"""
vmbind Tree Compiler
====================

Turns an existing node tree into records (see `vmbind.engine.records`).

For each node, in document order:

- Whitespace-only text nodes are dropped. Whitespace is the fixed set in
  `WHITESPACE` (the ECMAScript whitespace and line terminators, BOM
  included), not `str.isspace`, so U+001C counts as content
- Elements have every attribute sorted into exactly one of three groups
  by name: directives (`v-model`), events (`@click`, stored as `click`)
  or plain props (everything else)
- Text nodes record the property names their `{{ }}` markers reference
- Element children are compiled recursively

The source tree is only read, never changed.

Example:
    fragment = parse_html('<p @click="greet">Hi {{ name }}</p>')
    records = TreeCompiler().compile(fragment.child_nodes)

    records[0].events                           # {"click": "greet"}
    records[0].children[0].interpolation_keys   # ("name",)
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from vmbind.dom.nodes import Comment, Element, Node, Text
from vmbind.engine.interpolation import extract_keys
from vmbind.engine.records import CommentRecord, ElementRecord, NodeRecord, TextRecord, walk
from vmbind.utils.logger import get_logger

logger = get_logger("vmbind.engine.compiler")

WHITESPACE = (
    "\t\n\v\f\r \xa0\u1680\u2000\u2001\u2002\u2003\u2004\u2005\u2006"
    "\u2007\u2008\u2009\u200a\u2028\u2029\u202f\u205f\u3000\ufeff"
)


class TreeCompiler:
    """
    Compiles node trees into records.

    Args:
        directive_prefix: Attribute prefix marking directives
        event_prefix: Attribute prefix marking event handlers
    """

    def __init__(self, directive_prefix: str = "v-", event_prefix: str = "@") -> None:
        if not directive_prefix or not event_prefix:
            raise ValueError("Directive and event prefixes must not be empty")
        if directive_prefix.startswith(event_prefix) or event_prefix.startswith(directive_prefix):
            raise ValueError(
                f"Ambiguous prefixes: {directive_prefix!r} and {event_prefix!r}"
            )
        self.directive_prefix = directive_prefix
        self.event_prefix = event_prefix

    def compile(self, nodes: Iterable[Node]) -> Tuple[NodeRecord, ...]:
        """
        Compile a sequence of sibling nodes.

        Args:
            nodes: Nodes in document order

        Returns:
            Records for the nodes that are kept
        """
        records: List[NodeRecord] = []
        for node in nodes:
            record = self.compile_node(node)
            if record is not None:
                records.append(record)
        return tuple(records)

    def compile_tree(self, root: Node) -> Tuple[NodeRecord, ...]:
        """Compile the children of `root` and log a summary."""
        records = self.compile(root.child_nodes)
        logger.debug(
            "Compiled node tree",
            root=root.node_name,
            records=sum(1 for _ in walk(records)),
        )
        return records

    def compile_node(self, node: Node) -> Optional[NodeRecord]:
        """Compile one node; returns None for nodes that are dropped."""
        if isinstance(node, Text):
            if not node.data.strip(WHITESPACE):
                return None
            return TextRecord(
                raw_value=node.data,
                interpolation_keys=extract_keys(node.data),
            )

        if isinstance(node, Comment):
            return CommentRecord(raw_value=node.data)

        if isinstance(node, Element):
            props, directives, events = self.classify_attributes(node.attributes)
            return ElementRecord(
                tag_name=node.tag_name,
                attributes=node.attributes,
                props=props,
                directives=directives,
                events=events,
                children=self.compile(node.child_nodes) if node.has_child_nodes() else (),
            )

        logger.debug("Skipping unsupported node", node=node.node_name)
        return None

    def classify_attributes(
        self,
        attributes: Mapping[str, str],
    ) -> Tuple[Dict[str, str], Dict[str, str], Dict[str, str]]:
        """
        Split attributes into (props, directives, events).

        Directives keep their full name; events are keyed by the event type
        with the prefix removed.
        """
        props: Dict[str, str] = {}
        directives: Dict[str, str] = {}
        events: Dict[str, str] = {}

        for name, value in attributes.items():
            if name.startswith(self.directive_prefix):
                directives[name] = value
            elif name.startswith(self.event_prefix):
                events[name[len(self.event_prefix):]] = value
            else:
                props[name] = value

        return props, directives, events


def compile_nodes(nodes: Iterable[Node]) -> Tuple[NodeRecord, ...]:
    """Compile with the default `v-` and `@` prefixes."""
    return TreeCompiler().compile(nodes)
