"""
vmbind Tree Materializer
========================

Builds a fresh live subtree from records.

For each record, in order:

- Comments are skipped
- Elements are created with their plain props as attributes and one
  listener per `@event` entry, calling the named method with the event
- Text is created with its markers resolved against current state
- Input-capable elements carrying the model directive (`v-model="key"`)
  start out with the property's value and write user input back to it
- The new node becomes the record's `rendered_node` and is appended to
  the container; child records are materialized into it

`mount()` builds everything into a detached fragment first and then
swaps it into the root in one step, so the root never shows a partly
built tree.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, Mapping, Optional

from vmbind.dom.nodes import Document, Element, Event, Node
from vmbind.engine.interpolation import Interpolator
from vmbind.engine.reactive import ReactiveStore
from vmbind.engine.records import CommentRecord, ElementRecord, NodeRecord, TextRecord, walk
from vmbind.utils.logger import get_logger

logger = get_logger("vmbind.engine.materializer")


class UnknownMethodError(AttributeError):
    """Raised when an event handler attribute names a missing method."""

    def __init__(self, name: str, event_type: str) -> None:
        super().__init__(f"No method {name!r} to handle {event_type!r} events")
        self.name = name
        self.event_type = event_type


class TreeMaterializer:
    """
    Creates live nodes for records.

    Args:
        document: Node factory
        store: Current property values, written by two-way bindings
        interpolator: Resolves text markers
        methods: Handler callables by name, looked up when an event fires
        model_directive: Name of the two-way binding directive
    """

    def __init__(
        self,
        document: Document,
        store: ReactiveStore,
        interpolator: Optional[Interpolator] = None,
        methods: Optional[Mapping[str, Callable[..., Any]]] = None,
        model_directive: str = "v-model",
    ) -> None:
        self.document = document
        self.store = store
        self.interpolator = interpolator or Interpolator()
        self.methods = methods if methods is not None else {}
        self.model_directive = model_directive

    def mount(self, root: Element, records: Iterable[NodeRecord]) -> None:
        """Replace the content of `root` with a subtree built from `records`."""
        records = tuple(records)
        fragment = self.document.create_document_fragment()
        self.materialize(fragment, records)

        root.clear_children()
        root.append_child(fragment)

        logger.debug(
            "Mounted rendered subtree",
            root=root.node_name,
            nodes=sum(1 for record in walk(records) if record.rendered_node is not None),
        )

    def materialize(self, container: Node, records: Iterable[NodeRecord]) -> None:
        """Build nodes for `records` and append them to `container`."""
        for record in records:
            if isinstance(record, CommentRecord):
                continue

            if isinstance(record, TextRecord):
                record.rendered_node = self.document.create_text_node(
                    self.interpolator.resolve(record.raw_value, self.store)
                )
                container.append_child(record.rendered_node)
                continue

            element = self.create_element(record)
            record.rendered_node = element
            container.append_child(element)

            if record.children:
                self.materialize(element, record.children)

    def create_element(self, record: ElementRecord) -> Element:
        element = self.document.create_element(record.tag_name)

        for event_type, method_name in record.events.items():
            element.add_event_listener(event_type, self._event_handler(event_type, method_name))

        for name, value in record.props.items():
            element.set_attribute(name, value)

        key = record.attributes.get(self.model_directive)
        if key is not None and element.is_input:
            self.bind_model(element, key.strip())

        return element

    def bind_model(self, element: Element, key: str) -> None:
        """Wire two-way binding between `element.value` and property `key`."""
        element.value = self.interpolator.lookup(key, self.store, marker="")

        def on_input(event: Event) -> None:
            if key not in self.store:
                logger.warning("Input bound to unknown property ignored", key=key)
                return
            self.store.set(key, event.target.value)

        element.add_event_listener("input", on_input)

    def _event_handler(self, event_type: str, method_name: str) -> Callable[[Event], Any]:
        def handler(event: Event) -> Any:
            method = self.methods.get(method_name)
            if method is None:
                raise UnknownMethodError(method_name, event_type)
            return method(event)

        return handler
