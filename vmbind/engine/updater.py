"""
vmbind Partial Updater
======================

Refreshes rendered text after a property write.

The work is split in two steps:

1. `collect_affected()` scans the whole record tree (depth-first,
   pre-order, always descending into children) and returns the text
   records whose markers reference the written key. It is a pure
   function of the records.
2. `PartialUpdater.apply()` re-resolves each record's original text and
   writes it into the live text node in place. Nodes are never replaced,
   so listeners and bindings stay attached.

Bound inputs can be resynced as well (`sync_inputs=True`): an input bound
with `v-model="key"` gets the new value when it differs from what the
input shows. An input that just produced the write already shows that
value, so its own write comes back as a no-op.
"""

from __future__ import annotations

from typing import Iterable, List, Sequence

from vmbind.engine.interpolation import Interpolator, format_value
from vmbind.engine.reactive import ReactiveStore
from vmbind.engine.records import ElementRecord, NodeRecord, TextRecord, walk
from vmbind.utils.logger import get_logger

logger = get_logger("vmbind.engine.updater")


def collect_affected(records: Iterable[NodeRecord], key: str) -> List[TextRecord]:
    """Text records whose markers reference `key`, in tree order."""
    return [
        record
        for record in walk(records)
        if isinstance(record, TextRecord) and record.references(key)
    ]


def collect_bound_inputs(
    records: Iterable[NodeRecord],
    key: str,
    model_directive: str = "v-model",
) -> List[ElementRecord]:
    """Element records bound to `key` through the model directive."""
    return [
        record
        for record in walk(records)
        if isinstance(record, ElementRecord)
        and record.attributes.get(model_directive, "").strip() == key
    ]


class PartialUpdater:
    """
    Patches the live subtree for one written key at a time.

    Args:
        records: Root records of the view model
        store: Current property values
        interpolator: Resolves text markers
        sync_inputs: Also push new values into bound inputs
        model_directive: Name of the two-way binding directive
    """

    def __init__(
        self,
        records: Sequence[NodeRecord],
        store: ReactiveStore,
        interpolator: Interpolator,
        sync_inputs: bool = True,
        model_directive: str = "v-model",
    ) -> None:
        self.records = tuple(records)
        self.store = store
        self.interpolator = interpolator
        self.sync_inputs = sync_inputs
        self.model_directive = model_directive

    def update_for_key(self, key: str) -> int:
        """
        Refresh everything rendered from property `key`.

        Returns:
            Number of text nodes patched
        """
        affected = collect_affected(self.records, key)
        self.apply(affected)

        synced = self.sync_bound_inputs(key) if self.sync_inputs else 0

        logger.debug("Patched rendered nodes", key=key, text_nodes=len(affected), inputs=synced)
        return len(affected)

    def apply(self, records: Iterable[TextRecord]) -> None:
        """Re-resolve each record's original text into its live node."""
        for record in records:
            if record.rendered_node is None:
                continue
            record.rendered_node.data = self.interpolator.resolve(record.raw_value, self.store)

    def sync_bound_inputs(self, key: str) -> int:
        """Push the value of `key` into bound inputs that show something else."""
        value = format_value(self.store[key])
        synced = 0

        for record in collect_bound_inputs(self.records, key, self.model_directive):
            element = record.rendered_node
            if element is None or not element.is_input:
                continue
            if element.value != value:
                element.value = value
                synced += 1

        return synced
