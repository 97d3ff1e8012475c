"""
vmbind Reactive Cells
=====================

Observable storage for view-model data.

Each declared data key lives in its own `ReactiveCell`. A cell holds a
value and an ordered list of subscribers; assigning a value stores it and
then notifies every subscriber synchronously. There is no batching and no
scheduling: when the setter returns, all subscribers have run.

Writes always notify, including writes of an unchanged value. Subscribers
must therefore be safe to re-run with the value already on display; the
partial updater is, since it only re-derives text from current state.

Example:
    store = ReactiveStore({"count": 0})
    store.subscribe("count", lambda key, value: print(key, value))

    store.set("count", 5)  # prints: count 5
    store.set("count", 5)  # prints again
"""

from __future__ import annotations

from typing import (
    Any,
    Callable,
    Dict,
    Generic,
    Iterator,
    List,
    Mapping,
    Optional,
    TypeVar,
)

T = TypeVar("T")

Subscriber = Callable[[str, Any], Any]


class UnknownPropertyError(KeyError):
    """Raised when a key is not a declared data property."""

    def __init__(self, key: str) -> None:
        super().__init__(key)
        self.key = key

    def __str__(self) -> str:
        return f"Unknown property: {self.key!r}"


class ReactiveCell(Generic[T]):
    """
    A named value with synchronous change notification.

    Example:
        name = ReactiveCell("name", "World")
        name.subscribe(lambda key, value: print(f"{key} -> {value}"))

        name.value = "vmbind"  # prints: name -> vmbind
    """

    __slots__ = ("_name", "_value", "_subscribers")

    def __init__(self, name: str, initial: T) -> None:
        self._name = name
        self._value = initial
        self._subscribers: List[Subscriber] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def value(self) -> T:
        return self._value

    @value.setter
    def value(self, new_value: T) -> None:
        """Set, then notify."""
        self._value = new_value
        self._notify()

    def peek(self) -> T:
        return self._value

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """
        Register a change callback.

        Args:
            callback: Called as `callback(name, value)` after every write

        Returns:
            A function that removes the subscription
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            self.unsubscribe(callback)

        return unsubscribe

    def unsubscribe(self, callback: Subscriber) -> None:
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def _notify(self) -> None:
        # Copy so subscribers may unsubscribe while being notified
        for callback in list(self._subscribers):
            callback(self._name, self._value)

    def __repr__(self) -> str:
        return f"<ReactiveCell {self._name}: {self._value!r}>"


class ReactiveStore(Mapping[str, Any]):
    """
    Fixed set of named reactive cells.

    Reads through the `Mapping` interface return current values, so a
    store can be handed to anything that resolves names against a plain
    dict. Keys are fixed at construction; writing an undeclared key raises
    `UnknownPropertyError`.

    Example:
        store = ReactiveStore({"name": "Ada", "age": 30})
        store["name"]          # "Ada"
        store.set("age", 31)   # notifies subscribers of "age"
        store.snapshot()       # {"name": "Ada", "age": 31}
    """

    def __init__(self, data: Optional[Mapping[str, Any]] = None) -> None:
        self._cells: Dict[str, ReactiveCell] = {
            key: ReactiveCell(key, value) for key, value in (data or {}).items()
        }

    def cell(self, key: str) -> ReactiveCell:
        try:
            return self._cells[key]
        except KeyError:
            raise UnknownPropertyError(key) from None

    def __getitem__(self, key: str) -> Any:
        return self.cell(key).value

    def __iter__(self) -> Iterator[str]:
        return iter(self._cells)

    def __len__(self) -> int:
        return len(self._cells)

    def __contains__(self, key: object) -> bool:
        return key in self._cells

    def set(self, key: str, value: Any) -> None:
        """Write a declared property and notify its subscribers."""
        self.cell(key).value = value

    def subscribe(self, key: str, callback: Subscriber) -> Callable[[], None]:
        return self.cell(key).subscribe(callback)

    def subscribe_all(self, callback: Subscriber) -> Callable[[], None]:
        """Subscribe one callback to every cell."""
        unsubscribers = [cell.subscribe(callback) for cell in self._cells.values()]

        def unsubscribe() -> None:
            for unsub in unsubscribers:
                unsub()

        return unsubscribe

    def snapshot(self) -> Dict[str, Any]:
        """Current values as a plain dict."""
        return {key: cell.peek() for key, cell in self._cells.items()}

    def __repr__(self) -> str:
        return f"<ReactiveStore {self.snapshot()!r}>"
