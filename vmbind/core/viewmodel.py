"""
vmbind View Model
=================

Binds a markup subtree to a data object.

Construction compiles the root element's content into records, renders a
fresh subtree from them (replacing the original content) and from then on
keeps the rendered text in step with the data: assigning a property
patches exactly the text nodes whose `{{ }}` markers name it.

Example:
    doc = Document.from_html('''
        <div id="app">
            <p>{{ message }}</p>
            <input v-model="message">
            <button @click="shout">Shout</button>
        </div>
    ''')

    def shout(vm, event):
        vm.message = vm.message.upper()

    vm = ViewModel(
        el="#app",
        document=doc,
        data={"message": "hello"},
        methods={"shout": shout},
    )

    vm.message = "hi"   # the <p> now reads "hi"
"""

from __future__ import annotations

import types
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from vmbind.core.config import Config, EngineSettings, get_config
from vmbind.core.options import (
    InvalidOptionsError,
    ViewModelError,
    ViewModelOptions,
    merge_options,
)
from vmbind.dom.nodes import Document, Element
from vmbind.engine.compiler import TreeCompiler
from vmbind.engine.interpolation import Interpolator
from vmbind.engine.materializer import TreeMaterializer
from vmbind.engine.reactive import ReactiveStore
from vmbind.engine.records import NodeRecord
from vmbind.engine.updater import PartialUpdater
from vmbind.utils.logger import get_logger

logger = get_logger("vmbind.core.viewmodel")


class ElementNotFoundError(ViewModelError):
    """Raised when the root element cannot be found."""

    def __init__(self, el: Any) -> None:
        super().__init__(f"Root element not found: {el!r}")
        self.el = el


class ViewModel:
    """
    Reactive view over a root element.

    Data properties read and write as attributes; methods are bound to the
    instance and are called with the event object by `@event` attributes.

    Args:
        options: Option mapping (`el`, `data`, `methods`, `created`, `mounted`)
        document: Document used to look up `el` and to create nodes
        config: Configuration, the global one by default
        **overrides: Options given as keywords, taking precedence over `options`

    Raises:
        InvalidOptionsError: For malformed options
        ElementNotFoundError: If `el` does not resolve to an element
    """

    def __init__(
        self,
        options: Optional[Mapping[str, Any]] = None,
        *,
        document: Optional[Document] = None,
        config: Optional[Config] = None,
        **overrides: Any,
    ) -> None:
        opts = merge_options(options, **overrides)
        self._check_reserved_names(opts)

        self._settings: EngineSettings = (config or get_config()).engine_settings()
        self._document = document or Document()
        self._root = self._resolve_root(opts.el, document)
        self._updater: Optional[PartialUpdater] = None
        self._records: Tuple[NodeRecord, ...] = ()

        self._methods: Dict[str, Callable[..., Any]] = {}
        for name, function in opts.methods.items():
            method = types.MethodType(function, self)
            self._methods[name] = method
            object.__setattr__(self, name, method)

        self._interpolator = Interpolator(self._settings.missing_key)
        self._store = ReactiveStore(opts.data)
        self._store.subscribe_all(self._on_property_change)

        opts.created(self)

        compiler = TreeCompiler(
            directive_prefix=self._settings.directive_prefix,
            event_prefix=self._settings.event_prefix,
        )
        self._records = compiler.compile_tree(self._root)

        materializer = TreeMaterializer(
            self._document,
            self._store,
            self._interpolator,
            self._methods,
            model_directive=self._settings.model_directive,
        )
        materializer.mount(self._root, self._records)

        self._updater = PartialUpdater(
            self._records,
            self._store,
            self._interpolator,
            sync_inputs=self._settings.sync_inputs,
            model_directive=self._settings.model_directive,
        )

        opts.mounted(self)

    @staticmethod
    def _check_reserved_names(opts: ViewModelOptions) -> None:
        reserved = sorted(
            name for name in (*opts.data, *opts.methods) if hasattr(ViewModel, name)
        )
        if reserved:
            raise InvalidOptionsError(f"Reserved names: {', '.join(reserved)}")

    @staticmethod
    def _resolve_root(el: Any, document: Optional[Document]) -> Element:
        if isinstance(el, Element):
            return el

        root = None
        if el and document is not None:
            try:
                root = document.query_selector(el)
            except ValueError as exc:
                raise InvalidOptionsError(str(exc)) from exc

        if root is None:
            raise ElementNotFoundError(el)
        return root

    def _on_property_change(self, key: str, value: Any) -> None:
        logger.debug("Property changed", key=key)
        if self._updater is not None:
            self._updater.update_for_key(key)

    def __getattr__(self, name: str) -> Any:
        # Only reached when normal lookup fails
        store = self.__dict__.get("_store")
        if store is not None and name in store:
            return store[name]
        raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")

    def __setattr__(self, name: str, value: Any) -> None:
        store = self.__dict__.get("_store")
        if store is not None and name in store:
            store.set(name, value)
        else:
            super().__setattr__(name, value)

    @property
    def el(self) -> Element:
        """Root element holding the rendered subtree."""
        return self._root

    @property
    def document(self) -> Document:
        return self._document

    @property
    def store(self) -> ReactiveStore:
        return self._store

    @property
    def records(self) -> Tuple[NodeRecord, ...]:
        return self._records

    @property
    def methods(self) -> Mapping[str, Callable[..., Any]]:
        return types.MappingProxyType(self._methods)

    @property
    def settings(self) -> EngineSettings:
        return self._settings

    @property
    def data(self) -> Dict[str, Any]:
        """Snapshot of the current property values."""
        return self._store.snapshot()

    def __repr__(self) -> str:
        return f"<ViewModel el={self._root!r} data={self._store.snapshot()!r}>"
