"""
vmbind - Reactive View Binding for HTML Markup
==============================================

Binds a markup subtree to a plain data object:

- `{{ name }}` markers in text show the current value of `name`
- Assigning `vm.name = ...` refreshes exactly the text that uses it
- `v-model="name"` keeps an input and a property in sync
- `@click="method"` calls a view model method with the event

Quick Start:
    from vmbind import Document, ViewModel

    doc = Document.from_html('<div id="app"><h1>Hello {{ who }}</h1></div>')
    vm = ViewModel(el="#app", document=doc, data={"who": "world"})

    vm.who = "vmbind"
    print(vm.el.outer_html)  # <div id="app"><h1>Hello vmbind</h1></div>
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

from vmbind.core.config import Config, get_config
from vmbind.core.options import InvalidOptionsError
from vmbind.core.viewmodel import ElementNotFoundError, ViewModel, ViewModelError
from vmbind.dom.nodes import Document, Element, Event
from vmbind.dom.parser import parse_html
from vmbind.engine.interpolation import MissingKeyPolicy
from vmbind.engine.materializer import UnknownMethodError
from vmbind.engine.reactive import UnknownPropertyError

__all__ = [
    "__version__",
    "Config",
    "get_config",
    "InvalidOptionsError",
    "ElementNotFoundError",
    "ViewModel",
    "ViewModelError",
    "Document",
    "Element",
    "Event",
    "parse_html",
    "MissingKeyPolicy",
    "UnknownMethodError",
    "UnknownPropertyError",
]
