"""
vmbind Render Command
=====================

Mounts a view model on a markup file, applies property writes and prints
the root element's HTML.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from vmbind.cli.commands import load_root
from vmbind.core.config import Config
from vmbind.core.viewmodel import ViewModel
from vmbind.engine.reactive import UnknownPropertyError


def load_data(data: Optional[str], data_file: Optional[str]) -> Dict[str, Any]:
    """Read initial data from a JSON string or file."""
    if data_file:
        data = Path(data_file).read_text(encoding="utf-8")
    if not data:
        return {}

    loaded = json.loads(data)
    if not isinstance(loaded, dict):
        raise ValueError("Data must be a JSON object")
    return loaded


def parse_assignment(text: str) -> Tuple[str, str]:
    """`"count=3"` -> `("count", "3")`; the value is kept as written."""
    key, sep, value = text.partition("=")
    if not sep or not key.strip():
        raise ValueError(f"Expected KEY=VALUE, got {text!r}")
    return key.strip(), value


def coerce_value(raw: str, current: Any) -> Any:
    """
    Value written for `raw`, given the property's current value.

    String properties take the text verbatim. Other properties take it as
    JSON (`3`, `true`, `null`, `[1, 2]`), or verbatim when it is not JSON.
    """
    if isinstance(current, str):
        return raw
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


def render_file(
    path: str,
    selector: str,
    data: Optional[str],
    data_file: Optional[str],
    assignments: List[str],
    config: Config,
) -> int:
    """
    Render a markup file.

    Args:
        path: HTML file
        selector: Root element selector
        data: Initial data as JSON
        data_file: File holding the initial data as JSON
        assignments: KEY=VALUE writes applied after mounting, in order
        config: Configuration

    Returns:
        Exit code
    """
    document, root = load_root(path, selector)
    writes = [parse_assignment(text) for text in assignments]

    vm = ViewModel(el=root, document=document, data=load_data(data, data_file), config=config)

    for key, value in writes:
        if key not in vm.store:
            raise UnknownPropertyError(key)
        setattr(vm, key, coerce_value(value, vm.store[key]))

    print(vm.el.outer_html)
    return 0
