"""
vmbind CLI Commands
===================

Shared helpers for the command implementations.
"""

from __future__ import annotations

from pathlib import Path
from typing import Tuple, Union

from vmbind.core.viewmodel import ElementNotFoundError
from vmbind.dom.nodes import Document, Element


def load_root(path: Union[str, Path], selector: str) -> Tuple[Document, Element]:
    """
    Parse an HTML file and find the root element.

    Raises:
        FileNotFoundError: If the file does not exist
        ElementNotFoundError: If nothing matches the selector
    """
    document = Document.from_html(Path(path).read_text(encoding="utf-8"))
    root = document.query_selector(selector)
    if root is None:
        raise ElementNotFoundError(selector)
    return document, root
