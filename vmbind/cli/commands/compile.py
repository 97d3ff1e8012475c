"""
vmbind Compile Command
======================

Prints the records compiled from a root element's content.
"""

from __future__ import annotations

import json

from vmbind.cli.commands import load_root
from vmbind.core.config import Config
from vmbind.engine.compiler import TreeCompiler


def compile_file(path: str, selector: str, config: Config) -> int:
    """Compile a markup file and print its records as JSON."""
    _, root = load_root(path, selector)
    settings = config.engine_settings()

    compiler = TreeCompiler(
        directive_prefix=settings.directive_prefix,
        event_prefix=settings.event_prefix,
    )
    records = compiler.compile_tree(root)

    print(json.dumps([record.to_dict() for record in records], indent=2))
    return 0
