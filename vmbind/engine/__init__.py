"""
vmbind Engine Module
====================

The compile → render → observe → patch pipeline.

Components:
- Interpolation: `{{ name }}` marker extraction and resolution
- Records: compiled description of a markup subtree
- Compiler: node tree to records
- Materializer: records to a live node tree
- Reactive: observable property cells
- Updater: in-place refresh of text affected by a property write
"""

from vmbind.engine.interpolation import (
    INTERPOLATION_PATTERN,
    Interpolator,
    MissingKeyPolicy,
    extract_keys,
    resolve,
)
from vmbind.engine.records import (
    CommentRecord,
    ElementRecord,
    NodeRecord,
    RecordKind,
    TextRecord,
    walk,
)
from vmbind.engine.compiler import TreeCompiler, compile_nodes
from vmbind.engine.materializer import TreeMaterializer, UnknownMethodError
from vmbind.engine.reactive import ReactiveCell, ReactiveStore, UnknownPropertyError
from vmbind.engine.updater import PartialUpdater, collect_affected, collect_bound_inputs

__all__ = [
    "INTERPOLATION_PATTERN",
    "Interpolator",
    "MissingKeyPolicy",
    "extract_keys",
    "resolve",
    "CommentRecord",
    "ElementRecord",
    "NodeRecord",
    "RecordKind",
    "TextRecord",
    "walk",
    "TreeCompiler",
    "compile_nodes",
    "TreeMaterializer",
    "UnknownMethodError",
    "ReactiveCell",
    "ReactiveStore",
    "UnknownPropertyError",
    "PartialUpdater",
    "collect_affected",
    "collect_bound_inputs",
]
