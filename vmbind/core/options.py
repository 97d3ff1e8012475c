"""
vmbind View Model Options
=========================

Defaulting and merging of the options a `ViewModel` is built from.

    el        Root element, or a selector looked up in the document
    data      Initial property values; the keys become reactive properties
    methods   Callables bound to the view model, usable as event handlers
    created   Hook called once state exists, before the first render
    mounted   Hook called once the rendered subtree is in place
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Callable, Dict, Mapping, Optional, Union

from vmbind.dom.nodes import Element


class ViewModelError(Exception):
    """Base exception for view model errors."""
    pass


class InvalidOptionsError(ViewModelError, ValueError):
    """Raised for unknown or malformed view model options."""
    pass


def _noop(vm: Any) -> None:
    return None


@dataclass
class ViewModelOptions:
    """Merged view model options."""

    el: Union[str, Element] = ""
    data: Dict[str, Any] = field(default_factory=dict)
    methods: Dict[str, Callable[..., Any]] = field(default_factory=dict)
    created: Callable[[Any], Any] = _noop
    mounted: Callable[[Any], Any] = _noop

    def validate(self) -> "ViewModelOptions":
        """
        Check option types.

        Raises:
            InvalidOptionsError: On the first problem found
        """
        if not isinstance(self.el, (str, Element)):
            raise InvalidOptionsError(
                f"'el' must be a selector or an Element, got {type(self.el).__name__}"
            )
        if not isinstance(self.data, Mapping):
            raise InvalidOptionsError("'data' must be a mapping")
        if not isinstance(self.methods, Mapping):
            raise InvalidOptionsError("'methods' must be a mapping")

        for key in self.data:
            if not isinstance(key, str) or not key.isidentifier() or key.startswith("_"):
                raise InvalidOptionsError(f"Invalid data key: {key!r}")

        for name, method in self.methods.items():
            if not callable(method):
                raise InvalidOptionsError(f"Method {name!r} is not callable")

        for hook in ("created", "mounted"):
            if not callable(getattr(self, hook)):
                raise InvalidOptionsError(f"Hook {hook!r} is not callable")

        clashes = sorted(set(self.data) & set(self.methods))
        if clashes:
            raise InvalidOptionsError(
                f"Names used for both data and methods: {', '.join(clashes)}"
            )

        return self


OPTION_NAMES = frozenset(f.name for f in fields(ViewModelOptions))


def merge_options(
    options: Optional[Mapping[str, Any]] = None,
    **overrides: Any,
) -> ViewModelOptions:
    """
    Merge defaults, an options mapping and keyword overrides, in that order.

    Example:
        merge_options({"el": "#app", "data": {"n": 1}}, mounted=on_mounted)

    Raises:
        InvalidOptionsError: For unknown option names or bad values
    """
    merged: Dict[str, Any] = {**dict(options or {}), **overrides}

    unknown = sorted(set(merged) - OPTION_NAMES)
    if unknown:
        raise InvalidOptionsError(f"Unknown options: {', '.join(unknown)}")

    for name in ("data", "methods"):
        if merged.get(name) is None:
            merged.pop(name, None)
        elif isinstance(merged[name], Mapping):
            merged[name] = dict(merged[name])

    return ViewModelOptions(**merged).validate()
