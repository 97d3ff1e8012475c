"""
vmbind Interpolation
====================

Resolves `{{ name }}` markers in text against view-model state.

Grammar:
    A marker is `{{`, then any characters except `{` and `}`, then `}}`.
    Markers do not nest. The trimmed inner text is a bare property name;
    nothing else (no attribute access, calls or filters) is evaluated.
    Unbalanced braces simply do not match and stay literal text.

Substitution is a single left-to-right pass: substituted values are
inserted verbatim, even if they look like markers themselves.

What happens for names that are not declared properties is decided by a
`MissingKeyPolicy`.

Example:
    resolve("Hello {{name}}, you are {{ age }}", {"name": "Ada", "age": 30})
    # "Hello Ada, you are 30"

    extract_keys("{{a}} and {{ b }} and {{a}}")
    # ("a", "b", "a")
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Any, Mapping, Tuple, Union

from vmbind.engine.reactive import UnknownPropertyError
from vmbind.utils.logger import get_logger

logger = get_logger("vmbind.engine.interpolation")

INTERPOLATION_PATTERN = re.compile(r"\{\{[^{}]*\}\}")


class MissingKeyPolicy(Enum):
    """What to substitute for a marker naming an undeclared property."""

    EMPTY = "empty"          # "" and a warning
    UNDEFINED = "undefined"  # the literal text "undefined"
    KEEP = "keep"            # leave the marker as written
    ERROR = "error"          # raise UnknownPropertyError

    @classmethod
    def parse(cls, value: Union[str, "MissingKeyPolicy"]) -> "MissingKeyPolicy":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            choices = ", ".join(policy.value for policy in cls)
            raise ValueError(
                f"Unknown missing-key policy {value!r} (expected one of: {choices})"
            ) from None


def marker_key(marker: str) -> str:
    """`"{{ name }}"` -> `"name"`."""
    return marker[2:-2].strip()


def extract_keys(text: str) -> Tuple[str, ...]:
    """
    Property names referenced by the markers in `text`.

    Names are returned in order of occurrence; repeated markers give
    repeated entries.
    """
    return tuple(marker_key(marker) for marker in INTERPOLATION_PATTERN.findall(text))


def format_value(value: Any) -> str:
    """String form of a property value as shown in rendered text."""
    if value is None:
        return ""
    return str(value)


class Interpolator:
    """
    Marker resolver bound to a missing-key policy.

    Example:
        interpolator = Interpolator(MissingKeyPolicy.KEEP)
        interpolator.resolve("{{ known }} {{ unknown }}", {"known": 1})
        # "1 {{ unknown }}"
    """

    def __init__(self, missing: Union[MissingKeyPolicy, str] = MissingKeyPolicy.EMPTY) -> None:
        self.missing = MissingKeyPolicy.parse(missing)

    def lookup(self, key: str, state: Mapping[str, Any], marker: str = "") -> str:
        """
        String value of one property, applying the missing-key policy.

        Args:
            key: Property name
            state: Current property values
            marker: Original marker text, returned under the KEEP policy

        Raises:
            UnknownPropertyError: Under the ERROR policy
        """
        if key in state:
            return format_value(state[key])

        if self.missing is MissingKeyPolicy.ERROR:
            raise UnknownPropertyError(key)

        logger.warning("Unknown property referenced", key=key, policy=self.missing.value)

        if self.missing is MissingKeyPolicy.UNDEFINED:
            return "undefined"
        if self.missing is MissingKeyPolicy.KEEP:
            return marker
        return ""

    def resolve(self, text: str, state: Mapping[str, Any]) -> str:
        """
        Replace every marker in `text` with its property's current value.

        Args:
            text: Raw text, possibly containing markers
            state: Current property values

        Returns:
            Text with all markers substituted
        """
        return INTERPOLATION_PATTERN.sub(
            lambda match: self.lookup(marker_key(match.group()), state, match.group()),
            text,
        )


_default_interpolator = Interpolator()


def resolve(text: str, state: Mapping[str, Any]) -> str:
    """Resolve markers with the default (EMPTY) missing-key policy."""
    return _default_interpolator.resolve(text, state)
