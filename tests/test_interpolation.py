"""
Interpolation Tests
"""

import pytest

from vmbind.engine.interpolation import (
    Interpolator,
    MissingKeyPolicy,
    extract_keys,
    format_value,
    resolve,
)
from vmbind.engine.reactive import ReactiveStore, UnknownPropertyError


def test_resolves_markers_left_to_right():
    text = "Hello {{name}}, you are {{age}}"

    assert resolve(text, {"name": "Ada", "age": 30}) == "Hello Ada, you are 30"


def test_marker_content_is_trimmed():
    assert resolve("[{{  name \t}}]", {"name": "Ada"}) == "[Ada]"


def test_resolves_against_reactive_store():
    store = ReactiveStore({"count": 1})
    store.set("count", 2)

    assert resolve("count={{ count }}", store) == "count=2"


def test_extract_keys_in_order_with_duplicates():
    assert extract_keys("Hello {{name}}, you are {{age}}") == ("name", "age")
    assert extract_keys("{{a}} {{ b }} {{a}}") == ("a", "b", "a")
    assert extract_keys("no markers here") == ()


@pytest.mark.parametrize("text", ["{{ name", "name }}", "{name}", "{{a{b}}", "{{ {x} }}"])
def test_malformed_markers_stay_literal(text):
    assert extract_keys(text) == ()
    assert resolve(text, {"name": "Ada", "a": 1, "x": 2}) == text


def test_substituted_values_are_not_resolved_again():
    state = {"a": "{{b}}", "b": "nested"}

    assert resolve("{{a}}", state) == "{{b}}"


def test_substituted_values_are_inserted_verbatim():
    assert resolve("{{path}}", {"path": r"C:\new\1"}) == r"C:\new\1"


def test_format_value():
    assert format_value(None) == ""
    assert format_value(0) == "0"
    assert format_value(1.5) == "1.5"
    assert format_value([1, 2]) == "[1, 2]"


class TestMissingKeyPolicy:
    """Undeclared names inside markers."""

    def test_empty_is_the_default(self):
        assert Interpolator().resolve("[{{ ghost }}]", {}) == "[]"

    def test_undefined(self):
        interpolator = Interpolator(MissingKeyPolicy.UNDEFINED)
        assert interpolator.resolve("[{{ ghost }}]", {}) == "[undefined]"

    def test_keep(self):
        interpolator = Interpolator("keep")
        assert interpolator.resolve("{{known}} {{ ghost }}", {"known": 1}) == "1 {{ ghost }}"

    def test_error(self):
        interpolator = Interpolator(MissingKeyPolicy.ERROR)
        with pytest.raises(UnknownPropertyError) as exc_info:
            interpolator.resolve("{{ ghost }}", {})
        assert exc_info.value.key == "ghost"

    def test_empty_marker_is_a_miss(self):
        assert extract_keys("{{}}") == ("",)
        assert Interpolator("undefined").resolve("{{}}", {"name": "x"}) == "undefined"

    def test_parse(self):
        assert MissingKeyPolicy.parse(" ERROR ") is MissingKeyPolicy.ERROR
        assert MissingKeyPolicy.parse(MissingKeyPolicy.KEEP) is MissingKeyPolicy.KEEP
        with pytest.raises(ValueError, match="expected one of"):
            MissingKeyPolicy.parse("ignore")
