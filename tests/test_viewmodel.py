"""
View Model Tests
"""

import pytest

from vmbind.core.config import Config
from vmbind.core.options import InvalidOptionsError
from vmbind.core.viewmodel import ElementNotFoundError, ViewModel, ViewModelError
from vmbind.dom.nodes import Document, Element, Event
from vmbind.engine.materializer import UnknownMethodError
from vmbind.engine.reactive import UnknownPropertyError


def type_into(element, text):
    """Simulate a user edit of an input."""
    element.value = text
    element.dispatch_event(Event("input", bubbles=True))


def test_renders_interpolated_text(mount):
    vm = mount("<h1>Hello {{ name }}, you are {{ age }}</h1>", data={"name": "Ada", "age": 30})

    assert vm.el.inner_html == "<h1>Hello Ada, you are 30</h1>"
    assert vm.name == "Ada"


def test_original_content_is_replaced(mount):
    vm = mount("<!-- c -->\n<p>{{ a }}</p>\n", data={"a": 1})

    assert vm.el.inner_html == "<p>1</p>"
    assert vm.el.child_nodes[0] is vm.records[1].rendered_node


def test_property_write_updates_only_matching_text(mount):
    vm = mount("<p>{{a}}</p><p>{{b}}</p>", data={"a": "one", "b": "two"})
    second = vm.el.child_nodes[1].child_nodes[0]
    second_before = second.data

    vm.a = "uno"

    assert vm.el.inner_html == "<p>uno</p><p>two</p>"
    assert second.data == second_before


def test_nested_text_is_updated(mount):
    vm = mount("<div><ul><li>Total: {{ total }}</li></ul></div>", data={"total": 0})

    vm.total = 42

    assert vm.el.query_selector("li").text_content == "Total: 42"


def test_same_value_twice_rescans_each_time(mount, monkeypatch):
    vm = mount("<p>{{ n }}</p>", data={"n": 1})
    updater = vm._updater
    scans = []
    original = updater.update_for_key

    def counting(key):
        scans.append(key)
        return original(key)

    monkeypatch.setattr(updater, "update_for_key", counting)

    vm.n = 7
    first = vm.el.inner_html
    vm.n = 7
    second = vm.el.inner_html

    assert first == second == "<p>7</p>"
    assert scans == ["n", "n"]


def test_two_way_binding_round_trip(mount):
    vm = mount('<input v-model="k"><p>{{ k }}</p>', data={"k": "x"})
    element = vm.el.query_selector("input")

    assert element.value == "x"

    type_into(element, "y")
    assert vm.k == "y"
    assert vm.el.query_selector("p").text_content == "y"
    assert element.value == "y"

    vm.k = "z"
    assert vm.el.query_selector("p").text_content == "z"
    assert element.value == "z"


def test_bound_input_is_not_resynced_when_disabled(mount, config):
    config.set("engine.sync_inputs", False)
    vm = mount('<input v-model="k"><p>{{ k }}</p>', data={"k": "x"})
    element = vm.el.query_selector("input")

    type_into(element, "y")
    assert vm.k == "y"

    vm.k = "z"

    # Only text nodes follow programmatic writes in this mode
    assert vm.el.query_selector("p").text_content == "z"
    assert element.value == "y"


def test_event_calls_bound_method_with_event(mount):
    calls = []

    def handle_click(vm, event):
        calls.append((vm, event))

    vm = mount('<button @click="handleClick">Go</button>', methods={"handleClick": handle_click})
    button = vm.el.query_selector("button")

    event = Event("click")
    button.dispatch_event(event)

    assert calls == [(vm, event)]
    assert vm.handleClick.__self__ is vm
    assert vm.methods["handleClick"].__func__ is handle_click


def test_handler_writes_patch_the_view(mount):
    def increment(vm, event):
        vm.count += 1

    vm = mount(
        '<button @click="increment">+</button><span>{{ count }}</span>',
        data={"count": 0},
        methods={"increment": increment},
    )
    button = vm.el.query_selector("button")

    button.dispatch_event(Event("click"))
    button.dispatch_event(Event("click"))

    assert vm.el.query_selector("span").text_content == "2"


def test_missing_handler_raises_on_dispatch(mount):
    vm = mount('<button @click="nope">Go</button>')

    with pytest.raises(UnknownMethodError):
        vm.el.query_selector("button").dispatch_event(Event("click"))


def test_lifecycle_hooks(mount):
    seen = []

    def created(vm):
        seen.append(("created", vm.el.inner_html, vm.records))
        vm.message = "from created"

    def mounted(vm):
        seen.append(("mounted", vm.el.inner_html))

    mount("<p>{{ message }}</p>", data={"message": "hi"}, created=created, mounted=mounted)

    assert seen == [
        ("created", "<p>{{ message }}</p>", ()),
        ("mounted", "<p>from created</p>"),
    ]


def test_missing_root_fails_before_anything_runs():
    document = Document.from_html('<div id="app"></div>')
    created = []

    with pytest.raises(ElementNotFoundError) as exc_info:
        ViewModel(el="#nope", document=document, created=created.append, config=Config())
    assert exc_info.value.el == "#nope"
    assert created == []

    with pytest.raises(ElementNotFoundError):
        ViewModel(el="#app", config=Config())


def test_root_can_be_given_as_element():
    root = Element("div")
    root.inner_html = "<b>{{ x }}</b>"

    vm = ViewModel(el=root, data={"x": "ok"}, config=Config())

    assert vm.el is root
    assert root.inner_html == "<b>ok</b>"
    assert isinstance(vm.document, Document)


def test_options_mapping_and_keyword_overrides(config):
    document = Document.from_html('<div id="app">{{ a }}</div><div id="other">{{ a }}</div>')

    vm = ViewModel({"el": "#app", "data": {"a": 1}}, document=document, config=config, el="#other")

    assert vm.el.id == "other"
    assert vm.data == {"a": 1}


@pytest.mark.parametrize("options", [
    {"colour": "red"},
    {"data": {"go": 1}, "methods": {"go": print}},
    {"data": {"el": 1}},
    {"methods": {"store": print}},
    {"data": {"_hidden": 1}},
    {"methods": {"run": "not callable"}},
    {"mounted": 3},
])
def test_invalid_options(mount, options):
    with pytest.raises(InvalidOptionsError) as exc_info:
        mount("", **options)
    assert isinstance(exc_info.value, ViewModelError)
    assert isinstance(exc_info.value, ValueError)


def test_invalid_selector_is_an_options_error(config):
    with pytest.raises(InvalidOptionsError):
        ViewModel(el="div p", document=Document(), config=config)


def test_attribute_access(mount):
    vm = mount("", data={"a": 1})

    with pytest.raises(AttributeError):
        vm.missing

    vm.extra = "plain"
    assert vm.extra == "plain"
    assert "extra" not in vm.store


def test_store_rejects_undeclared_keys(mount):
    vm = mount("", data={"a": 1})

    with pytest.raises(UnknownPropertyError):
        vm.store.set("b", 2)


class TestMissingKeys:
    """Markers and bindings naming undeclared properties."""

    def test_default_substitutes_empty_text(self, mount):
        vm = mount("<p>[{{ ghost }}]</p><input v-model=\"ghost\">")

        assert vm.el.query_selector("p").text_content == "[]"
        assert vm.el.query_selector("input").value == ""

    def test_undefined_policy(self, mount, config):
        config.set("engine.missing_key", "undefined")
        vm = mount("<p>{{ ghost }}</p>")

        assert vm.el.query_selector("p").text_content == "undefined"

    def test_error_policy_fails_construction(self, mount, config):
        config.set("engine.missing_key", "error")

        with pytest.raises(UnknownPropertyError):
            mount("<p>{{ ghost }}</p>")


def test_custom_prefixes_from_config(mount, config):
    config.set("engine.directive_prefix", "x-")
    config.set("engine.event_prefix", "on-")
    config.set("engine.model_directive", "x-model")
    clicks = []

    vm = mount(
        '<input x-model="k"><button on-click="hit">b</button>',
        data={"k": "v"},
        methods={"hit": lambda vm, event: clicks.append(event.type)},
    )
    vm.el.query_selector("button").dispatch_event(Event("click"))

    assert vm.el.query_selector("input").value == "v"
    assert clicks == ["click"]


def test_uses_global_config_by_default(monkeypatch):
    monkeypatch.setenv("VMBIND_ENGINE__MISSING_KEY", "keep")
    document = Document.from_html('<div id="app">{{ ghost }}</div>')

    vm = ViewModel(el="#app", document=document)

    assert vm.el.inner_html == "{{ ghost }}"
