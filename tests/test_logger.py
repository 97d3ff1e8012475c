"""
Logger Tests
"""

import io
import json

import pytest

from vmbind.utils.logger import (
    JsonFormatter,
    Logger,
    LogLevel,
    StreamHandler,
    configure_logging,
    get_logger,
)


def test_text_output_with_context():
    stream = io.StringIO()
    logger = Logger("test", level=LogLevel.DEBUG, handlers=[StreamHandler(stream)])

    logger.debug("Property changed", key="message")

    assert "[DEBUG] test: Property changed key=message" in stream.getvalue()


def test_level_filtering():
    stream = io.StringIO()
    logger = Logger("test", level=LogLevel.WARNING, handlers=[StreamHandler(stream)])

    logger.info("hidden")
    logger.warning("shown")

    assert "hidden" not in stream.getvalue()
    assert "shown" in stream.getvalue()


def test_json_output():
    stream = io.StringIO()
    logger = Logger("test", handlers=[StreamHandler(stream, JsonFormatter())])

    logger.warning("Unknown property referenced", key="ghost", node=object())

    record = json.loads(stream.getvalue())
    assert record["level"] == "WARNING"
    assert record["logger"] == "test"
    assert record["context"]["key"] == "ghost"
    assert record["context"]["node"].startswith("<object")


def test_with_context_shares_handlers():
    stream = io.StringIO()
    logger = Logger("test", level=LogLevel.INFO, handlers=[StreamHandler(stream)])

    logger.with_context(root="#app").info("Mounted", nodes=3)

    assert "Mounted root=#app nodes=3" in stream.getvalue()


def test_added_handler_belongs_to_one_logger():
    default_stream = io.StringIO()
    own_stream = io.StringIO()
    configure_logging(level="WARNING", stream=default_stream)
    owner = get_logger("vmbind.test.owner")
    other = get_logger("vmbind.test.other")

    owner.add_handler(StreamHandler(own_stream))
    other.warning("from another logger")
    owner.warning("from the owner")

    assert "from another logger" not in own_stream.getvalue()
    assert "from the owner" in own_stream.getvalue()
    assert "from another logger" in default_stream.getvalue()
    assert "from the owner" in default_stream.getvalue()
    assert len(other.handlers) == 1


def test_configure_logging_reaches_existing_loggers():
    stream = io.StringIO()
    logger = get_logger("vmbind.test.existing")

    configure_logging(level="debug", format="json", stream=stream)
    logger.debug("now visible", key="k")

    record = json.loads(stream.getvalue())
    assert record["logger"] == "vmbind.test.existing"
    assert record["message"] == "now visible"


def test_engine_logs_property_changes(mount):
    stream = io.StringIO()
    configure_logging(level="DEBUG", stream=stream)

    vm = mount("<p>{{ a }}</p>", data={"a": 1})
    vm.a = 2

    output = stream.getvalue()
    assert "Property changed key=a" in output
    assert "Patched rendered nodes key=a text_nodes=1" in output


def test_lookup_misses_are_warned(mount):
    stream = io.StringIO()
    configure_logging(level="WARNING", stream=stream)

    mount("<p>{{ ghost }}</p>")

    assert "Unknown property referenced key=ghost policy=empty" in stream.getvalue()


def test_invalid_settings():
    with pytest.raises(ValueError):
        LogLevel.parse("loud")
    with pytest.raises(ValueError):
        configure_logging(format="xml")
    assert LogLevel.parse(10) is LogLevel.DEBUG
