"""
Configuration Tests
"""

import json

import pytest

from vmbind.core.config import Config, get_config, parse_value, reset_config
from vmbind.engine.interpolation import MissingKeyPolicy


def test_defaults():
    config = Config()

    assert config.get("engine.directive_prefix") == "v-"
    assert config.get("engine.event_prefix") == "@"
    assert config.get("engine.model_directive") == "v-model"
    assert config.get("engine.missing_key") == "empty"
    assert config.get_bool("engine.sync_inputs") is True
    assert config.get("logging.level") == "WARNING"


def test_missing_keys_return_default():
    config = Config()

    assert config.get("engine.nothing", "fallback") == "fallback"
    assert config.get("engine.directive_prefix.deeper") is None
    assert "engine.nothing" not in config
    with pytest.raises(KeyError):
        config["engine.nothing"]


def test_runtime_set_wins():
    config = Config()
    config.set("engine.sync_inputs", False)
    config["logging.level"] = "DEBUG"

    assert config.get_bool("engine.sync_inputs") is False
    assert config["logging.level"] == "DEBUG"
    # Untouched siblings survive the merge
    assert config.get("engine.event_prefix") == "@"


def test_file_source(tmp_path):
    path = tmp_path / "vmbind.json"
    path.write_text(json.dumps({"engine": {"missing_key": "keep"}}))
    config = Config()

    config.load_from_file(path)

    assert config.get("engine.missing_key") == "keep"
    assert config.get("engine.directive_prefix") == "v-"


def test_file_must_hold_an_object(tmp_path):
    path = tmp_path / "vmbind.json"
    path.write_text("[1, 2]")

    with pytest.raises(ValueError):
        Config().load_from_file(path)


def test_env_overrides_beat_files(tmp_path):
    path = tmp_path / "vmbind.json"
    path.write_text(json.dumps({"engine": {"missing_key": "keep", "sync_inputs": True}}))
    config = Config()
    config.load_from_file(path)

    config.load_env_overrides({
        "VMBIND_ENGINE__MISSING_KEY": "error",
        "VMBIND_ENGINE__SYNC_INPUTS": "false",
        "UNRELATED": "x",
    })

    assert config.get("engine.missing_key") == "error"
    assert config.get_bool("engine.sync_inputs") is False
    assert config.section("engine")["event_prefix"] == "@"


def test_section_and_all_are_copies():
    config = Config()
    config.section("engine")["event_prefix"] = "changed"
    config.all()["engine"]["event_prefix"] = "changed"

    assert config.get("engine.event_prefix") == "@"
    assert config.section("nothing") == {}


def test_engine_settings():
    config = Config()
    config.set("engine.missing_key", "ERROR")
    config.set("engine.sync_inputs", "no")

    settings = config.engine_settings()

    assert settings.missing_key is MissingKeyPolicy.ERROR
    assert settings.sync_inputs is False
    assert settings.model_directive == "v-model"


def test_engine_settings_validation():
    config = Config()
    config.set("engine.missing_key", "shrug")
    with pytest.raises(ValueError):
        config.engine_settings()

    config = Config()
    config.set("engine.model_directive", "model")
    with pytest.raises(ValueError):
        config.engine_settings()


def test_config_without_defaults():
    assert Config(defaults=False).all() == {}


def test_global_config_reads_environment(monkeypatch):
    monkeypatch.setenv("VMBIND_LOGGING__LEVEL", "debug")
    reset_config()

    config = get_config()

    assert config.get("logging.level") == "debug"
    assert get_config() is config


@pytest.mark.parametrize("raw, expected", [
    ("true", True),
    ("No", False),
    ("null", None),
    ("42", 42),
    ("1.5", 1.5),
    ('{"a": 1}', {"a": 1}),
    ("[1, 2]", [1, 2]),
    ('"7"', "7"),
    ("plain text", "plain text"),
    ("{broken", "{broken"),
])
def test_parse_value(raw, expected):
    assert parse_value(raw) == expected
