"""
vmbind Configuration Management
===============================

Layered configuration for the engine and the CLI.

Configuration Loading Priority (highest to lowest):
1. Runtime overrides (`config.set(...)`)
2. Environment variables (VMBIND_*)
3. JSON configuration files (`load_from_file`)
4. Built-in defaults

Environment variable names map to dotted keys with `__` between sections:

    VMBIND_ENGINE__MISSING_KEY=error   ->  engine.missing_key = "error"
    VMBIND_LOGGING__LEVEL=debug        ->  logging.level = "debug"

Example:
    config = Config()
    config.load_from_file("vmbind.json")
    config.load_env_overrides()

    config.get("engine.event_prefix")      # "@"
    config.get_bool("engine.sync_inputs")  # True
"""

from __future__ import annotations

import copy
import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, TypeVar, Union

from vmbind.engine.interpolation import MissingKeyPolicy

T = TypeVar("T")

ENV_PREFIX = "VMBIND_"

DEFAULTS: Dict[str, Any] = {
    "engine": {
        "directive_prefix": "v-",
        "event_prefix": "@",
        "model_directive": "v-model",
        "missing_key": "empty",
        "sync_inputs": True,
    },
    "logging": {
        "level": "WARNING",
        "format": "text",
    },
}


@dataclass
class ConfigSource:
    """Represents a configuration source with priority."""
    name: str
    data: Dict[str, Any] = field(default_factory=dict)
    priority: int = 0


@dataclass(frozen=True)
class EngineSettings:
    """Validated engine options, as read from a `Config`."""
    directive_prefix: str = "v-"
    event_prefix: str = "@"
    model_directive: str = "v-model"
    missing_key: MissingKeyPolicy = MissingKeyPolicy.EMPTY
    sync_inputs: bool = True


class Config:
    """
    Configuration container.

    Values are looked up with dot notation; sources are deep-merged in
    priority order, higher priorities winning.

    Example:
        config = Config()
        config.set("engine.sync_inputs", False)

        config.get("engine.sync_inputs")             # False
        config.get("engine.missing", "default")      # "default"
    """

    def __init__(self, defaults: bool = True) -> None:
        self._sources: List[ConfigSource] = []
        self._cache: Dict[str, Any] = {}
        self._merged: Dict[str, Any] = {}
        self._dirty = True

        if defaults:
            self.add_source("defaults", copy.deepcopy(DEFAULTS), priority=0)

    def load_from_file(self, path: Union[str, Path], priority: int = 10) -> None:
        """
        Load a JSON configuration file.

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If the file is not a JSON object
        """
        path = Path(path)
        data = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"Configuration file must contain a JSON object: {path}")
        self.add_source(f"file:{path}", data, priority=priority)

    def load_env_overrides(self, environ: Optional[Mapping[str, str]] = None) -> None:
        """Load overrides from VMBIND_* environment variables."""
        environ = os.environ if environ is None else environ
        overrides: Dict[str, Any] = {}

        for key, value in environ.items():
            if key.startswith(ENV_PREFIX):
                # VMBIND_ENGINE__SYNC_INPUTS -> engine.sync_inputs
                config_key = key[len(ENV_PREFIX):].lower().replace("__", ".")
                overrides[config_key] = parse_value(value)

        if overrides:
            self.add_source("env_vars", self._unflatten(overrides), priority=100)

    def _unflatten(self, flat: Dict[str, Any]) -> Dict[str, Any]:
        """Convert flat dot-notation keys to nested dict."""
        result: Dict[str, Any] = {}

        for key, value in flat.items():
            parts = key.split(".")
            current = result

            for part in parts[:-1]:
                current = current.setdefault(part, {})

            current[parts[-1]] = value

        return result

    def add_source(
        self,
        name: str,
        data: Dict[str, Any],
        priority: int = 0,
    ) -> None:
        """Add a configuration source."""
        self._sources.append(ConfigSource(name=name, data=data, priority=priority))
        self._dirty = True
        self._cache.clear()

    def _merge(self) -> None:
        """Merge all sources into single configuration."""
        if not self._dirty:
            return

        # Lower priority first, so higher overrides
        self._merged = {}
        for source in sorted(self._sources, key=lambda s: s.priority):
            self._deep_merge(self._merged, copy.deepcopy(source.data))

        self._dirty = False
        self._cache.clear()

    def _deep_merge(self, base: Dict, override: Dict) -> None:
        """Deep merge override into base."""
        for key, value in override.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._deep_merge(base[key], value)
            else:
                base[key] = value

    def get(self, key: str, default: T = None) -> Union[Any, T]:
        """
        Get configuration value using dot notation.

        Args:
            key: Configuration key (e.g., "engine.event_prefix")
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        self._merge()

        if key in self._cache:
            return self._cache[key]

        current: Any = self._merged
        for part in key.split("."):
            if not isinstance(current, dict) or part not in current:
                return default
            current = current[part]

        self._cache[key] = current
        return current

    def get_bool(self, key: str, default: bool = False) -> bool:
        """Get configuration value as boolean."""
        value = self.get(key, default)
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.strip().lower() in ("true", "yes", "1", "on")
        return bool(value)

    def get_str(self, key: str, default: str = "") -> str:
        """Get configuration value as string."""
        value = self.get(key, default)
        return default if value is None else str(value)

    def set(self, key: str, value: Any) -> None:
        """
        Set a runtime configuration value.

        Runtime values have the highest priority.
        """
        runtime_source = next(
            (source for source in self._sources if source.name == "runtime"),
            None,
        )
        if runtime_source is None:
            runtime_source = ConfigSource(name="runtime", priority=1000)
            self._sources.append(runtime_source)

        parts = key.split(".")
        current = runtime_source.data
        for part in parts[:-1]:
            current = current.setdefault(part, {})
        current[parts[-1]] = value

        self._dirty = True
        self._cache.clear()

    def has(self, key: str) -> bool:
        """Check if configuration key exists."""
        return self.get(key) is not None

    def all(self) -> Dict[str, Any]:
        """Get all configuration as dict."""
        self._merge()
        return copy.deepcopy(self._merged)

    def section(self, prefix: str) -> Dict[str, Any]:
        """Get all values under a prefix."""
        value = self.get(prefix)
        if isinstance(value, dict):
            return copy.deepcopy(value)
        return {}

    def engine_settings(self) -> EngineSettings:
        """
        Read and validate the `engine.*` section.

        Raises:
            ValueError: For an unknown missing-key policy or empty prefixes
        """
        settings = EngineSettings(
            directive_prefix=self.get_str("engine.directive_prefix", "v-"),
            event_prefix=self.get_str("engine.event_prefix", "@"),
            model_directive=self.get_str("engine.model_directive", "v-model"),
            missing_key=MissingKeyPolicy.parse(self.get_str("engine.missing_key", "empty")),
            sync_inputs=self.get_bool("engine.sync_inputs", True),
        )
        if not settings.model_directive.startswith(settings.directive_prefix):
            raise ValueError(
                f"Model directive {settings.model_directive!r} does not start with "
                f"the directive prefix {settings.directive_prefix!r}"
            )
        return settings

    def __getitem__(self, key: str) -> Any:
        """Allow dict-like access."""
        value = self.get(key)
        if value is None:
            raise KeyError(key)
        return value

    def __setitem__(self, key: str, value: Any) -> None:
        """Allow dict-like setting."""
        self.set(key, value)

    def __contains__(self, key: str) -> bool:
        """Check if key exists."""
        return self.has(key)


def parse_value(value: str) -> Any:
    """Parse a string from the environment or the command line."""
    lowered = value.strip().lower()
    if lowered in ("true", "yes"):
        return True
    if lowered in ("false", "no"):
        return False
    if lowered in ("null", "none"):
        return None

    try:
        return int(value)
    except ValueError:
        pass

    try:
        return float(value)
    except ValueError:
        pass

    # JSON (for complex values)
    if value.startswith(("{", "[", '"')):
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            pass

    return value


# Global configuration instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get global configuration instance, with environment overrides applied."""
    global _config
    if _config is None:
        _config = Config()
        _config.load_env_overrides()
    return _config


def reset_config() -> None:
    """Drop the global instance; the next `get_config()` builds a new one."""
    global _config
    _config = None
