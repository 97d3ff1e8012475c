"""
vmbind Logger
=============

Structured logging for the binding engine.

Every engine module asks for a named logger once at import time:

    logger = get_logger("vmbind.engine.updater")
    logger.debug("Patched rendered nodes", key="message", text_nodes=2)

Named loggers write to the shared default output, which
`configure_logging()` replaces for loggers that already exist as well as
for the ones created afterwards. Handlers added to one logger with
`add_handler()` belong to that logger only.
"""

from __future__ import annotations

import json
import logging
import sys
from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from typing import Any, Dict, Iterator, List, Optional, TextIO, Union


class LogLevel(IntEnum):
    """Log levels."""

    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR

    @classmethod
    def parse(cls, value: Union[str, int, "LogLevel"]) -> "LogLevel":
        """Convert "debug", "WARNING", 10 ... into a level."""
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                raise ValueError(f"Unknown log level: {value!r}") from None
        return cls(value)


@dataclass
class LogRecord:
    """One log event: level, message and key/value context."""

    level: LogLevel
    message: str
    logger_name: str = "vmbind"
    context: Dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "timestamp": self.timestamp.isoformat(),
            "level": self.level.name,
            "logger": self.logger_name,
            "message": self.message,
        }
        if self.context:
            data["context"] = self.context
        return data


class LogFormatter:
    """Base log formatter."""

    def format(self, record: LogRecord) -> str:
        raise NotImplementedError


class TextFormatter(LogFormatter):
    """
    Single-line text.

    Example output:
        2024-01-15 10:30:45 [DEBUG] vmbind.engine.updater: Patched rendered nodes key=message text_nodes=2
    """

    def __init__(self, date_format: str = "%Y-%m-%d %H:%M:%S") -> None:
        self.date_format = date_format

    def format(self, record: LogRecord) -> str:
        message = record.message
        if record.context:
            pairs = " ".join(f"{k}={v}" for k, v in record.context.items())
            message = f"{message} {pairs}"

        timestamp = record.timestamp.strftime(self.date_format)
        return f"{timestamp} [{record.level.name}] {record.logger_name}: {message}"


class JsonFormatter(LogFormatter):
    """One JSON object per line; context values that JSON cannot hold are repr'd."""

    def format(self, record: LogRecord) -> str:
        return json.dumps(record.to_dict(), default=repr)


class StreamHandler:
    """
    Writes formatted records to a stream.

    The stream is looked up on every write when none is given, so a
    redirected `sys.stderr` (CLI capture, tests) is honoured.
    """

    def __init__(
        self,
        stream: Optional[TextIO] = None,
        formatter: Optional[LogFormatter] = None,
        level: LogLevel = LogLevel.DEBUG,
    ) -> None:
        self._stream = stream
        self.formatter = formatter or TextFormatter()
        self.level = level

    @property
    def stream(self) -> TextIO:
        return self._stream or sys.stderr

    def handle(self, record: LogRecord) -> None:
        if record.level < self.level:
            return
        self.stream.write(self.formatter.format(record) + "\n")
        self.stream.flush()


class Logger:
    """
    Structured logger.

    Args:
        name: Logger name
        level: Minimum log level
        handlers: Handlers owned by this logger
        use_defaults: Also write to the default handlers set up by
            `configure_logging()`

    Example:
        logger = get_logger("vmbind.core.viewmodel")
        logger.debug("Property changed", key="message")

        scoped = logger.with_context(root="#app")
        scoped.debug("Mounted", nodes=3)   # ... Mounted root=#app nodes=3
    """

    def __init__(
        self,
        name: str = "vmbind",
        level: LogLevel = LogLevel.WARNING,
        handlers: Optional[List[StreamHandler]] = None,
        use_defaults: bool = False,
    ) -> None:
        self.name = name
        self.level = level
        self.use_defaults = use_defaults
        self._handlers: List[StreamHandler] = list(handlers or ())
        self._context: Dict[str, Any] = {}

    def add_handler(self, handler: StreamHandler) -> "Logger":
        self._handlers.append(handler)
        return self

    @property
    def handlers(self) -> List[StreamHandler]:
        return list(self._iter_handlers())

    def _iter_handlers(self) -> Iterator[StreamHandler]:
        if self.use_defaults:
            yield from _default_handlers
        yield from self._handlers

    def with_context(self, **context: Any) -> "Logger":
        """New logger adding `context` to every record; it writes where this one does."""
        scoped = Logger(self.name, self.level, use_defaults=self.use_defaults)
        scoped._handlers = self._handlers
        scoped._context = {**self._context, **context}
        return scoped

    def _log(self, level: LogLevel, message: str, context: Dict[str, Any]) -> None:
        if level < self.level:
            return

        record = LogRecord(
            level=level,
            message=message,
            logger_name=self.name,
            context={**self._context, **context},
        )
        for handler in self._iter_handlers():
            try:
                handler.handle(record)
            except Exception:
                pass  # Don't let logging errors break rendering

    def debug(self, message: str, **context: Any) -> None:
        self._log(LogLevel.DEBUG, message, context)

    def info(self, message: str, **context: Any) -> None:
        self._log(LogLevel.INFO, message, context)

    def warning(self, message: str, **context: Any) -> None:
        self._log(LogLevel.WARNING, message, context)


_loggers: Dict[str, Logger] = {}
_default_level: LogLevel = LogLevel.WARNING
_default_handlers: List[StreamHandler] = [StreamHandler()]


def get_logger(name: str = "vmbind") -> Logger:
    """Get or create the named logger writing to the default handlers."""
    if name not in _loggers:
        _loggers[name] = Logger(name=name, level=_default_level, use_defaults=True)
    return _loggers[name]


def configure_logging(
    level: Union[LogLevel, str, int] = LogLevel.WARNING,
    format: str = "text",
    stream: Optional[TextIO] = None,
) -> Logger:
    """
    Configure level and default output of every vmbind logger.

    Args:
        level: Log level (name or number accepted)
        format: Output format ("text" or "json")
        stream: Output stream, stderr by default

    Returns:
        The root "vmbind" logger

    Raises:
        ValueError: For an unknown level or format
    """
    global _default_level

    level = LogLevel.parse(level)
    if format == "json":
        formatter: LogFormatter = JsonFormatter()
    elif format == "text":
        formatter = TextFormatter()
    else:
        raise ValueError(f"Unknown log format: {format!r}")

    _default_level = level
    _default_handlers[:] = [StreamHandler(stream=stream, formatter=formatter, level=level)]

    for logger in _loggers.values():
        logger.level = level

    return get_logger("vmbind")
