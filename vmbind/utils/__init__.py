"""
vmbind Utils Package
====================

Logging helpers shared by the engine, the view model and the CLI.
"""

from __future__ import annotations

from vmbind.utils.logger import (
    JsonFormatter,
    Logger,
    LogLevel,
    StreamHandler,
    TextFormatter,
    configure_logging,
    get_logger,
)

__all__ = [
    "JsonFormatter",
    "Logger",
    "LogLevel",
    "StreamHandler",
    "TextFormatter",
    "configure_logging",
    "get_logger",
]
