"""
vmbind Core Module
==================

View model construction, options and configuration.
"""

from vmbind.core.config import Config, EngineSettings, get_config, reset_config
from vmbind.core.options import InvalidOptionsError, ViewModelOptions, merge_options
from vmbind.core.viewmodel import ElementNotFoundError, ViewModel, ViewModelError

__all__ = [
    "Config",
    "EngineSettings",
    "get_config",
    "reset_config",
    "InvalidOptionsError",
    "ViewModelOptions",
    "merge_options",
    "ElementNotFoundError",
    "ViewModel",
    "ViewModelError",
]
