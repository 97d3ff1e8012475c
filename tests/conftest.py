"""
Shared test fixtures.
"""

import os

import pytest

from vmbind.core.config import Config, reset_config
from vmbind.core.viewmodel import ViewModel
from vmbind.dom.nodes import Document
from vmbind.utils.logger import configure_logging


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    """Keep VMBIND_* variables, global config and log setup out of tests."""
    for key in list(os.environ):
        if key.startswith("VMBIND_"):
            monkeypatch.delenv(key)
    reset_config()
    yield
    reset_config()
    configure_logging(level="WARNING")


@pytest.fixture
def config():
    return Config()


@pytest.fixture
def mount(config):
    """Build a view model over `<div id="app">markup</div>`."""

    def _mount(markup, **options):
        document = Document.from_html(f'<div id="app">{markup}</div>')
        options.setdefault("config", config)
        return ViewModel(el="#app", document=document, **options)

    return _mount
