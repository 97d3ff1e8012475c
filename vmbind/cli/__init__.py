"""
vmbind CLI
==========

Command-line interface.

Commands:
- render: Mount a view model on a markup file and print the result
- compile: Print compiled node records as JSON
"""

from vmbind.cli.main import main, cli

__all__ = ["main", "cli"]
