"""
vmbind CLI Main Module
======================

Main CLI entry point with all commands.
"""

from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from vmbind import __version__
from vmbind.core.config import Config
from vmbind.utils.logger import configure_logging


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser."""
    parser = argparse.ArgumentParser(
        prog="vmbind",
        description="Reactive view binding for HTML markup",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  vmbind render page.html --data '{"name": "Ada"}'
  vmbind render page.html --el "#app" --data-file data.json --set name=Grace
  vmbind compile page.html --el "#app"
        """,
    )

    parser.add_argument(
        "-v", "--version",
        action="version",
        version=f"vmbind {__version__}",
    )
    parser.add_argument(
        "--config",
        help="JSON configuration file",
    )
    parser.add_argument(
        "--log-level",
        help="Log level (debug, info, warning, error)",
    )
    parser.add_argument(
        "--log-format",
        choices=["text", "json"],
        help="Log output format",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Render command
    render_parser = subparsers.add_parser(
        "render",
        help="Mount a view model on a markup file and print the result",
    )
    render_parser.add_argument(
        "file",
        help="HTML file",
    )
    render_parser.add_argument(
        "--el",
        default="#app",
        help="Selector of the root element (default: #app)",
    )
    data_group = render_parser.add_mutually_exclusive_group()
    data_group.add_argument(
        "--data",
        help="Initial data as a JSON object",
    )
    data_group.add_argument(
        "--data-file",
        help="File holding the initial data as a JSON object",
    )
    render_parser.add_argument(
        "--set",
        dest="sets",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Property write applied after mounting (repeatable)",
    )

    # Compile command
    compile_parser = subparsers.add_parser(
        "compile",
        help="Print the compiled node records of a markup file as JSON",
    )
    compile_parser.add_argument(
        "file",
        help="HTML file",
    )
    compile_parser.add_argument(
        "--el",
        default="#app",
        help="Selector of the root element (default: #app)",
    )

    return parser


def load_config(args: argparse.Namespace) -> Config:
    """Build configuration from defaults, environment, file and flags."""
    config = Config()
    if args.config:
        config.load_from_file(args.config)
    config.load_env_overrides()

    if args.log_level:
        config.set("logging.level", args.log_level)
    if args.log_format:
        config.set("logging.format", args.log_format)

    return config


def cli(args: Optional[List[str]] = None) -> int:
    """
    Main CLI entry point.

    Args:
        args: Command line arguments (uses sys.argv if None)

    Returns:
        Exit code
    """
    parser = create_parser()
    parsed = parser.parse_args(args)

    if not parsed.command:
        parser.print_help()
        return 0

    handlers = {
        "render": handle_render,
        "compile": handle_compile,
    }

    try:
        config = load_config(parsed)
        configure_logging(
            level=config.get_str("logging.level", "WARNING"),
            format=config.get_str("logging.format", "text"),
        )
        return handlers[parsed.command](parsed, config)
    except KeyboardInterrupt:
        print("\nAborted.", file=sys.stderr)
        return 130
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def handle_render(args: argparse.Namespace, config: Config) -> int:
    """Handle render command."""
    from vmbind.cli.commands.render import render_file
    return render_file(args.file, args.el, args.data, args.data_file, args.sets, config)


def handle_compile(args: argparse.Namespace, config: Config) -> int:
    """Handle compile command."""
    from vmbind.cli.commands.compile import compile_file
    return compile_file(args.file, args.el, config)


def main() -> None:
    """Main entry point."""
    sys.exit(cli())


if __name__ == "__main__":
    main()
