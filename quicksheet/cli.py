#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
CLI interface for quicksheet.

Usage:
    quicksheet <command> [args]
    python3 -m quicksheet.cli <command> [args]

With no command, the interactive TUI (watch) is launched.
"""

import argparse
import sys

from quicksheet._version import __version__
from quicksheet.commands import COMMAND_REGISTRY, dispatch_command
from quicksheet.debug_logger import get_logger
from quicksheet.manager import QuickSheet
from quicksheet.models import CopyPreset, RankingMode
from quicksheet.storage import Storage

PRESET_CHOICES = [p.value for p in CopyPreset]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="quicksheet - physics constants and equations at your fingertips"
    )
    parser.add_argument(
        "--version", action="version", version=f"quicksheet {__version__}"
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # search command
    search_parser = subparsers.add_parser("search", help="Search items")
    search_parser.add_argument("query", nargs="?", default="", help="Search text (empty to browse)")
    search_parser.add_argument("--category", "-c", help="Restrict to one category")
    search_parser.add_argument(
        "--mode", "-m",
        choices=[m.value for m in RankingMode],
        help="Browsing order for this search (not saved)",
    )
    search_parser.add_argument("--limit", "-n", type=int, default=None, help="Maximum items shown")

    # copy command
    copy_parser = subparsers.add_parser("copy", help="Print copy text for an item and record the use")
    copy_parser.add_argument("item_id", help="Item ID")
    copy_parser.add_argument("--preset", "-p", choices=PRESET_CHOICES, help="Copy format")
    copy_parser.add_argument("--value", action="store_true", help="Copy only value and units")

    # top command
    top_parser = subparsers.add_parser("top", help="Copy the top result for a query")
    top_parser.add_argument("query", help="Search text")
    top_parser.add_argument("--category", "-c", help="Restrict to one category")
    top_parser.add_argument("--preset", "-p", choices=PRESET_CHOICES, help="Copy format")

    subparsers.add_parser("categories", help="List categories in selector order")

    list_parser = subparsers.add_parser("list", help="List stored items")
    list_parser.add_argument("--category", "-c", help="Restrict to one category")

    subparsers.add_parser("reset-learning", help="Forget learned usage")
    subparsers.add_parser("reset-seed", help="Replace all items with the built-in set")

    import_parser = subparsers.add_parser("import", help="Import items from JSON")
    import_parser.add_argument("file", help="JSON file, or - for stdin")

    export_parser = subparsers.add_parser("export", help="Export items and preferences as JSON")
    export_parser.add_argument("file", nargs="?", help="Output file (default: stdout)")

    prefs_parser = subparsers.add_parser("prefs", help="Show or update preferences")
    prefs_parser.add_argument(
        "--set", "-s", action="append", metavar="KEY=VALUE",
        help="Set a preference (value parsed as JSON when possible)",
    )

    # config command - read settings for shell scripts
    config_parser = subparsers.add_parser("config", help="Get configuration value")
    config_parser.add_argument("key", help="Config key (dot notation, e.g., copyToggles.includeUnits)")
    config_parser.add_argument("--default", "-d", default="", help="Default value if key not found")
    config_parser.add_argument(
        "--type", "-t",
        choices=["string", "int", "float", "bool"],
        default="string",
        help="Value type",
    )

    # watch command - interactive TUI
    watch_parser = subparsers.add_parser("watch", help="Launch the interactive search TUI")
    watch_parser.add_argument("--query", "-q", default="", help="Initial search text")

    return parser


def _print_config(args: argparse.Namespace) -> None:
    from quicksheet.config import (
        get_bool_setting,
        get_float_setting,
        get_int_setting,
        get_setting,
    )

    if args.type == "bool":
        default_bool = args.default.lower() in ("true", "1", "yes") if args.default else False
        print("true" if get_bool_setting(args.key, default_bool) else "false")
    elif args.type == "int":
        print(get_int_setting(args.key, int(args.default) if args.default else 0))
    elif args.type == "float":
        print(get_float_setting(args.key, float(args.default) if args.default else 0.0))
    else:
        value = get_setting(args.key, args.default if args.default else None)
        print(value if value is not None else "")


def main(argv=None):
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        # Default to TUI (watch) when no subcommand given
        args.command = "watch"
        args.query = ""

    try:
        if args.command == "config":
            _print_config(args)
            return 0

        manager = QuickSheet(Storage())

        if args.command in COMMAND_REGISTRY:
            code = dispatch_command(args, manager)
            if code:
                sys.exit(code)
            return code

        if args.command == "watch":
            from quicksheet.tui.app import QuickSheetApp

            app = QuickSheetApp(manager, initial_query=args.query)
            app.run()
            return 0

    except ValueError as e:
        get_logger().error(args.command, str(e))
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    parser.print_help()
    sys.exit(1)


if __name__ == "__main__":
    main()
