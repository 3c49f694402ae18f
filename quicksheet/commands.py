#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
Command pattern implementation for the CLI.

Each command is a class that implements the Command interface:
- execute(args, manager) -> int

Commands are registered in COMMAND_REGISTRY and dispatched via dispatch_command().
"""

import json
import sys
from abc import ABC, abstractmethod
from argparse import Namespace
from pathlib import Path
from typing import Any, Dict, Type

from quicksheet import prefs as prefs_store
from quicksheet.grouping import option_label
from quicksheet.models import CopyPreset, RankingMode


class Command(ABC):
    """Abstract base class for all CLI commands.

    Commands receive parsed args and a QuickSheet instance.
    """

    @abstractmethod
    def execute(self, args: Namespace, manager: Any) -> int:
        """Execute the command.

        Args:
            args: Parsed command-line arguments
            manager: QuickSheet instance

        Returns:
            Exit code (0 for success, non-zero for errors)
        """
        pass


def _parse_preset(value: Any) -> Any:
    if value is None:
        return None
    try:
        return CopyPreset(value)
    except ValueError:
        raise ValueError(f"Unknown preset: {value}")


# =============================================================================
# Search Commands
# =============================================================================


class SearchCommand(Command):
    """Rank items for a query and print them by section."""

    def execute(self, args: Namespace, manager: Any) -> int:
        mode = getattr(args, "mode", None)
        if mode:
            # Per-invocation override, not persisted
            manager.prefs.ranking.ranking_mode = RankingMode.parse(mode)
        result = manager.search(getattr(args, "query", "") or "", getattr(args, "category", None))
        print(result.format(limit=getattr(args, "limit", None)))
        return 0


class CopyCommand(Command):
    """Print the copy text for an item and record the use."""

    def execute(self, args: Namespace, manager: Any) -> int:
        result = manager.copy(
            args.item_id,
            preset=_parse_preset(getattr(args, "preset", None)),
            value_only_text=getattr(args, "value", False),
        )
        print(result.format())
        return 0


class TopCommand(Command):
    """Copy the top result for a query."""

    def execute(self, args: Namespace, manager: Any) -> int:
        result = manager.copy_top(
            args.query,
            getattr(args, "category", None),
            preset=_parse_preset(getattr(args, "preset", None)),
        )
        if result is None:
            print("(no results)", file=sys.stderr)
            return 1
        print(result.format())
        return 0


class CategoriesCommand(Command):
    """List the category selector options in display order."""

    def execute(self, args: Namespace, manager: Any) -> int:
        for value in manager.categories():
            print(option_label(value))
        return 0


class ListCommand(Command):
    """List stored items in store order."""

    def execute(self, args: Namespace, manager: Any) -> int:
        category = getattr(args, "category", None)
        items = [
            item for item in manager.items
            if category is None or item.effective_category == category
        ]
        if not items:
            print("(no items found)")
            return 0
        usage = manager.storage.get_usage()
        for item in items:
            symbol = f" ({item.symbol})" if item.symbol else ""
            uses = usage.get(item.id, 0)
            print(f"[{item.id}] {item.name}{symbol} - {item.effective_category} (uses: {uses})")
        print(f"\nTotal: {len(items)} item(s)")
        return 0


# =============================================================================
# Data Commands
# =============================================================================


class ResetLearningCommand(Command):
    """Forget all learned usage."""

    def execute(self, args: Namespace, manager: Any) -> int:
        print(manager.reset_learning().format())
        return 0


class ResetSeedCommand(Command):
    """Replace all items with the built-in set."""

    def execute(self, args: Namespace, manager: Any) -> int:
        print(manager.reset_to_seed().format())
        return 0


class ImportCommand(Command):
    """Import items (and optionally preferences) from a JSON file or stdin."""

    def execute(self, args: Namespace, manager: Any) -> int:
        if args.file == "-":
            text = sys.stdin.read()
        else:
            path = Path(args.file)
            if not path.exists():
                raise ValueError(f"File not found: {args.file}")
            text = path.read_text()
        print(manager.import_json(text).format())
        return 0


class ExportCommand(Command):
    """Export items and preferences as JSON."""

    def execute(self, args: Namespace, manager: Any) -> int:
        data = manager.export_json()
        target = getattr(args, "file", None)
        if target:
            Path(target).write_text(data + "\n")
            print(f"Exported {len(manager.items)} item(s) to {target}")
        else:
            print(data)
        return 0


class PrefsCommand(Command):
    """Show preferences, or update them with --set key=value."""

    def execute(self, args: Namespace, manager: Any) -> int:
        updates = getattr(args, "set", None) or []
        if updates:
            update: Dict[str, Any] = {}
            for pair in updates:
                if "=" not in pair:
                    raise ValueError(f"Expected key=value, got: {pair}")
                key, raw = pair.split("=", 1)
                if key not in prefs_store.PREFERENCE_KEYS:
                    raise ValueError(f"Unknown preference: {key}")
                try:
                    value = json.loads(raw)
                except json.JSONDecodeError:
                    value = raw
                update[key] = value
            manager.update_preferences(update)
        print(json.dumps(prefs_store.to_dict(manager.prefs), indent=2))
        return 0


# =============================================================================
# Command Registry
# =============================================================================


COMMAND_REGISTRY: Dict[str, Type[Command]] = {
    "search": SearchCommand,
    "copy": CopyCommand,
    "top": TopCommand,
    "categories": CategoriesCommand,
    "list": ListCommand,
    "reset-learning": ResetLearningCommand,
    "reset-seed": ResetSeedCommand,
    "import": ImportCommand,
    "export": ExportCommand,
    "prefs": PrefsCommand,
}


# =============================================================================
# Dispatch Function
# =============================================================================


def dispatch_command(args: Namespace, manager: Any) -> int:
    """Dispatch to appropriate command handler.

    Args:
        args: Parsed arguments with 'command' attribute
        manager: QuickSheet instance

    Returns:
        Exit code (0 for success, 1 for unknown command)
    """
    command_name = args.command
    if command_name not in COMMAND_REGISTRY:
        print(f"Unknown command: {command_name}")
        return 1

    command_class = COMMAND_REGISTRY[command_name]
    command = command_class()
    return command.execute(args, manager)
