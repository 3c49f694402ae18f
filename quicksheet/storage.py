#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
Item and usage storage.

Items, use counts and last-used timestamps live in three JSON documents in
the state directory. Reads fall back to empty values when a document is
missing or corrupt, and non-numeric counter entries are dropped. Writes
replace the document atomically under a file lock.
"""

import json
import os
import tempfile
import time
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional

from quicksheet.file_lock import FileLock
from quicksheet.models import Item
from quicksheet.paths import PathResolver

ITEMS_FILE = "items.json"
USAGE_FILE = "usage.json"
RECENT_FILE = "recent.json"


def now_ms() -> int:
    """Current wall-clock time in milliseconds since the epoch."""
    return int(time.time() * 1000)


def _drop_non_numeric(counters: Dict[str, Any]) -> Dict[str, Any]:
    """Remove entries whose value is not a number (hand-edited or damaged files)."""
    bad = [k for k, v in counters.items() if isinstance(v, bool) or not isinstance(v, (int, float))]
    for key in bad:
        del counters[key]
    return counters


class MemoryStorage:
    """In-process store with the same interface as Storage.

    Useful for embedding the engine and for tests.
    """

    def __init__(self, items: Optional[Iterable[Item]] = None):
        self._items: Dict[str, Item] = {}
        self._usage: Dict[str, int] = {}
        self._recent: Dict[str, int] = {}
        if items:
            self.bulk_upsert(items)

    def get_all(self) -> List[Item]:
        return list(self._items.values())

    def upsert(self, item: Item) -> None:
        self._items[item.id] = item

    def bulk_upsert(self, items: Iterable[Item]) -> None:
        for item in items:
            self._items[item.id] = item

    def clear_all(self) -> None:
        self._items.clear()
        self.reset_learning()

    def get_usage(self) -> Dict[str, int]:
        return dict(self._usage)

    def get_recent(self) -> Dict[str, int]:
        return dict(self._recent)

    def mark_used(self, item_id: str, now: Optional[int] = None) -> int:
        self._usage[item_id] = self._usage.get(item_id, 0) + 1
        self._recent[item_id] = now_ms() if now is None else now
        return self._usage[item_id]

    def reset_learning(self) -> None:
        self._usage.clear()
        self._recent.clear()


class Storage:
    """JSON-file store under a state directory.

    Attributes:
        state_dir: Directory holding items.json, usage.json and recent.json
    """

    def __init__(self, state_dir: Optional[Path] = None):
        self.state_dir = Path(state_dir) if state_dir else PathResolver.state_dir()
        self.items_file = self.state_dir / ITEMS_FILE
        self.usage_file = self.state_dir / USAGE_FILE
        self.recent_file = self.state_dir / RECENT_FILE

    # -------------------------------------------------------------------------
    # JSON helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _read_json(path: Path, fallback: Any) -> Any:
        if not path.exists():
            return fallback
        try:
            with open(path) as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError, ValueError):
            return fallback
        return data if isinstance(data, type(fallback)) else fallback

    def _write_json(self, path: Path, data: Any) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=f".{path.stem}-")
        try:
            with os.fdopen(fd, "w") as f:
                json.dump(data, f, indent=2)
            os.replace(tmp, path)
        except BaseException:
            os.unlink(tmp)
            raise

    def _atomic_update(self, path: Path, fallback: Any, update_fn: Callable[[Any], Any]) -> Any:
        """Read, modify and write one document while holding its lock.

        Args:
            path: Document to update
            fallback: Value used when the document is missing or corrupt
            update_fn: Receives the current value and mutates it in place

        Returns:
            The updated value.
        """
        with FileLock(path):
            data = self._read_json(path, fallback)
            update_fn(data)
            self._write_json(path, data)
        return data

    # -------------------------------------------------------------------------
    # Items
    # -------------------------------------------------------------------------

    def get_all(self) -> List[Item]:
        """Load every stored item, skipping records that no longer parse."""
        items = []
        for record in self._read_json(self.items_file, []):
            try:
                items.append(Item.from_dict(record))
            except ValueError:
                continue
        return items

    def upsert(self, item: Item) -> None:
        self.bulk_upsert([item])

    def bulk_upsert(self, items: Iterable[Item]) -> None:
        """Insert or replace items by id, keeping stored order for replacements."""
        incoming = [i.to_dict() for i in items]

        def update_fn(records: List[dict]) -> None:
            index = {r.get("id"): pos for pos, r in enumerate(records) if isinstance(r, dict)}
            for record in incoming:
                pos = index.get(record["id"])
                if pos is None:
                    index[record["id"]] = len(records)
                    records.append(record)
                else:
                    records[pos] = record

        self._atomic_update(self.items_file, [], update_fn)

    def clear_all(self) -> None:
        """Remove all items and learned usage."""
        for path, empty in ((self.items_file, []), (self.usage_file, {}), (self.recent_file, {})):
            with FileLock(path):
                self._write_json(path, empty)

    # -------------------------------------------------------------------------
    # Learned usage
    # -------------------------------------------------------------------------

    def get_usage(self) -> Dict[str, int]:
        return _drop_non_numeric(self._read_json(self.usage_file, {}))

    def get_recent(self) -> Dict[str, int]:
        return _drop_non_numeric(self._read_json(self.recent_file, {}))

    def mark_used(self, item_id: str, now: Optional[int] = None) -> int:
        """Increment the use count and stamp the last-used time.

        Returns:
            The new use count.
        """
        stamp = now_ms() if now is None else now

        def bump(usage: Dict[str, int]) -> None:
            _drop_non_numeric(usage)
            usage[item_id] = int(usage.get(item_id, 0)) + 1

        def stamp_fn(recent: Dict[str, int]) -> None:
            _drop_non_numeric(recent)
            recent[item_id] = stamp

        usage = self._atomic_update(self.usage_file, {}, bump)
        self._atomic_update(self.recent_file, {}, stamp_fn)
        return usage[item_id]

    def reset_learning(self) -> None:
        for path in (self.usage_file, self.recent_file):
            with FileLock(path):
                self._write_json(path, {})
