#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
Structured debug logging for quicksheet.

Appends one JSON object per line to <state_dir>/debug.log. Every entry
carries event, level, timestamp and pid; the remaining keys depend on the
event.

Levels (QUICKSHEET_DEBUG env var, else the debugLevel setting):
    0 - off
    1 - info: sessions, copies, resets, imports, errors (default)
    2 - debug: adds one rank_pass entry per search
    3 - trace: rank_pass entries include the top scores
"""

import json
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from quicksheet.config import get_int_setting
from quicksheet.paths import PathResolver

DEFAULT_LEVEL = 1
MAX_LOG_BYTES = 5 * 1024 * 1024  # Rotate to debug.log.1 past this size


def _resolve_level() -> int:
    env = os.environ.get("QUICKSHEET_DEBUG")
    if env is not None:
        try:
            return int(env)
        except ValueError:
            return DEFAULT_LEVEL
    return get_int_setting("debugLevel", DEFAULT_LEVEL)


class DebugLogger:
    """JSON-lines event logger."""

    def __init__(self, log_path: Optional[Path] = None, level: Optional[int] = None):
        self.log_path = Path(log_path) if log_path else PathResolver.debug_log()
        self.level = _resolve_level() if level is None else level

    def enabled(self, level: int = 1) -> bool:
        return self.level >= level

    def _write(self, event: str, level: str = "info", **fields: Any) -> None:
        entry: Dict[str, Any] = {
            "event": event,
            "level": level,
            "timestamp": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ"),
            "pid": os.getpid(),
        }
        entry.update(fields)
        try:
            self.log_path.parent.mkdir(parents=True, exist_ok=True)
            if self.log_path.exists() and self.log_path.stat().st_size > MAX_LOG_BYTES:
                os.replace(self.log_path, self.log_path.with_name(self.log_path.name + ".1"))
            with open(self.log_path, "a") as f:
                f.write(json.dumps(entry, default=str) + "\n")
        except OSError:
            # Logging must never break a search or a copy
            pass

    # -------------------------------------------------------------------------
    # Events
    # -------------------------------------------------------------------------

    def session_start(self, item_count: int, ranking_mode: str, instant_rerank: bool) -> None:
        if not self.enabled(1):
            return
        self._write(
            "session_start",
            item_count=item_count,
            ranking_mode=ranking_mode,
            instant_rerank=instant_rerank,
        )

    def rank_pass(
        self,
        query_len: int,
        category: Optional[str],
        mode: str,
        candidates: int,
        duration_ms: float,
        top_scores: Optional[List[Tuple[str, float]]] = None,
    ) -> None:
        if not self.enabled(2):
            return
        fields: Dict[str, Any] = {
            "query_len": query_len,
            "category": category,
            "mode": mode,
            "candidates": candidates,
            "ms": round(duration_ms, 3),
        }
        if self.enabled(3) and top_scores:
            fields["top"] = [[item_id, round(score, 4)] for item_id, score in top_scores]
        self._write("rank_pass", level="debug", **fields)

    def copy(self, item_id: str, preset: str, uses_before: int, uses_after: int) -> None:
        if not self.enabled(1):
            return
        self._write(
            "copy",
            item_id=item_id,
            preset=preset,
            uses_before=uses_before,
            uses_after=uses_after,
        )

    def snapshot(self, reason: str, tracked: int) -> None:
        if not self.enabled(1):
            return
        self._write("snapshot", reason=reason, tracked=tracked)

    def learning_reset(self, cleared: int) -> None:
        if not self.enabled(1):
            return
        self._write("learning_reset", cleared=cleared)

    def items_imported(self, imported: int, total: int, prefs_applied: bool) -> None:
        if not self.enabled(1):
            return
        self._write(
            "items_imported", imported=imported, total=total, prefs_applied=prefs_applied
        )

    def mutation(self, op: str, target: str, details: Optional[Dict[str, Any]] = None) -> None:
        if not self.enabled(1):
            return
        self._write("mutation", op=op, target=target, **(details or {}))

    def error(self, op: str, err: str) -> None:
        if not self.enabled(1):
            return
        self._write("error", level="error", op=op, err=err)


_logger: Optional[DebugLogger] = None


def get_logger() -> DebugLogger:
    """Return the process-wide logger, creating it on first use."""
    global _logger
    if _logger is None:
        _logger = DebugLogger()
    return _logger


def reset_logger() -> None:
    """Drop the process-wide logger so the next get_logger() re-reads config."""
    global _logger
    _logger = None
