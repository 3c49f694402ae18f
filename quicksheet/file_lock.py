#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
Advisory file locking for store writes.

Serializes read-modify-write cycles on a data file between processes
(e.g. the TUI and a CLI invocation running at the same time).
"""

import fcntl
from pathlib import Path
from typing import IO, Optional


class FileLock:
    """Exclusive lock held on a sidecar ``<file>.lock`` while in the context."""

    def __init__(self, path: Path):
        self.path = Path(path)
        self.lock_path = self.path.with_name(self.path.name + ".lock")
        self._file: Optional[IO] = None

    def __enter__(self) -> "FileLock":
        self.lock_path.parent.mkdir(parents=True, exist_ok=True)
        self._file = open(self.lock_path, "w")
        fcntl.flock(self._file, fcntl.LOCK_EX)
        return self

    def __exit__(self, *args) -> None:
        if self._file is not None:
            fcntl.flock(self._file, fcntl.LOCK_UN)
            self._file.close()
            self._file = None
