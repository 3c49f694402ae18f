# SPDX-License-Identifier: MIT
"""State management dataclasses for the TUI app.

Groups the search inputs, the last rendered result and the last copy so
the app does not keep them as scattered instance variables.
"""
from dataclasses import dataclass, field
from typing import List, Optional

from quicksheet.models import SearchResult


@dataclass
class SearchState:
    """Current query, category filter and the result they produced."""

    query: str = ""
    category: Optional[str] = None
    category_options: List[Optional[str]] = field(default_factory=lambda: [None])
    result: Optional[SearchResult] = None


@dataclass
class CopyState:
    """What the last copy put on the clipboard."""

    item_id: Optional[str] = None
    text: str = ""
    uses: int = 0


@dataclass
class AppState:
    """Top-level app state container."""

    search: SearchState = field(default_factory=SearchState)
    last_copy: CopyState = field(default_factory=CopyState)
    max_rows: int = 200
