#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
Data models for the quick sheet.

Contains all dataclasses, enums, and constants used by the search and
ranking engine.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional


# =============================================================================
# Constants
# =============================================================================

MS_PER_DAY = 86_400_000

# Relevance score weights (sum to 1.0 so the score stays within [0, 1])
W_TEXT = 0.45
W_USE = 0.35
W_RECENCY = 0.10
W_POPULARITY = 0.10
USE_SCALE = 2.0  # tanh(decayed_use / USE_SCALE)
POPULARITY_SCALE = 5.0  # tanh(popularity / POPULARITY_SCALE)
NEUTRAL_TEXT_RELEVANCE = 0.5  # Text relevance when there is no query

# Popularity-first mix weights
MIX_USE = 0.7
MIX_POP = 0.3

DEFAULT_HALF_LIFE_DAYS = 30

# Fuzzy matching
MATCH_THRESHOLD = 0.35
FIELD_WEIGHTS = {
    "name": 0.55,
    "symbol": 0.30,
    "text": 0.25,
    "tags": 0.20,
    "category": 0.10,
}

# Sentinel distance for "no textual relevance" (empty query)
NO_TEXT_RELEVANCE = None

UNCATEGORIZED = "Uncategorized"
PINNED_CATEGORY = "Constants"
ALL_CATEGORIES_LABEL = "All"

# Section priority for explicit ordering; unlisted categories use UNLISTED_PRIORITY
CATEGORY_ORDER = {
    "Kinematics": 1,
    "Dynamics": 2,
    "Work & Energy": 3,
    "Momentum": 4,
    "Rotation": 5,
    "Oscillations": 6,
    "Thermodynamics": 7,
    "Constants": 99,
}
UNLISTED_PRIORITY = 100

EXPORT_VERSION = 1


# =============================================================================
# Enums
# =============================================================================


class ItemKind(str, Enum):
    """Reference entry kind."""
    CONSTANT = "constant"
    EQUATION = "equation"


class RankingMode(str, Enum):
    """Browsing order used when the query is empty."""
    EXPLICIT_ORDER = "explicitOrder"
    POPULARITY_FIRST = "popularityFirst"

    @classmethod
    def parse(cls, value: Any) -> "RankingMode":
        """Parse a stored mode, accepting the legacy 'rankFirst' spelling.

        Raises:
            ValueError: If the value is not a known mode
        """
        if isinstance(value, RankingMode):
            return value
        if value == "rankFirst":
            return cls.EXPLICIT_ORDER
        return cls(value)


class CopyPreset(str, Enum):
    """Formatting presets for copied text."""
    PLAIN_COMPACT = "plain_compact"
    PLAIN_VERBOSE = "plain_verbose"
    LATEX_INLINE = "latex_inline"
    LATEX_INLINE_SYMBOL_FIRST = "latex_inline_symbol_first"
    MARKDOWN_INLINE = "markdown_inline"
    MARKDOWN_FENCED = "markdown_fenced"


# =============================================================================
# Abstract Base Classes
# =============================================================================


class FormattableResult(ABC):
    """Base class for all result types that can be formatted for display."""

    @abstractmethod
    def format(self) -> str:
        """Format the result for display.

        Returns:
            Human-readable string representation of the result.
        """
        pass


# =============================================================================
# Data Classes
# =============================================================================


@dataclass
class Item:
    """A single reference entry (constant or equation)."""
    id: str
    kind: ItemKind
    name: str
    latex: str = ""
    text: str = ""
    tags: List[str] = field(default_factory=list)
    category: str = ""
    symbol: Optional[str] = None
    value: Optional[str] = None  # Numeric string, constants only
    units: Optional[str] = None
    source: Optional[str] = None
    popularity: Optional[int] = None  # Editorial prior, 0 when absent
    rank: Optional[float] = None  # Explicit order key, sorts last when absent

    @property
    def effective_category(self) -> str:
        return self.category or UNCATEGORIZED

    @property
    def effective_popularity(self) -> int:
        return self.popularity or 0

    @property
    def effective_rank(self) -> float:
        return float("inf") if self.rank is None else self.rank

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Item":
        """Build an Item from a stored or imported record.

        Raises:
            ValueError: If id, name or kind is missing or invalid, or if
                tags, popularity or rank has the wrong type
        """
        if not isinstance(data, Mapping):
            raise ValueError(f"Item record must be an object, got {type(data).__name__}")
        item_id = data.get("id")
        name = data.get("name")
        if not item_id or not isinstance(item_id, str):
            raise ValueError("Item record is missing 'id'")
        if not name or not isinstance(name, str):
            raise ValueError(f"Item {item_id} is missing 'name'")
        try:
            kind = ItemKind(data.get("kind"))
        except ValueError:
            raise ValueError(f"Item {item_id} has invalid kind: {data.get('kind')!r}")

        tags = data.get("tags") or []
        if not isinstance(tags, list) or not all(isinstance(t, str) for t in tags):
            raise ValueError(f"Item {item_id} has invalid tags: expected a list of strings")
        popularity = data.get("popularity")
        if popularity is not None and (
            isinstance(popularity, bool) or not isinstance(popularity, int) or popularity < 0
        ):
            raise ValueError(f"Item {item_id} has invalid popularity: {popularity!r}")
        rank = data.get("rank")
        if rank is not None and (isinstance(rank, bool) or not isinstance(rank, (int, float))):
            raise ValueError(f"Item {item_id} has invalid rank: {rank!r}")

        return cls(
            id=item_id,
            kind=kind,
            name=name,
            latex=data.get("latex") or "",
            text=data.get("text") or "",
            tags=list(tags),
            category=data.get("category") or "",
            symbol=data.get("symbol") or None,
            value=data.get("value") or None,
            units=data.get("units") or None,
            source=data.get("source") or None,
            popularity=popularity,
            rank=rank,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-friendly dict, omitting absent optionals."""
        result: Dict[str, Any] = {
            "id": self.id,
            "kind": self.kind.value,
            "name": self.name,
            "latex": self.latex,
            "text": self.text,
            "tags": list(self.tags),
            "category": self.category,
        }
        for key in ("symbol", "value", "units", "source", "popularity", "rank"):
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        return result


@dataclass
class UsageRecord:
    """Learned usage for one item id."""
    count: int = 0
    last_used_at: Optional[int] = None  # ms since epoch


@dataclass
class UsageSnapshot:
    """Usage counts and last-used timestamps read at one point in time."""
    usage: Dict[str, int] = field(default_factory=dict)
    recent: Dict[str, int] = field(default_factory=dict)
    taken_at: Optional[int] = None  # ms since epoch, None for a live read

    def record(self, item_id: str) -> UsageRecord:
        return UsageRecord(
            count=self.usage.get(item_id, 0),
            last_used_at=self.recent.get(item_id),
        )


class UsageView:
    """Which usage counters feed a ranking pass.

    A live view reads the store on every resolve; a frozen view always
    returns the snapshot it was created with.
    """

    def __init__(self, store: Any = None, snapshot: Optional[UsageSnapshot] = None):
        self._store = store
        self._snapshot = snapshot

    @classmethod
    def live(cls, store: Any) -> "UsageView":
        return cls(store=store)

    @classmethod
    def frozen(cls, snapshot: UsageSnapshot) -> "UsageView":
        return cls(snapshot=snapshot)

    @property
    def is_live(self) -> bool:
        return self._snapshot is None

    def resolve(self) -> UsageSnapshot:
        """Read the counters once for a whole ranking pass."""
        if self._snapshot is not None:
            return self._snapshot
        return UsageSnapshot(
            usage=dict(self._store.get_usage()),
            recent=dict(self._store.get_recent()),
        )


@dataclass
class RankingPreferences:
    """User-controlled ranking configuration."""
    ranking_mode: RankingMode = RankingMode.EXPLICIT_ORDER
    ranking_half_life_days: float = DEFAULT_HALF_LIFE_DAYS  # 0 disables decay
    instant_rerank_on_copy: bool = False


@dataclass
class CopyToggles:
    """Which parts of an item end up in copied text."""
    include_units: bool = True
    include_name: bool = True
    include_symbol: bool = True
    include_text: bool = False
    include_category: bool = False
    include_source: bool = False


@dataclass
class Preferences:
    """All persisted user preferences."""
    copy_preset: CopyPreset = CopyPreset.PLAIN_COMPACT
    copy_toggles: CopyToggles = field(default_factory=CopyToggles)
    ranking: RankingPreferences = field(default_factory=RankingPreferences)


@dataclass
class ScoredItem:
    """An item with its computed score for one ranking pass."""
    item: Item
    score: float
    distance: Optional[float] = NO_TEXT_RELEVANCE  # Raw match distance, query passes only


@dataclass
class Section:
    """A category-labeled group of ranked items."""
    category: str
    items: List[Item] = field(default_factory=list)


@dataclass
class SearchResult(FormattableResult):
    """Result of one ranking pass: flat ranking plus display sections."""
    query: str
    category: Optional[str]
    ranked: List[ScoredItem]
    sections: List[Section]

    @property
    def total(self) -> int:
        return len(self.ranked)

    @property
    def top(self) -> Optional[Item]:
        """First item of the first section (what a copy shortcut targets)."""
        if not self.sections or not self.sections[0].items:
            return None
        return self.sections[0].items[0]

    def format(self, limit: Optional[int] = None) -> str:
        """Format sections for terminal display.

        Args:
            limit: Maximum number of items to show across all sections
        """
        if not self.sections:
            return "(no results)"

        scores = {s.item.id: s.score for s in self.ranked}
        lines = []
        shown = 0
        for section in self.sections:
            if limit is not None and shown >= limit:
                break
            lines.append(f"{section.category}:")
            for item in section.items:
                if limit is not None and shown >= limit:
                    break
                symbol = f" ({item.symbol})" if item.symbol else ""
                lines.append(f"  [{item.id}] {item.name}{symbol}  {scores.get(item.id, 0.0):.3f}")
                shown += 1
        hidden = self.total - shown
        if hidden > 0:
            lines.append(f"(+{hidden} more)")
        return "\n".join(lines)


@dataclass
class CopyResult(FormattableResult):
    """Result of copying an item."""
    item_id: str
    text: str
    uses: int
    preset: CopyPreset

    def format(self) -> str:
        return self.text


@dataclass
class ImportResult(FormattableResult):
    """Result of importing items (and optionally preferences)."""
    imported: int
    total: int
    prefs_applied: bool = False

    def format(self) -> str:
        result = f"Imported {self.imported} item(s), {self.total} total"
        if self.prefs_applied:
            result += " (preferences applied)"
        return result


@dataclass
class ResetResult(FormattableResult):
    """Result of a reset operation."""
    what: str
    count: int = 0

    def format(self) -> str:
        if self.what == "learning":
            return f"Cleared usage for {self.count} item(s)"
        return f"Reset to {self.count} built-in item(s)"
