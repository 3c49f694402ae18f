#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
QuickSheet class - main entry point for searching, copying and learning.

Owns the injected storage, the active preferences and the frozen usage
snapshot, and wires the matcher, scorer, ranking policy and grouping into
single calls for the CLI and the TUI.
"""

import json
import time
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional

from quicksheet import prefs as prefs_store
from quicksheet.copy_text import build_copy, value_only
from quicksheet.debug_logger import get_logger
from quicksheet.grouping import category_options, group_by_category
from quicksheet.matcher import TextMatcher
from quicksheet.models import (
    EXPORT_VERSION,
    CopyPreset,
    CopyResult,
    ImportResult,
    Item,
    ItemKind,
    Preferences,
    RankingMode,
    ResetResult,
    SearchResult,
    UsageSnapshot,
    UsageView,
)
from quicksheet.ranking import rank_items
from quicksheet.scoring import RelevanceScorer
from quicksheet.seed import seed_items
from quicksheet.storage import now_ms


class QuickSheet:
    """
    Search and ranking session over one item store.

    Usage counters feed ranking either live or through a snapshot frozen
    at session start; the snapshot is refreshed only when instant re-rank
    is switched off, when usage is applied explicitly, or after a reset.
    """

    def __init__(
        self,
        storage: Any,
        prefs: Optional[Preferences] = None,
        clock: Callable[[], int] = now_ms,
        persist_prefs: bool = True,
        seed_if_empty: bool = True,
    ):
        """
        Initialize a session.

        Args:
            storage: Item and usage store (Storage or MemoryStorage)
            prefs: Preferences to use; loaded from settings.json if omitted
            clock: Returns the current time in ms since the epoch
            persist_prefs: Write preference changes back to settings.json
            seed_if_empty: Load the built-in items when the store is empty
        """
        self.storage = storage
        self.prefs = prefs if prefs is not None else prefs_store.get_preferences()
        self._clock = clock
        self._persist_prefs = persist_prefs

        if seed_if_empty and not self.storage.get_all():
            self.storage.bulk_upsert(seed_items())

        self._items: List[Item] = []
        self._matcher = TextMatcher([])
        self.reload_items()

        self._snapshot = self._take_snapshot()

        get_logger().session_start(
            item_count=len(self._items),
            ranking_mode=self.prefs.ranking.ranking_mode.value,
            instant_rerank=self.prefs.ranking.instant_rerank_on_copy,
        )

    # -------------------------------------------------------------------------
    # Items
    # -------------------------------------------------------------------------

    @property
    def items(self) -> List[Item]:
        return list(self._items)

    def reload_items(self) -> None:
        """Re-read items from storage and rebuild the matcher."""
        self._items = self.storage.get_all()
        self._matcher = TextMatcher(self._items)

    def get_item(self, item_id: str) -> Item:
        """
        Get an item by id.

        Raises:
            ValueError: If no item has this id
        """
        for item in self._items:
            if item.id == item_id:
                return item
        raise ValueError(f"Item {item_id} not found")

    def add_item(self, kind: ItemKind, name: str, category: str, **fields: Any) -> Item:
        """
        Add a user-defined item with a generated id.

        Raises:
            ValueError: If name or category is blank
        """
        if not name.strip():
            raise ValueError("Name is required")
        if not category.strip():
            raise ValueError("Category is required")
        fields.setdefault("popularity", 0)
        item = Item(
            id=str(uuid.uuid4()),
            kind=ItemKind(kind),
            name=name.strip(),
            category=category.strip(),
            **fields,
        )
        self.storage.upsert(item)
        self.reload_items()
        get_logger().mutation("add", item.id, {"category": item.category})
        return item

    def categories(self) -> List[Optional[str]]:
        """Category selector values; None stands for "All"."""
        return category_options(self._items)

    # -------------------------------------------------------------------------
    # Ranking
    # -------------------------------------------------------------------------

    def _take_snapshot(self) -> UsageSnapshot:
        return UsageSnapshot(
            usage=dict(self.storage.get_usage()),
            recent=dict(self.storage.get_recent()),
            taken_at=self._clock(),
        )

    def usage_view(self) -> UsageView:
        if self.prefs.ranking.instant_rerank_on_copy:
            return UsageView.live(self.storage)
        return UsageView.frozen(self._snapshot)

    def search(self, query: str = "", category: Optional[str] = None) -> SearchResult:
        """
        Rank and group items for a query and category filter.

        Args:
            query: Search text; blank browses in ranking-mode order
            category: Category filter, None for all

        Returns:
            SearchResult with the flat ranking and display sections.
        """
        start = time.perf_counter()
        now = self._clock()
        ranking = self.prefs.ranking
        snapshot = self.usage_view().resolve()

        ranked = rank_items(
            self._items, query, category, ranking, snapshot, now, matcher=self._matcher
        )
        scorer = RelevanceScorer(snapshot, ranking.ranking_half_life_days, now)
        sections = group_by_category(
            [s.item for s in ranked], ranking.ranking_mode, scorer.decayed_use
        )

        duration_ms = (time.perf_counter() - start) * 1000
        get_logger().rank_pass(
            query_len=len(query or ""),
            category=category,
            mode=ranking.ranking_mode.value,
            candidates=len(ranked),
            duration_ms=duration_ms,
            top_scores=[(s.item.id, s.score) for s in ranked[:3]],
        )

        return SearchResult(query=query or "", category=category, ranked=ranked, sections=sections)

    def top_result(self, query: str = "", category: Optional[str] = None) -> Optional[Item]:
        """The first item shown for a query (first item of the first section)."""
        return self.search(query, category).top

    # -------------------------------------------------------------------------
    # Copy & learning
    # -------------------------------------------------------------------------

    def copy(
        self,
        item_id: str,
        preset: Optional[CopyPreset] = None,
        value_only_text: bool = False,
    ) -> CopyResult:
        """
        Build copy text for an item and record the use.

        Args:
            item_id: Item to copy
            preset: Format override; the preference preset if omitted
            value_only_text: Copy only value and units (constants)

        Returns:
            CopyResult with the text and the new use count

        Raises:
            ValueError: If the item is not found
        """
        item = self.get_item(item_id)
        preset = CopyPreset(preset) if preset is not None else self.prefs.copy_preset
        if value_only_text:
            text = value_only(item)
        else:
            text = build_copy(item, preset, self.prefs.copy_toggles)

        uses_before = int(self.storage.get_usage().get(item_id, 0))
        uses = self.storage.mark_used(item_id, now=self._clock())

        get_logger().copy(
            item_id=item_id,
            preset="value" if value_only_text else preset.value,
            uses_before=uses_before,
            uses_after=uses,
        )
        return CopyResult(item_id=item_id, text=text, uses=uses, preset=preset)

    def copy_top(
        self,
        query: str = "",
        category: Optional[str] = None,
        preset: Optional[CopyPreset] = None,
    ) -> Optional[CopyResult]:
        """Copy the top result for a query, or None if nothing matches."""
        top = self.top_result(query, category)
        if top is None:
            return None
        return self.copy(top.id, preset=preset)

    def apply_usage_now(self) -> None:
        """Refresh the frozen snapshot so current usage takes effect."""
        self._snapshot = self._take_snapshot()
        get_logger().snapshot("apply", tracked=len(self._snapshot.usage))

    def reset_learning(self) -> ResetResult:
        """Forget all usage counts and timestamps."""
        cleared = len(self.storage.get_usage())
        self.storage.reset_learning()
        self._snapshot = self._take_snapshot()
        get_logger().learning_reset(cleared)
        return ResetResult(what="learning", count=cleared)

    # -------------------------------------------------------------------------
    # Preferences
    # -------------------------------------------------------------------------

    def update_preferences(self, update: Mapping[str, Any]) -> Preferences:
        """
        Apply a partial preferences update (settings.json keys).

        Turning instant re-rank off freezes usage at that moment.
        """
        was_instant = self.prefs.ranking.instant_rerank_on_copy
        if self._persist_prefs:
            new_prefs = prefs_store.set_preferences(update)
        else:
            new_prefs = prefs_store.merge(self.prefs, update)
        self.prefs = new_prefs

        if was_instant and not new_prefs.ranking.instant_rerank_on_copy:
            self._snapshot = self._take_snapshot()
            get_logger().snapshot("instant_rerank_off", tracked=len(self._snapshot.usage))
        return new_prefs

    def set_instant_rerank(self, enabled: bool) -> Preferences:
        return self.update_preferences({"instantRerankOnCopy": bool(enabled)})

    def set_ranking_mode(self, mode: RankingMode) -> Preferences:
        return self.update_preferences({"rankingMode": RankingMode.parse(mode).value})

    # -------------------------------------------------------------------------
    # Import / export
    # -------------------------------------------------------------------------

    def import_data(self, payload: Any) -> ImportResult:
        """
        Import items from a bare list or an export document.

        Args:
            payload: List of item records, or {"items": [...], "prefs": {...}}

        Raises:
            ValueError: If the payload shape or any item record is invalid
        """
        prefs_payload = None
        if isinstance(payload, list):
            records = payload
        elif isinstance(payload, dict) and isinstance(payload.get("items"), list):
            records = payload["items"]
            prefs_payload = payload.get("prefs")
        else:
            raise ValueError("Invalid import format: expected a list of items or an export document")

        items = []
        for pos, record in enumerate(records):
            try:
                items.append(Item.from_dict(record))
            except ValueError as e:
                raise ValueError(f"Item #{pos + 1}: {e}")

        self.storage.bulk_upsert(items)
        self.reload_items()

        prefs_applied = isinstance(prefs_payload, dict)
        if prefs_applied:
            self.update_preferences(prefs_payload)

        result = ImportResult(imported=len(items), total=len(self._items), prefs_applied=prefs_applied)
        get_logger().items_imported(result.imported, result.total, prefs_applied)
        return result

    def import_json(self, text: str) -> ImportResult:
        """
        Import from JSON text.

        Raises:
            ValueError: If the text is not valid JSON or has the wrong shape
        """
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON: {e}")
        return self.import_data(payload)

    def export_data(self) -> Dict[str, Any]:
        return {
            "version": EXPORT_VERSION,
            "exportedAt": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ"),
            "items": [item.to_dict() for item in self._items],
            "prefs": prefs_store.to_dict(self.prefs),
        }

    def export_json(self) -> str:
        return json.dumps(self.export_data(), indent=2)

    def reset_to_seed(self) -> ResetResult:
        """Replace all items with the built-in set and clear usage."""
        self.storage.clear_all()
        self.storage.bulk_upsert(seed_items())
        self.reload_items()
        self._snapshot = self._take_snapshot()
        get_logger().mutation("reset_seed", "items", {"count": len(self._items)})
        return ResetResult(what="seed", count=len(self._items))
