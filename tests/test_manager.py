#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
Tests for the QuickSheet session class.
"""

import json

import pytest

from quicksheet.manager import QuickSheet
from quicksheet.models import (
    CopyPreset,
    Item,
    ItemKind,
    Preferences,
    RankingMode,
    RankingPreferences,
)
from quicksheet.seed import SEED_ITEMS
from quicksheet.storage import MemoryStorage, Storage


def _make_item(id, name=None, category="Dynamics", popularity=None, rank=None):
    return Item(id=id, kind=ItemKind.EQUATION, name=name or id, category=category,
                popularity=popularity, rank=rank)


def _prefs(mode=RankingMode.EXPLICIT_ORDER, instant=False):
    return Preferences(ranking=RankingPreferences(ranking_mode=mode, instant_rerank_on_copy=instant))


@pytest.fixture
def sheet(clock):
    return QuickSheet(MemoryStorage(), prefs=_prefs(), clock=clock, persist_prefs=False)


def _layout(result):
    return [(s.category, [i.id for i in s.items]) for s in result.sections]


class TestSession:
    """Construction and seeding."""

    def test_empty_store_is_seeded(self, sheet):
        assert len(sheet.items) == len(SEED_ITEMS)

    def test_existing_items_not_reseeded(self, clock, constants):
        sheet = QuickSheet(MemoryStorage(constants), prefs=_prefs(), clock=clock, persist_prefs=False)
        assert [i.id for i in sheet.items] == ["g", "k_B"]

    def test_seed_can_be_disabled(self, clock):
        sheet = QuickSheet(MemoryStorage(), prefs=_prefs(), clock=clock,
                           persist_prefs=False, seed_if_empty=False)
        assert sheet.items == []
        assert sheet.search("").sections == []

    def test_prefs_loaded_from_settings(self, settings_path, clock):
        settings_path.write_text(json.dumps({"rankingMode": "popularityFirst"}))
        sheet = QuickSheet(MemoryStorage(), clock=clock)
        assert sheet.prefs.ranking.ranking_mode == RankingMode.POPULARITY_FIRST


class TestSearch:
    """End-to-end search through the session."""

    def test_constants_scenario_explicit(self, clock, constants):
        sheet = QuickSheet(MemoryStorage(constants), prefs=_prefs(), clock=clock, persist_prefs=False)
        assert _layout(sheet.search("")) == [("Constants", ["g", "k_B"])]

    def test_constants_scenario_popularity_first(self, clock, constants):
        sheet = QuickSheet(MemoryStorage(constants), prefs=_prefs(RankingMode.POPULARITY_FIRST),
                           clock=clock, persist_prefs=False)
        assert _layout(sheet.search("")) == [("Constants", ["g", "k_B"])]
        assert sheet.top_result("").id == "g"

    def test_category_filter(self, sheet):
        result = sheet.search("", "Dynamics")
        assert [s.category for s in result.sections] == ["Dynamics"]
        assert all(i.category == "Dynamics" for s in result.sections for i in s.items)

    def test_query_finds_item(self, sheet):
        assert sheet.top_result("boltzmann").id == "k_B"

    def test_no_match(self, sheet):
        result = sheet.search("qqxqzzv")
        assert result.total == 0
        assert result.top is None

    def test_determinism(self, sheet):
        sheet.copy("torque")
        first = sheet.search("e")
        second = sheet.search("e")
        assert [(s.item.id, s.score) for s in first.ranked] == [(s.item.id, s.score) for s in second.ranked]
        assert _layout(first) == _layout(second)

    def test_categories(self, sheet):
        options = sheet.categories()
        assert options[0] is None
        assert options[1] == "Constants"
        assert options[2] == "Kinematics"


class TestCopyAndSnapshot:
    """Copying records usage; the frozen snapshot hides it until applied."""

    def _browse_sheet(self, clock, instant=False):
        items = [_make_item("a", popularity=5), _make_item("b", popularity=0)]
        return QuickSheet(MemoryStorage(items), prefs=_prefs(RankingMode.POPULARITY_FIRST, instant),
                          clock=clock, persist_prefs=False)

    def test_copy_returns_text_and_uses(self, sheet):
        result = sheet.copy("g", preset=CopyPreset.PLAIN_COMPACT)
        assert result.text == "Standard gravity (g) = 9.80665 m s^-2"
        assert result.uses == 1
        assert sheet.copy("g").uses == 2

    def test_copy_value_only(self, sheet):
        assert sheet.copy("k_B", value_only_text=True).text == "1.380649e-23 J K^-1"

    def test_copy_marks_used_with_clock(self, sheet, clock):
        sheet.copy("g")
        assert sheet.storage.get_recent() == {"g": clock.now}

    def test_copy_unknown_raises(self, sheet):
        with pytest.raises(ValueError, match="not found"):
            sheet.copy("nope")

    def test_frozen_order_stable_after_copy(self, clock):
        sheet = self._browse_sheet(clock)
        for _ in range(5):
            sheet.copy("b")
        assert _layout(sheet.search("")) == [("Dynamics", ["a", "b"])]

    def test_apply_usage_now(self, clock):
        sheet = self._browse_sheet(clock)
        for _ in range(5):
            sheet.copy("b")
        sheet.apply_usage_now()
        assert _layout(sheet.search("")) == [("Dynamics", ["b", "a"])]

    def test_live_view_reranks_immediately(self, clock):
        sheet = self._browse_sheet(clock, instant=True)
        for _ in range(5):
            sheet.copy("b")
        assert _layout(sheet.search("")) == [("Dynamics", ["b", "a"])]

    def test_turning_instant_off_resnapshots(self, clock):
        sheet = self._browse_sheet(clock, instant=True)
        for _ in range(5):
            sheet.copy("b")
        sheet.set_instant_rerank(False)
        assert not sheet.usage_view().is_live
        assert _layout(sheet.search("")) == [("Dynamics", ["b", "a"])]

        for _ in range(20):
            sheet.copy("a")
        assert _layout(sheet.search("")) == [("Dynamics", ["b", "a"])]

    def test_turning_instant_on_goes_live(self, clock):
        sheet = self._browse_sheet(clock)
        sheet.copy("b")
        sheet.set_instant_rerank(True)
        assert sheet.usage_view().is_live

    def test_copy_top(self, sheet):
        result = sheet.copy_top("boltzmann")
        assert result.item_id == "k_B"
        assert sheet.copy_top("qqxqzzv") is None


class TestLearningAndData:
    """Reset, import, export."""

    def test_reset_learning(self, sheet):
        sheet.copy("g")
        sheet.copy("torque")
        result = sheet.reset_learning()
        assert result.count == 2
        assert sheet.storage.get_usage() == {}
        assert sheet.storage.get_recent() == {}
        assert sheet.usage_view().resolve().usage == {}

    def test_reset_to_seed(self, sheet):
        sheet.add_item(ItemKind.EQUATION, "Snell's law", "Optics", latex="n_1 \\sin\\theta_1 = n_2 \\sin\\theta_2")
        sheet.copy("g")
        result = sheet.reset_to_seed()
        assert result.count == len(SEED_ITEMS)
        assert "Optics" not in sheet.categories()
        assert sheet.storage.get_usage() == {}

    def test_add_item(self, sheet):
        item = sheet.add_item(ItemKind.EQUATION, " Snell's law ", "Optics")
        assert item.name == "Snell's law"
        assert item.popularity == 0
        assert sheet.categories()[-1] == "Optics"
        assert sheet.get_item(item.id) == item

    def test_add_item_with_popularity(self, sheet):
        item = sheet.add_item(ItemKind.CONSTANT, "Avogadro constant", "Constants", popularity=3)
        assert item.popularity == 3
        assert sheet.get_item(item.id).popularity == 3

    def test_add_item_requires_name(self, sheet):
        with pytest.raises(ValueError, match="Name"):
            sheet.add_item(ItemKind.EQUATION, "  ", "Optics")

    def test_import_array(self, sheet):
        result = sheet.import_json(json.dumps([
            {"id": "snell", "kind": "equation", "name": "Snell's law", "category": "Optics"},
        ]))
        assert result.imported == 1
        assert result.total == len(SEED_ITEMS) + 1
        assert not result.prefs_applied

    def test_import_replaces_by_id(self, sheet):
        sheet.import_data([{"id": "g", "kind": "constant", "name": "Little g", "category": "Constants"}])
        assert sheet.get_item("g").name == "Little g"
        assert len(sheet.items) == len(SEED_ITEMS)

    def test_import_document_with_prefs(self, sheet):
        result = sheet.import_data({
            "version": 1,
            "items": [],
            "prefs": {"copyMode": "latex", "rankingMode": "rankFirst"},
        })
        assert result.prefs_applied
        assert sheet.prefs.copy_preset == CopyPreset.LATEX_INLINE

    @pytest.mark.parametrize("payload", ['{"foo": 1}', "42", "not json"])
    def test_import_invalid(self, sheet, payload):
        with pytest.raises(ValueError):
            sheet.import_json(payload)

    @pytest.mark.parametrize("field,value", [
        ("popularity", "5"),
        ("popularity", -1),
        ("popularity", True),
        ("popularity", 2.5),
        ("rank", "1"),
        ("rank", False),
    ])
    def test_import_rejects_non_numeric_ordering_fields(self, sheet, field, value):
        """A bad popularity or rank is refused, so later searches keep working."""
        record = {"id": "x", "kind": "equation", "name": "X", "category": "Optics", field: value}
        with pytest.raises(ValueError, match=f"invalid {field}"):
            sheet.import_data([record])
        assert "x" not in [i.id for i in sheet.items]
        assert sheet.search("").total == len(SEED_ITEMS)

    def test_import_accepts_float_rank(self, sheet):
        sheet.import_data([{"id": "x", "kind": "equation", "name": "X", "rank": 1.5, "popularity": 0}])
        assert sheet.get_item("x").rank == 1.5

    @pytest.mark.parametrize("tags", ["gravity", ["gravity", 3], {"a": 1}])
    def test_import_rejects_malformed_tags(self, sheet, tags):
        with pytest.raises(ValueError, match="invalid tags"):
            sheet.import_data([{"id": "x", "kind": "equation", "name": "X", "tags": tags}])

    def test_import_invalid_item_reports_position(self, sheet):
        with pytest.raises(ValueError, match="Item #2"):
            sheet.import_data([
                {"id": "a", "kind": "equation", "name": "A"},
                {"id": "b", "kind": "equation"},
            ])

    def test_export(self, sheet):
        data = json.loads(sheet.export_json())
        assert data["version"] == 1
        assert data["exportedAt"].endswith("Z")
        assert len(data["items"]) == len(SEED_ITEMS)
        assert data["prefs"]["rankingMode"] == "explicitOrder"

    def test_export_import_round_trip(self, clock):
        first = QuickSheet(MemoryStorage(), prefs=_prefs(), clock=clock, persist_prefs=False)
        second = QuickSheet(MemoryStorage(), prefs=_prefs(), clock=clock,
                            persist_prefs=False, seed_if_empty=False)
        second.import_json(first.export_json())
        assert [i.to_dict() for i in second.items] == [i.to_dict() for i in first.items]


class TestFileBackedSession:
    def test_usage_survives_new_session(self, temp_state_dir, clock):
        first = QuickSheet(Storage(temp_state_dir), prefs=_prefs(), clock=clock, persist_prefs=False)
        first.copy("g")
        second = QuickSheet(Storage(temp_state_dir), prefs=_prefs(), clock=clock, persist_prefs=False)
        assert second.usage_view().resolve().usage == {"g": 1}

    def test_preference_changes_persist(self, temp_state_dir, settings_path, clock):
        sheet = QuickSheet(Storage(temp_state_dir), clock=clock)
        sheet.set_ranking_mode(RankingMode.POPULARITY_FIRST)
        stored = json.loads(settings_path.read_text())
        assert stored["rankingMode"] == "popularityFirst"
