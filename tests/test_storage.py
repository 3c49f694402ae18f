#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
Tests for JSON-file and in-memory storage.
"""

import json

import pytest

from quicksheet.models import Item, ItemKind, UsageSnapshot
from quicksheet.scoring import RelevanceScorer
from quicksheet.storage import MemoryStorage, Storage


def _make_item(id, name=None, **kwargs):
    return Item(id=id, kind=ItemKind.EQUATION, name=name or id, **kwargs)


@pytest.fixture(params=["file", "memory"])
def store(request, temp_state_dir):
    if request.param == "file":
        return Storage(temp_state_dir)
    return MemoryStorage()


class TestItems:
    """get_all / upsert / bulk_upsert / clear_all."""

    def test_empty_store(self, store):
        assert store.get_all() == []

    def test_upsert_and_get(self, store):
        store.upsert(_make_item("a", category="Dynamics", rank=1))
        items = store.get_all()
        assert len(items) == 1
        assert items[0].category == "Dynamics"
        assert items[0].rank == 1

    def test_bulk_upsert_last_write_wins(self, store):
        store.bulk_upsert([_make_item("a"), _make_item("b")])
        store.bulk_upsert([_make_item("a", name="Renamed")])
        items = {i.id: i for i in store.get_all()}
        assert len(items) == 2
        assert items["a"].name == "Renamed"

    def test_replacement_keeps_position(self, store):
        store.bulk_upsert([_make_item("a"), _make_item("b"), _make_item("c")])
        store.upsert(_make_item("a", name="A2"))
        assert [i.id for i in store.get_all()] == ["a", "b", "c"]

    def test_clear_all_removes_items_and_usage(self, store):
        store.upsert(_make_item("a"))
        store.mark_used("a", now=1)
        store.clear_all()
        assert store.get_all() == []
        assert store.get_usage() == {}
        assert store.get_recent() == {}


class TestUsage:
    """mark_used / reset_learning."""

    def test_mark_used_counts_and_stamps(self, store):
        assert store.mark_used("g", now=100) == 1
        assert store.mark_used("g", now=200) == 2
        assert store.get_usage() == {"g": 2}
        assert store.get_recent() == {"g": 200}

    def test_ids_are_independent(self, store):
        store.mark_used("a", now=1)
        store.mark_used("b", now=2)
        assert store.get_usage() == {"a": 1, "b": 1}

    def test_reset_learning_round_trip(self, store):
        store.mark_used("a", now=1)
        store.mark_used("b", now=2)
        store.reset_learning()
        assert store.get_usage() == {}
        assert store.get_recent() == {}

        snapshot = UsageSnapshot(usage=store.get_usage(), recent=store.get_recent())
        scorer = RelevanceScorer(snapshot, 30, 10)
        assert scorer.decayed_use("a") == 0.0
        assert scorer.decayed_use("b") == 0.0

    def test_returned_maps_are_copies_or_fresh(self, store):
        store.mark_used("a", now=1)
        usage = store.get_usage()
        usage["a"] = 99
        assert store.get_usage() == {"a": 1}


class TestFileStorage:
    """File-specific behavior."""

    def test_files_written_in_state_dir(self, temp_state_dir):
        store = Storage(temp_state_dir)
        store.upsert(_make_item("a"))
        store.mark_used("a", now=5)
        assert json.loads((temp_state_dir / "items.json").read_text())[0]["id"] == "a"
        assert json.loads((temp_state_dir / "usage.json").read_text()) == {"a": 1}
        assert json.loads((temp_state_dir / "recent.json").read_text()) == {"a": 5}

    def test_defaults_to_env_state_dir(self, temp_state_dir):
        assert Storage().state_dir == temp_state_dir

    def test_corrupt_usage_reads_empty(self, temp_state_dir):
        (temp_state_dir / "usage.json").write_text("{not json")
        assert Storage(temp_state_dir).get_usage() == {}

    def test_wrong_type_reads_empty(self, temp_state_dir):
        (temp_state_dir / "items.json").write_text(json.dumps({"id": "a"}))
        assert Storage(temp_state_dir).get_all() == []

    def test_invalid_records_skipped(self, temp_state_dir):
        (temp_state_dir / "items.json").write_text(json.dumps([
            {"id": "ok", "kind": "equation", "name": "Fine"},
            {"id": "bad", "kind": "tensor", "name": "Broken"},
            "garbage",
        ]))
        assert [i.id for i in Storage(temp_state_dir).get_all()] == ["ok"]

    def test_records_with_bad_ordering_fields_skipped(self, temp_state_dir):
        (temp_state_dir / "items.json").write_text(json.dumps([
            {"id": "ok", "kind": "equation", "name": "Fine", "rank": 1},
            {"id": "pop", "kind": "equation", "name": "Bad", "popularity": "5"},
            {"id": "rank", "kind": "equation", "name": "Bad", "rank": "1"},
        ]))
        assert [i.id for i in Storage(temp_state_dir).get_all()] == ["ok"]

    def test_non_numeric_counters_dropped(self, temp_state_dir):
        (temp_state_dir / "usage.json").write_text(json.dumps({"g": "3", "c": 2, "h": None}))
        (temp_state_dir / "recent.json").write_text(json.dumps({"g": "yesterday", "c": 100}))
        store = Storage(temp_state_dir)
        assert store.get_usage() == {"c": 2}
        assert store.get_recent() == {"c": 100}

        scorer = RelevanceScorer(
            UsageSnapshot(usage=store.get_usage(), recent=store.get_recent()), 30, 100
        )
        assert scorer.decayed_use("g") == 0.0
        assert scorer.decayed_use("c") == 2.0

    def test_mark_used_replaces_non_numeric_count(self, temp_state_dir):
        (temp_state_dir / "usage.json").write_text(json.dumps({"g": "3"}))
        store = Storage(temp_state_dir)
        assert store.mark_used("g", now=1) == 1
        assert json.loads((temp_state_dir / "usage.json").read_text()) == {"g": 1}

    def test_corrupt_usage_recovers_on_write(self, temp_state_dir):
        (temp_state_dir / "usage.json").write_text("[]")
        store = Storage(temp_state_dir)
        assert store.mark_used("a", now=1) == 1
        assert store.get_usage() == {"a": 1}

    def test_no_temp_files_left(self, temp_state_dir):
        store = Storage(temp_state_dir)
        store.bulk_upsert([_make_item("a"), _make_item("b")])
        leftovers = [p.name for p in temp_state_dir.iterdir() if p.name.startswith(".")]
        assert leftovers == []
