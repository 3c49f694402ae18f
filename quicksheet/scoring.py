#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
Relevance scoring for reference items.

Blends text match quality, time-decayed usage, recency and editorial
popularity into one score per item:

    score = 0.45 * text + 0.35 * tanh(decayed_use / 2)
          + 0.10 * recency + 0.10 * tanh(popularity / 5)

Scores are only meaningful relative to other scores from the same pass.
"""

import math
from typing import Optional

from quicksheet.models import (
    MIX_POP,
    MIX_USE,
    MS_PER_DAY,
    NEUTRAL_TEXT_RELEVANCE,
    POPULARITY_SCALE,
    USE_SCALE,
    W_POPULARITY,
    W_RECENCY,
    W_TEXT,
    W_USE,
    Item,
    ScoredItem,
    UsageSnapshot,
)


def decayed_use(
    count: int,
    last_used_at: Optional[int],
    half_life_days: float,
    now: int,
) -> float:
    """Exponentially decay a use count by the time since last use.

    Args:
        count: Raw use count
        last_used_at: Last use timestamp (ms since epoch), None if never used
        half_life_days: Days after which the count is halved; <= 0 disables decay
        now: Current time (ms since epoch)

    Returns:
        count * 0.5 ** (age_days / half_life_days), 0 if unused.
    """
    if not count or last_used_at is None:
        return 0.0
    if not half_life_days or half_life_days <= 0:
        return float(count)
    # Timestamps from a skewed clock can be in the future; treat them as now
    age_days = max(0, now - last_used_at) / MS_PER_DAY
    return count * math.pow(0.5, age_days / half_life_days)


def text_relevance(distance: Optional[float]) -> float:
    """Convert a match distance to relevance; None means no query."""
    if distance is None:
        return NEUTRAL_TEXT_RELEVANCE
    return 1.0 - min(distance, 1.0)


def relevance_score(
    text: float,
    use: float,
    recency: float,
    popularity: float,
) -> float:
    """Blend the four signals with the fixed weights."""
    return (
        W_TEXT * text
        + W_USE * math.tanh(use / USE_SCALE)
        + W_RECENCY * recency
        + W_POPULARITY * math.tanh(popularity / POPULARITY_SCALE)
    )


def mix_score(decayed: float, popularity: float) -> float:
    """Popularity-first ordering key."""
    return MIX_USE * decayed + MIX_POP * popularity


class RelevanceScorer:
    """Scores items against one usage snapshot at a fixed instant.

    Binding the snapshot and clock once per pass keeps every score in the
    pass consistent with every other.
    """

    def __init__(self, snapshot: UsageSnapshot, half_life_days: float, now: int):
        self.snapshot = snapshot
        self.half_life_days = half_life_days
        self.now = now

    def decayed_use(self, item_id: str) -> float:
        record = self.snapshot.record(item_id)
        return decayed_use(record.count, record.last_used_at, self.half_life_days, self.now)

    def recency_boost(self, item_id: str) -> float:
        return 1.0 if self.snapshot.recent.get(item_id) is not None else 0.0

    def mix_score(self, item: Item) -> float:
        return mix_score(self.decayed_use(item.id), item.effective_popularity)

    def score(self, item: Item, distance: Optional[float]) -> ScoredItem:
        total = relevance_score(
            text_relevance(distance),
            self.decayed_use(item.id),
            self.recency_boost(item.id),
            item.effective_popularity,
        )
        return ScoredItem(item=item, score=total, distance=distance)
