#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
Ranking policy: turns matched, scored items into a total order.

With a query the order is score descending. Without one, the ranking mode
decides:
- explicitOrder: rank ascending (absent last), popularity descending, name
- popularityFirst: 0.7 * decayed use + 0.3 * popularity descending, name
"""

from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from quicksheet.matcher import TextMatcher, is_blank
from quicksheet.models import Item, RankingMode, RankingPreferences, ScoredItem, UsageSnapshot
from quicksheet.scoring import RelevanceScorer, mix_score


def name_key(item: Item) -> Tuple[str, str]:
    """Case-insensitive name order, raw name as a deterministic tiebreak."""
    return (item.name.casefold(), item.name)


def explicit_order_key(item: Item) -> tuple:
    return (item.effective_rank, -item.effective_popularity, name_key(item))


def sort_for_browsing(
    items: Iterable[Item],
    mode: RankingMode,
    decayed_use: Callable[[str], float],
) -> List[Item]:
    """Order items for the no-query view.

    Args:
        items: Items to order
        mode: Active ranking mode
        decayed_use: Maps item id to its decayed use count

    Returns:
        New list in browsing order.
    """
    if mode == RankingMode.POPULARITY_FIRST:
        return sorted(
            items,
            key=lambda i: (-mix_score(decayed_use(i.id), i.effective_popularity), name_key(i)),
        )
    return sorted(items, key=explicit_order_key)


def filter_category(items: Iterable[Item], category: Optional[str]) -> List[Item]:
    """Keep items in the given category; None keeps everything."""
    if category is None:
        return list(items)
    return [i for i in items if i.effective_category == category]


def rank_items(
    items: Sequence[Item],
    query: str,
    category: Optional[str],
    prefs: RankingPreferences,
    snapshot: UsageSnapshot,
    now: int,
    matcher: Optional[TextMatcher] = None,
) -> List[ScoredItem]:
    """Run one ranking pass.

    Args:
        items: The full item collection
        query: Search text; blank means browsing
        category: Category filter, None for all
        prefs: Ranking preferences (mode, half-life)
        snapshot: Usage and recency counters for this pass
        now: Current time (ms since epoch)
        matcher: Prebuilt matcher over ``items`` (built on demand if omitted)

    Returns:
        Scored items in ranked order.
    """
    if matcher is None:
        matcher = TextMatcher(items)
    scorer = RelevanceScorer(snapshot, prefs.ranking_half_life_days, now)

    allowed = {i.id for i in filter_category(items, category)}
    scored = [
        scorer.score(item, distance)
        for item, distance in matcher.search(query)
        if item.id in allowed
    ]

    if not is_blank(query):
        # Stable: equal scores keep the matcher's order
        scored.sort(key=lambda s: s.score, reverse=True)
        return scored

    by_id = {s.item.id: s for s in scored}
    ordered = sort_for_browsing(
        (s.item for s in scored), prefs.ranking_mode, scorer.decayed_use
    )
    return [by_id[i.id] for i in ordered]
