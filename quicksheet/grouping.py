#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
Grouping of ranked items into category sections.

Section order follows the ranking mode: the static category priority table
for explicit ordering, mean mix score for popularity-first. Items within a
section use the browsing order of the same mode.
"""

from typing import Callable, Dict, Iterable, List, Optional

from quicksheet.models import (
    ALL_CATEGORIES_LABEL,
    CATEGORY_ORDER,
    PINNED_CATEGORY,
    UNLISTED_PRIORITY,
    Item,
    RankingMode,
    Section,
)
from quicksheet.ranking import sort_for_browsing
from quicksheet.scoring import mix_score


def category_priority(category: str) -> int:
    return CATEGORY_ORDER.get(category, UNLISTED_PRIORITY)


def partition(items: Iterable[Item]) -> Dict[str, List[Item]]:
    """Group items by effective category, keeping first-seen order."""
    groups: Dict[str, List[Item]] = {}
    for item in items:
        groups.setdefault(item.effective_category, []).append(item)
    return groups


def group_by_category(
    ranked: Iterable[Item],
    mode: RankingMode,
    decayed_use: Callable[[str], float],
) -> List[Section]:
    """Partition ranked items into ordered sections.

    Args:
        ranked: Items in ranked order
        mode: Active ranking mode
        decayed_use: Maps item id to its decayed use count

    Returns:
        Non-empty sections in display order.
    """
    groups = partition(ranked)

    if mode == RankingMode.POPULARITY_FIRST:
        mixes = {
            cat: [mix_score(decayed_use(i.id), i.effective_popularity) for i in members]
            for cat, members in groups.items()
        }
        order = sorted(
            groups,
            key=lambda cat: (
                -(sum(mixes[cat]) / len(mixes[cat])),
                -max(mixes[cat]),
                cat,
            ),
        )
    else:
        order = sorted(groups, key=lambda cat: (category_priority(cat), cat))

    return [
        Section(category=cat, items=sort_for_browsing(groups[cat], mode, decayed_use))
        for cat in order
    ]


def category_options(items: Iterable[Item]) -> List[Optional[str]]:
    """Values for a category selector.

    Returns:
        None (meaning "All") first, the pinned category next when present,
        then the remaining categories by priority and name.
    """
    categories = sorted(
        {i.effective_category for i in items},
        key=lambda cat: (category_priority(cat), cat),
    )
    if PINNED_CATEGORY in categories:
        categories.remove(PINNED_CATEGORY)
        categories.insert(0, PINNED_CATEGORY)
    return [None] + categories


def option_label(value: Optional[str]) -> str:
    return ALL_CATEGORIES_LABEL if value is None else value
