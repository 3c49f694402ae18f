#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
Fuzzy text matching over the item collection.

Matches a query against several weighted item fields using rapidfuzz and
yields (item, distance) pairs, best match first. Distances are normalized
to 0 (perfect) .. 1 (worst still accepted).
"""

import sys
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from rapidfuzz import fuzz
from rapidfuzz.utils import default_process

from quicksheet.models import FIELD_WEIGHTS, MATCH_THRESHOLD, NO_TEXT_RELEVANCE, Item

# A perfect field match still has to pull the product towards zero
_EPSILON = sys.float_info.epsilon


def is_blank(query: Optional[str]) -> bool:
    return query is None or not query.strip()


def _field_values(item: Item, field_name: str) -> List[str]:
    if field_name == "tags":
        return [t for t in item.tags if t]
    value = getattr(item, field_name)
    return [value] if value else []


def field_distance(query: str, value: str) -> Optional[float]:
    """Distance between a processed query and one field value.

    Partial (substring) similarity is used when the query fits inside the
    value; otherwise full similarity, so a one-letter symbol does not
    perfectly match every long query containing that letter.

    Returns:
        Distance in [0, 1], or None if the value is empty after processing.
    """
    processed = default_process(value)
    if not processed:
        return None
    if len(query) <= len(processed):
        similarity = fuzz.partial_ratio(query, processed)
    else:
        similarity = fuzz.ratio(query, processed)
    return 1.0 - similarity / 100.0


class TextMatcher:
    """Weighted fuzzy matcher across item fields.

    Each field with a distance within the threshold contributes
    distance ** (weight / total_weight) to a product, so several good
    field matches beat a single one and the result stays in [0, 1].
    """

    def __init__(
        self,
        items: Sequence[Item],
        weights: Optional[Dict[str, float]] = None,
        threshold: float = MATCH_THRESHOLD,
    ):
        self.items = list(items)
        self.weights = dict(weights or FIELD_WEIGHTS)
        self.threshold = threshold
        self._total_weight = sum(self.weights.values())

    def distance(self, item: Item, query: str) -> Optional[float]:
        """Combined distance for one item, or None if no field qualifies."""
        processed = default_process(query)
        if not processed:
            return None
        return self._processed_distance(item, processed)

    def _processed_distance(self, item: Item, processed: str) -> Optional[float]:
        total = 1.0
        matched = False
        for field_name, weight in self.weights.items():
            best = None
            for value in _field_values(item, field_name):
                d = field_distance(processed, value)
                if d is not None and (best is None or d < best):
                    best = d
            if best is None or best > self.threshold:
                continue
            matched = True
            total *= max(best, _EPSILON) ** (weight / self._total_weight)

        if not matched:
            return None
        return min(total, 1.0)

    def search(self, query: str) -> Iterator[Tuple[Item, Optional[float]]]:
        """Yield (item, distance) pairs for a query.

        A blank query bypasses matching: every item is yielded, in
        collection order, with the NO_TEXT_RELEVANCE sentinel.
        """
        if is_blank(query):
            for item in self.items:
                yield item, NO_TEXT_RELEVANCE
            return

        processed = default_process(query)
        if not processed:
            return

        hits = []
        for item in self.items:
            d = self._processed_distance(item, processed)
            if d is not None:
                hits.append((item, d))

        # sort is stable: equal distances keep collection order
        hits.sort(key=lambda pair: pair[1])
        yield from hits
