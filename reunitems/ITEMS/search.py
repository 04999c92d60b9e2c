# file: reunitems/ITEMS/search.py
"""
Approximate item search over the name and location of each record.

Each field is scored with thefuzz's partial ratio (best aligned substring,
0-100) against the lower-cased query. A record's distance is
1 - best_score / 100, so 0.0 is a perfect match. Records farther than the
threshold are dropped and the rest come back closest first, ties in their
original order.
"""

from typing import Any, List, Optional, Sequence

from thefuzz import fuzz

from reunitems.core import config

SEARCH_KEYS = ("name", "location")


def _field(record: Any, key: str) -> str:
    value = record.get(key) if isinstance(record, dict) else getattr(record, key, None)
    return value if isinstance(value, str) else ""


def match_distance(record: Any, query: str) -> float:
    needle = query.lower()
    best = max(fuzz.partial_ratio(needle, _field(record, key).lower()) for key in SEARCH_KEYS)
    return 1.0 - best / 100.0


def search_items(records: Sequence[Any], query: str, threshold: Optional[float] = None) -> Sequence[Any]:
    """
    Rank records against query, best match first.

    An empty query returns `records` itself, untouched. Any other query,
    whitespace included, is matched; records beyond `threshold` are excluded.
    Works on dicts and on objects exposing `name`/`location` attributes.
    """
    if query == "" or query is None:
        return records
    if threshold is None:
        threshold = config.SEARCH_THRESHOLD

    scored = []
    for index, record in enumerate(records):
        distance = match_distance(record, query)
        if distance <= threshold:
            scored.append((distance, index, record))
    scored.sort(key=lambda entry: (entry[0], entry[1]))
    results: List[Any] = [record for _, _, record in scored]
    return results
