"""Cross-link helpers for the finalization passes.

Every generator links records only after the full collection exists,
so these helpers take the finished list and never look at partial state.
"""

from typing import Callable, Dict, Iterable, List, Optional


def dedupe(items: Iterable[str]) -> List[str]:
    """Drop repeats, keeping the first occurrence."""
    seen = set()
    result = []
    for item in items:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result


def other_slugs(
    records: List[Dict],
    record: Dict,
    limit: int,
    match: Optional[Callable[[Dict], bool]] = None,
) -> List[str]:
    """First `limit` slugs in list order, excluding record itself."""
    result = []
    for other in records:
        if len(result) >= limit:
            break
        if other["slug"] == record["slug"]:
            continue
        if match is not None and not match(other):
            continue
        result.append(other["slug"])
    return result


def link_in_order(records: List[Dict], limit: int = 5) -> List[Dict]:
    """Set relatedGuides to the first `limit` other records of the collection."""
    for record in records:
        record["relatedGuides"] = other_slugs(records, record, limit)
    return records


def link_by_keys(records: List[Dict], keys: List[str], limit: int = 5) -> List[Dict]:
    """Set relatedGuides to the first `limit` other records sharing any of keys."""
    for record in records:
        record["relatedGuides"] = other_slugs(
            records, record, limit,
            match=lambda other, r=record: any(
                r.get(k) is not None and other.get(k) == r.get(k) for k in keys
            ),
        )
    return records
