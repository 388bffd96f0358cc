"""
Catalog Search - Filter catalog records the way the portal does.

An empty query matches everything. Matching is on the title only,
case-insensitive substring.
"""

from __future__ import annotations

from .models import GameRecord


def search_catalog(
    records: list[GameRecord],
    query: str | None = None,
    category: str | None = None,
    featured_only: bool = False,
    featured_first: bool = False,
) -> list[GameRecord]:
    """
    Filter records by title query, category and featured flag.

    Catalog order is kept; featured_first moves featured records
    ahead of the rest without reordering within either group.
    """
    needle = query.strip().lower() if query else ""
    wanted_category = category.strip().lower() if category else ""

    results = []
    for record in records:
        if needle and needle not in record.title.lower():
            continue
        if wanted_category and record.category.lower() != wanted_category:
            continue
        if featured_only and not record.featured:
            continue
        results.append(record)

    if featured_first:
        results = [r for r in results if r.featured] + [r for r in results if not r.featured]
    return results


def find_record(records: list[GameRecord], game_id: int) -> GameRecord | None:
    for record in records:
        if record.id == game_id:
            return record
    return None


def categories(records: list[GameRecord]) -> list[str]:
    """Sorted distinct categories."""
    return sorted({record.category for record in records})
