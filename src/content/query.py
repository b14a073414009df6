"""Filtered, sorted views and aggregate statistics over records.

Everything here is a pure function of the record list and the criteria,
so views are simply recomputed whenever they are read.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable, Iterable
from datetime import datetime
from enum import StrEnum
from typing import Literal

from medcms.content.models import ContentRecord, ContentStatus, ContentType, Urgency
from pydantic import BaseModel, Field

ALL = "all"
RECENT_LIMIT = 5

URGENCY_RANK: dict[Urgency, int] = {
    Urgency.IMMEDIATE: 3,
    Urgency.MODERATE: 2,
    Urgency.MONITOR: 1,
}


class SortKey(StrEnum):
    TITLE = "title"
    LAST_UPDATED = "lastUpdated"
    URGENCY = "urgency"
    CATEGORY = "category"


SortOrder = Literal["asc", "desc"]


class QueryCriteria(BaseModel):
    """Search, filter and sort settings.  ``all`` disables a filter."""

    search_term: str = ""
    filter_type: ContentType | Literal["all"] = ALL
    filter_urgency: Urgency | Literal["all"] = ALL
    filter_status: ContentStatus | Literal["all"] = ALL
    sort_by: SortKey = SortKey.LAST_UPDATED
    sort_order: SortOrder = "desc"


class ContentStats(BaseModel):
    """Aggregate counts over the whole collection."""

    total_content: int = 0
    by_type: dict[str, int] = Field(default_factory=dict)
    by_urgency: dict[str, int] = Field(default_factory=dict)
    by_status: dict[str, int] = Field(default_factory=dict)
    recently_updated: list[ContentRecord] = Field(default_factory=list)
    needs_review: list[ContentRecord] = Field(default_factory=list)


def matches_search(record: ContentRecord, term: str) -> bool:
    """Case-insensitive substring match on title, body, tags and category."""
    needle = term.lower()
    if needle in record.title.lower() or needle in record.body.lower():
        return True
    if any(needle in tag.lower() for tag in record.metadata.tags or []):
        return True
    category = record.metadata.category
    return bool(category) and needle in category.lower()


def _sort_key(sort_by: SortKey) -> Callable[[ContentRecord], str | int | datetime]:
    if sort_by == SortKey.TITLE:
        return lambda r: r.title.lower()
    if sort_by == SortKey.URGENCY:
        return lambda r: URGENCY_RANK.get(r.metadata.urgency, 0)
    if sort_by == SortKey.CATEGORY:
        return lambda r: (r.metadata.category or "").lower()
    return lambda r: r.metadata.last_updated


def apply_query(records: Iterable[ContentRecord], criteria: QueryCriteria) -> list[ContentRecord]:
    """Return the records matching *criteria*, in the requested order.

    Sorting is stable: records with equal keys keep their collection order
    in both directions.
    """
    results = list(records)

    if criteria.search_term:
        results = [r for r in results if matches_search(r, criteria.search_term)]
    if criteria.filter_type != ALL:
        results = [r for r in results if r.content_type == criteria.filter_type]
    if criteria.filter_urgency != ALL:
        results = [r for r in results if r.metadata.urgency == criteria.filter_urgency]
    if criteria.filter_status != ALL:
        results = [r for r in results if r.metadata.status == criteria.filter_status]

    return sorted(
        results,
        key=_sort_key(criteria.sort_by),
        reverse=criteria.sort_order == "desc",
    )


def compute_stats(records: Iterable[ContentRecord]) -> ContentStats:
    """Count records by type, urgency and status.

    Records without an urgency are counted under ``none``.  Also returns
    the five most recently updated records and those awaiting review.
    """
    items = list(records)

    by_type: dict[str, int] = defaultdict(int)
    by_urgency: dict[str, int] = defaultdict(int)
    by_status: dict[str, int] = defaultdict(int)
    for record in items:
        by_type[record.content_type.value] += 1
        urgency = record.metadata.urgency
        by_urgency[urgency.value if urgency else "none"] += 1
        by_status[record.metadata.status.value] += 1

    recent = sorted(items, key=lambda r: r.metadata.last_updated, reverse=True)

    return ContentStats(
        total_content=len(items),
        by_type=dict(by_type),
        by_urgency=dict(by_urgency),
        by_status=dict(by_status),
        recently_updated=recent[:RECENT_LIMIT],
        needs_review=[r for r in items if r.metadata.status == ContentStatus.REVIEW],
    )
