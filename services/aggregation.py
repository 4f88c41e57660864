# services/aggregation.py
"""
Dashboard aggregation over uploaded creator records.

All functions here are pure: they take the current store snapshot (already
ordered by diamonds descending) plus the selected filters and return new view
objects without touching the input.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from constants import CREATOR_VIEW_LIMIT, FILTER_ALL, NEW_CREATOR_DAYS
from services.models import CreatorRecord


@dataclass(frozen=True)
class DashboardFilters:
    period: str = FILTER_ALL
    group: str = FILTER_ALL


@dataclass(frozen=True)
class SummaryStats:
    total_diamonds: int = 0
    total_creators: int = 0
    total_followers: int = 0
    new_creators: int = 0


@dataclass(frozen=True)
class GroupRollup:
    diamonds: int = 0
    count: int = 0


@dataclass(frozen=True)
class CreatorRow:
    record: CreatorRecord
    is_new: bool


@dataclass(frozen=True)
class DashboardView:
    """Everything the dashboard page renders for one filter selection."""

    filters: DashboardFilters
    summary: SummaryStats
    group_rollups: List[Tuple[str, GroupRollup]]
    creator_view: List[CreatorRow]
    periods: List[str]
    groups: List[str]


def normalize_filters(
    raw: Dict[str, Optional[str]],
    *,
    periods: Sequence[str] = (),
    groups: Sequence[str] = (),
) -> DashboardFilters:
    """Build filters from query params, falling back to 'all' for unknown values."""

    def _pick(value: Optional[str], allowed: Sequence[str]) -> str:
        value = (value or "").strip()
        if not value or value == FILTER_ALL:
            return FILTER_ALL
        if allowed and value not in allowed:
            return FILTER_ALL
        return value

    return DashboardFilters(
        period=_pick(raw.get("period"), periods),
        group=_pick(raw.get("group"), groups),
    )


def distinct_values(values: Iterable[str]) -> List[str]:
    """Distinct non-empty values in first-seen order."""
    return list(dict.fromkeys(v for v in values if v))


def is_new_creator(record: CreatorRecord, new_days: int = NEW_CREATOR_DAYS) -> bool:
    return record.days_joined <= new_days


def filter_records(
    records: Sequence[CreatorRecord], filters: DashboardFilters
) -> List[CreatorRecord]:
    return [
        r
        for r in records
        if (filters.period == FILTER_ALL or r.period == filters.period)
        and (filters.group == FILTER_ALL or r.group_name == filters.group)
    ]


def summarize(
    records: Sequence[CreatorRecord], new_days: int = NEW_CREATOR_DAYS
) -> SummaryStats:
    return SummaryStats(
        total_diamonds=sum(r.diamonds for r in records),
        total_creators=len(records),
        total_followers=sum(r.new_followers for r in records),
        new_creators=sum(1 for r in records if is_new_creator(r, new_days)),
    )


def group_rollups(
    records: Sequence[CreatorRecord], groups: Sequence[str]
) -> List[Tuple[str, GroupRollup]]:
    """
    Roll records up per group.

    Args:
        records: The filtered records to total
        groups: Group names to report on, in display order before sorting

    Returns:
        (group name, GroupRollup) pairs sorted by diamonds descending; groups
        with equal totals keep the order of ``groups``.
    """
    totals: Dict[str, List[int]] = {g: [0, 0] for g in groups}
    for r in records:
        bucket = totals.get(r.group_name)
        if bucket is not None:
            bucket[0] += r.diamonds
            bucket[1] += 1

    pairs = [(g, GroupRollup(diamonds=d, count=c)) for g, (d, c) in totals.items()]
    return sorted(pairs, key=lambda pair: pair[1].diamonds, reverse=True)


def creator_view(
    records: Sequence[CreatorRecord],
    limit: int = CREATOR_VIEW_LIMIT,
    new_days: int = NEW_CREATOR_DAYS,
) -> List[CreatorRow]:
    # Input order is the store's diamonds-desc order; do not re-sort here.
    return [CreatorRow(record=r, is_new=is_new_creator(r, new_days)) for r in records[:limit]]


def aggregate(
    records: Sequence[CreatorRecord],
    filters: DashboardFilters,
    *,
    limit: int = CREATOR_VIEW_LIMIT,
    new_days: int = NEW_CREATOR_DAYS,
) -> DashboardView:
    """
    Compute the dashboard view for one filter selection.

    Group and period options come from the unfiltered records; every number
    comes from the filtered ones.
    """
    periods = distinct_values(r.period for r in records)
    groups = distinct_values(r.group_name for r in records)
    filtered = filter_records(records, filters)

    return DashboardView(
        filters=filters,
        summary=summarize(filtered, new_days),
        group_rollups=group_rollups(filtered, groups),
        creator_view=creator_view(filtered, limit, new_days),
        periods=periods,
        groups=groups,
    )
