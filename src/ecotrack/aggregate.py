"""Footprint aggregation over activity records.

All functions take a reference ``now`` instead of reading the clock, and
never fail on empty input: every aggregate of no records is 0.

Windowed averages are expressed as window-length totals:

    daily_average   = window sum / max(1, days since the earliest record)
    weekly_average  = daily_average(records of the last 7 days) × 7
    monthly_average = daily_average(records of the last calendar month) × 30

Timestamps and ``now`` must agree on timezone awareness; records parsed by
ecotrack.records are always UTC-aware.
"""

from __future__ import annotations

import calendar
from collections.abc import Iterable, Sequence
from dataclasses import replace
from datetime import datetime, timedelta

from ecotrack.core.models import (
    ActivityRecord,
    Category,
    CategoryStats,
    PeriodSummary,
    UserCarbonStats,
)
from ecotrack.observability import StatsRecomputed, emit

DAY = timedelta(days=1)
WEEK_DAYS = 7
MONTH_DAYS = 30

PERIODS = ("week", "month", "year")


def subtract_months(dt: datetime, months: int) -> datetime:
    """Same wall-clock time ``months`` calendar months earlier.

    The day is clamped to the target month's length (Mar 31 -> Feb 28/29).
    """
    month_index = dt.year * 12 + (dt.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return dt.replace(year=year, month=month, day=day)


def elapsed_days(start: datetime, end: datetime) -> float:
    """Fractional days from start to end, clamped to at least 1."""
    return max(1.0, (end - start) / DAY)


def total(records: Iterable[ActivityRecord]) -> float:
    """Sum of footprints."""
    return float(sum(r.footprint for r in records))


def in_window(
    records: Iterable[ActivityRecord], start: datetime, end: datetime
) -> list[ActivityRecord]:
    """Records with start <= timestamp <= end."""
    return [r for r in records if start <= r.timestamp <= end]


def daily_average(records: Sequence[ActivityRecord], now: datetime) -> float:
    """Sum of footprints per day since the earliest record (at least one day)."""
    if not records:
        return 0.0
    earliest = min(r.timestamp for r in records)
    return total(records) / elapsed_days(earliest, now)


def weekly_average(records: Iterable[ActivityRecord], now: datetime) -> float:
    window = in_window(records, now - timedelta(days=WEEK_DAYS), now)
    return daily_average(window, now) * WEEK_DAYS


def monthly_average(records: Iterable[ActivityRecord], now: datetime) -> float:
    window = in_window(records, subtract_months(now, 1), now)
    return daily_average(window, now) * MONTH_DAYS


def category_breakdown(records: Iterable[ActivityRecord]) -> dict[str, CategoryStats]:
    """Per-category {total, count, average}, in first-seen order."""
    totals: dict[str, float] = {}
    counts: dict[str, int] = {}
    for r in records:
        key = r.category.value if isinstance(r.category, Category) else str(r.category)
        totals[key] = totals.get(key, 0.0) + r.footprint
        counts[key] = counts.get(key, 0) + 1
    return {
        key: CategoryStats(total=totals[key], count=counts[key], average=totals[key] / counts[key])
        for key in totals
    }


def select_records(
    records: Iterable[ActivityRecord],
    category: str | Category | None = None,
    start: datetime | None = None,
    end: datetime | None = None,
) -> list[ActivityRecord]:
    """Filter by category and inclusive date range, newest first.

    A category that is not a known Category matches nothing.
    """
    cat = None
    if category is not None:
        cat = Category.parse(category)
        if cat is None:
            return []
    selected = [
        r
        for r in records
        if (cat is None or r.category == cat)
        and (start is None or r.timestamp >= start)
        and (end is None or r.timestamp <= end)
    ]
    selected.sort(key=lambda r: r.timestamp, reverse=True)
    return selected


def period_start(now: datetime, period: str) -> tuple[str, datetime]:
    """Resolve a reporting period to (period name, start). Unknown periods mean month."""
    if period == "week":
        return period, now - timedelta(days=WEEK_DAYS)
    if period == "year":
        return period, subtract_months(now, 12)
    if period != "month":
        period = "month"
    return period, subtract_months(now, 1)


def period_summary(
    records: Sequence[ActivityRecord],
    now: datetime,
    period: str = "month",
) -> PeriodSummary:
    """Statistics for records in [period start, now], plus all-time context.

    weekly_total and monthly_total are plain trailing sums over all records
    (last 7 and last 30 days), not the scaled averages of weekly_average().
    """
    period, start = period_start(now, period)
    window = in_window(records, start, now)
    window_total = total(window)
    days = elapsed_days(start, now)

    return PeriodSummary(
        period=period,
        start=start,
        total_footprint=window_total,
        average_per_day=window_total / days,
        category_stats=category_breakdown(window),
        activity_count=len(window),
        all_time_total=total(records),
        days_in_period=round(days),
        weekly_total=total(in_window(records, now - timedelta(days=WEEK_DAYS), now)),
        monthly_total=total(in_window(records, now - timedelta(days=MONTH_DAYS), now)),
    )


def recompute_stats(
    records: Sequence[ActivityRecord],
    now: datetime,
    stats: UserCarbonStats | None = None,
) -> UserCarbonStats:
    """Recompute totals and windowed averages from the full record set.

    Goal, level and experience are carried over from ``stats`` unchanged.
    """
    base = stats or UserCarbonStats()
    updated = replace(
        base,
        total_footprint=total(records),
        weekly_average=weekly_average(records, now),
        monthly_average=monthly_average(records, now),
    )
    emit(
        StatsRecomputed(
            record_count=len(records),
            total_footprint=updated.total_footprint,
            weekly_average=updated.weekly_average,
            monthly_average=updated.monthly_average,
            timestamp=now.isoformat(),
        )
    )
    return updated
