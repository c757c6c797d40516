# app/aggregation.py
"""Client-side bucketing of sales entries for the dashboard charts.

Everything here is a pure function of (entries, now): no fetching, no
Streamlit state. Pages call these on every run with freshly fetched rows.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum

import pandas as pd

WEEKDAY_LABELS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
MONTH_LABELS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")
SUNDAY = 6


class Granularity(str, Enum):
    HOUR = "hour"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


BUCKET_COUNTS = {
    Granularity.HOUR: 24,
    Granularity.DAY: 7,
    Granularity.WEEK: 4,
    Granularity.MONTH: 12,
}


@dataclass
class Bucket:
    label: str
    sales: float = 0.0
    items: int = 0


@dataclass(frozen=True)
class Summary:
    today: float = 0.0
    week: float = 0.0
    month: float = 0.0
    year: float = 0.0


def localize(ts: datetime, now: datetime) -> datetime:
    """Express ``ts`` in the same clock as ``now`` (naive ``now`` = local time)."""
    if now.tzinfo is not None:
        if ts.tzinfo is None:
            return ts.replace(tzinfo=now.tzinfo)
        return ts.astimezone(now.tzinfo)
    if ts.tzinfo is not None:
        return ts.astimezone().replace(tzinfo=None)
    return ts


def window(granularity, now: datetime):
    """Date range ``[first, end)`` covered by a granularity's buckets."""
    g = Granularity(granularity)
    today = now.date()
    if g is Granularity.HOUR:
        return today, today + timedelta(days=1)
    if g is Granularity.DAY:
        return today - timedelta(days=6), today + timedelta(days=1)
    if g is Granularity.WEEK:
        return today - timedelta(days=27), today + timedelta(days=1)
    return date(today.year, 1, 1), date(today.year + 1, 1, 1)


def _labels(g: Granularity, now: datetime):
    today = now.date()
    if g is Granularity.HOUR:
        return [f"{h}:00" for h in range(24)]
    if g is Granularity.DAY:
        return [WEEKDAY_LABELS[(today - timedelta(days=6 - i)).weekday()] for i in range(7)]
    if g is Granularity.WEEK:
        return [f"Week {i + 1}" for i in range(4)]
    return list(MONTH_LABELS)


def _bucket_index(g: Granularity, when: datetime, now: datetime):
    today = now.date()
    d = when.date()

    if g is Granularity.HOUR:
        return when.hour if d == today else None

    if g is Granularity.DAY:
        offset = (today - d).days
        return 6 - offset if 0 <= offset <= 6 else None

    if g is Granularity.WEEK:
        for i in range(4):
            week_start = today - timedelta(days=(3 - i) * 7 + 6)
            week_end = week_start + timedelta(days=7)
            if week_start <= d < week_end:
                return i
        return None

    if d.year == today.year:
        return d.month - 1
    return None


def aggregate(entries, granularity, now: datetime) -> list:
    """Partition ``entries`` into the buckets of ``granularity`` around ``now``.

    hour  -> 24 buckets, hours of today
    day   -> 7 buckets, today and the 6 days before it
    week  -> 4 buckets of 7 days, oldest first, the last ending today
    month -> 12 buckets, calendar months of the current year

    Every bucket is returned even when empty. Each entry lands in at most one
    bucket; entries outside the window are dropped.
    """
    g = Granularity(granularity)
    buckets = [Bucket(label) for label in _labels(g, now)]

    for e in entries:
        idx = _bucket_index(g, localize(e.created_at, now), now)
        if idx is None:
            continue
        buckets[idx].sales += e.cost
        buckets[idx].items += e.total_items

    return buckets


def bucket_frame(buckets) -> pd.DataFrame:
    return pd.DataFrame(
        [{"label": b.label, "sales": round(b.sales, 2), "items": b.items} for b in buckets],
        columns=["label", "sales", "items"],
    )


# -------------------- Summary cards --------------------
def period_starts(now: datetime, week_start: int = SUNDAY):
    """Midnight at the start of today, this week, this month and this year."""
    today = now.replace(hour=0, minute=0, second=0, microsecond=0)
    days_back = (now.weekday() - week_start) % 7
    return {
        "today": today,
        "week": today - timedelta(days=days_back),
        "month": today.replace(day=1),
        "year": today.replace(month=1, day=1),
    }


def sum_cost(entries) -> float:
    return sum(e.cost for e in entries)


def summarize(entries, now: datetime, week_start: int = SUNDAY) -> Summary:
    starts = period_starts(now, week_start)
    local = [(localize(e.created_at, now), e.cost) for e in entries]

    def since(boundary):
        return sum(cost for when, cost in local if when >= boundary)

    return Summary(
        today=since(starts["today"]),
        week=since(starts["week"]),
        month=since(starts["month"]),
        year=since(starts["year"]),
    )
