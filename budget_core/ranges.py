"""Resolve named date-range tokens into concrete [start, end] instants."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import NamedTuple, Optional

from dateutil.relativedelta import relativedelta

RANGE_TOKENS = ("today", "week", "month", "quarter", "year", "all")

RANGE_LABELS = {
    "today": "Today",
    "week": "This Week",
    "month": "This Month",
    "quarter": "This Quarter",
    "year": "This Year",
    "all": "All Time",
}

_MONTHS_BACK = {"month": 1, "quarter": 3, "year": 12}


class DateRange(NamedTuple):
    start: datetime
    end: datetime

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment <= self.end


def resolve_range(token: str, now: datetime) -> DateRange:
    """Map ``token`` to a range ending at ``now``.

    ``today`` starts at midnight, ``week`` seven days back at the same time
    of day, ``month``/``quarter``/``year`` the matching number of calendar
    months back. ``all`` and any unknown token start at the earliest
    representable instant.
    """
    if token == "today":
        start = datetime.combine(now.date(), time.min, tzinfo=now.tzinfo)
    elif token == "week":
        start = now - timedelta(days=7)
    elif token in _MONTHS_BACK:
        start = now - relativedelta(months=_MONTHS_BACK[token])
    else:
        start = datetime.min.replace(tzinfo=now.tzinfo)
    return DateRange(start=start, end=now)


def all_time(now: datetime) -> DateRange:
    return resolve_range("all", now)


def parse_date(value: object) -> Optional[date]:
    """ISO calendar date from a stored value, or None when it can't be read."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or len(value) < 10:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None


def as_instant(day: date, like: datetime) -> datetime:
    """Midnight of ``day`` in the same timezone flavour as ``like``."""
    return datetime.combine(day, time.min, tzinfo=like.tzinfo)
