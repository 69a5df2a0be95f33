from __future__ import annotations

import calendar
from datetime import date, datetime, time


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests and scripts can substitute a fixed clock.
    """
    return datetime.now()


def minutes_since_midnight(value: datetime | time) -> float:
    """Minutes elapsed since midnight, seconds and microseconds included."""
    return value.hour * 60 + value.minute + (value.second + value.microsecond / 1_000_000) / 60


def hours_between(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds() / 3600


def month_days(year: int, month: int) -> list[date]:
    _, last_day = calendar.monthrange(year, month)
    return [date(year, month, day) for day in range(1, last_day + 1)]
