from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Iterator
from zoneinfo import ZoneInfo

from ..core.constants import DEFAULT_TIMEZONE, WEEKDAY_CODES


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_iso_datetime(value: str) -> datetime:
    """Parse an ISO datetime string into a naive datetime (offset, if any, is discarded)."""
    return datetime.fromisoformat(value).replace(tzinfo=None)


def now_local(tz_name: str = DEFAULT_TIMEZONE) -> datetime:
    """Current civil time in the configured timezone, as a naive datetime.

    Note: Wrapped so tests can patch/mocked easier. The store keeps naive
    civil times, so tzinfo is dropped after conversion.
    """
    return datetime.now(ZoneInfo(tz_name)).replace(tzinfo=None)


def weekday_code(day: date) -> str:
    """Short English weekday name (Mon..Sun) used by schedule day sets."""
    return WEEKDAY_CODES[day.weekday()]


def minutes_between(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds() / 60.0


def at(day: date, t: time) -> datetime:
    return datetime.combine(day, t.replace(second=0, microsecond=0))


def iter_dates(start: date, end: date) -> Iterator[date]:
    """Yield every date from start through end (inclusive)."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def format_hhmm(value: time) -> str:
    return value.strftime("%H:%M")


def format_hhmmss(value: datetime | time) -> str:
    return value.strftime("%H:%M:%S")
