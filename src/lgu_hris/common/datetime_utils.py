from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Iterator, Optional


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_hhmm(value: str) -> time:
    """Parse HH:MM or HH:MM:SS into time."""
    parts = value.strip().split(":")
    if len(parts) < 2:
        raise ValueError(f"Invalid time string: {value!r}")
    seconds = int(parts[2]) if len(parts) >= 3 and parts[2] else 0
    return time(hour=int(parts[0]), minute=int(parts[1]), second=seconds)


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def date_range(start: date, end: date) -> Iterator[date]:
    """Inclusive day-by-day range; empty when end < start."""
    day = start
    while day <= end:
        yield day
        day += timedelta(days=1)


def minutes_of(value: Optional[time]) -> Optional[int]:
    if value is None:
        return None
    return value.hour * 60 + value.minute


def format_hhmm(value: Optional[time]) -> str:
    return value.strftime("%H:%M") if value else ""


def is_weekend(day: date) -> bool:
    return day.weekday() >= 5
