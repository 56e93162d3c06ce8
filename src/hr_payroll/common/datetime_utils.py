from __future__ import annotations

import calendar
from datetime import date, datetime, time, timedelta
from typing import Collection, Iterator, Tuple

from ..core.constants import DEFAULT_WEEKEND_DAYS
from ..core.exceptions import ValidationError

_EPOCH = datetime(1970, 1, 1)


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid date (YYYY-MM-DD): {value!r}")


def parse_iso_datetime(value: str) -> datetime:
    """Parse an ISO 8601 timestamp into naive local time.

    Punches are compared against naive expected-time windows, so a value with
    an offset is converted to the server's local zone and the offset dropped.
    """
    try:
        parsed = datetime.fromisoformat(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid timestamp (ISO 8601): {value!r}")
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def parse_hhmm(value: str) -> time:
    """Parse an "HH:MM" policy string."""
    try:
        return datetime.strptime(value.strip(), "%H:%M").time()
    except (AttributeError, ValueError):
        raise ValidationError(f"Invalid time (HH:MM): {value!r}")


def at_time(day: date, hhmm: str) -> datetime:
    return datetime.combine(day, parse_hhmm(hhmm))


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def iter_dates(start: date, end: date) -> Iterator[date]:
    """Every calendar date from start to end, inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def is_business_day(day: date, weekend_days: Collection[int] = DEFAULT_WEEKEND_DAYS) -> bool:
    return day.weekday() not in weekend_days


def count_business_days(start: date, end: date, weekend_days: Collection[int] = DEFAULT_WEEKEND_DAYS) -> int:
    return sum(1 for d in iter_dates(start, end) if is_business_day(d, weekend_days))


def month_bounds(year: int, month: int) -> Tuple[date, date]:
    """First and last calendar date of a month."""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def year_bounds(year: int) -> Tuple[date, date]:
    return date(year, 1, 1), date(year, 12, 31)


def hours_between(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds() / 3600


def mean_datetime(values: Collection[datetime]) -> datetime:
    """Arithmetic mean of timestamps (offsets from the Unix epoch)."""
    total = sum((v - _EPOCH for v in values), timedelta())
    return _EPOCH + total / len(values)
