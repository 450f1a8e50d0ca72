"""
Calendar arithmetic utilities.

All engine dates are plain `date` values (midnight-normalized calendar days).
These helpers keep the day/month stepping rules in one place.
"""

import calendar
import math
from datetime import date, datetime, time, timedelta
from typing import Iterator, Optional

ONE_DAY = timedelta(days=1)


def normalize_to_date(value):
    """
    Normalize a datetime (or ISO string) to its calendar date.

    Dates pass through unchanged; anything else is returned as-is so that
    pydantic can report a proper validation error.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str) and "T" in value:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
    return value


def add_days(value: date, days: int) -> date:
    """Shift a date by a (possibly negative) number of days."""
    return value + timedelta(days=days)


def iter_days(start: date, end: date) -> Iterator[date]:
    """Iterate calendar days from start to end, both inclusive."""
    current = start
    while current <= end:
        yield current
        current += ONE_DAY


def days_between(start: date, end: date) -> int:
    """Signed number of days from start to end."""
    return (end - start).days


def month_index(value: date) -> int:
    """Months since year 0, for month stepping."""
    return value.year * 12 + value.month - 1


def day_in_month(index: int, day: int) -> Optional[date]:
    """
    Date in the month given by a month index, or None when the month is too short.

    Example:
        >>> day_in_month(month_index(date(2025, 2, 1)), 31) is None
        True
    """
    year, month = index // 12, index % 12 + 1
    if day > calendar.monthrange(year, month)[1]:
        return None
    return date(year, month, day)


def nth_weekday_of_month(year: int, month: int, weekday: int, nth: int) -> date:
    """
    Find the Nth given weekday of a month.

    Args:
        year: Year
        month: Month (1-12)
        weekday: Python weekday (0=Monday ... 6=Sunday)
        nth: 1-4 for first..fourth, 5 for the last one in the month

    Returns:
        date of the occurrence
    """
    first = date(year, month, 1)
    offset = (weekday - first.weekday()) % 7
    candidate = first + timedelta(days=offset + 7 * (nth - 1))
    while candidate.month != month:
        candidate -= timedelta(days=7)
    return candidate


def start_of_day(value: date) -> datetime:
    """Midnight at the start of a date."""
    return datetime.combine(value, time.min)


def overlap_hours_on_date(start: datetime, end: datetime, day: date) -> float:
    """
    Hours of [start, end) that fall on the given day.

    Cross-midnight intervals are clipped to the day being measured.
    """
    day_start = start_of_day(day)
    day_end = day_start + ONE_DAY
    if start.tzinfo is not None:
        day_start = day_start.replace(tzinfo=start.tzinfo)
        day_end = day_end.replace(tzinfo=start.tzinfo)
    effective_start = max(start, day_start)
    effective_end = min(end, day_end)
    if effective_start >= effective_end:
        return 0.0
    return (effective_end - effective_start).total_seconds() / 3600


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves toward +infinity."""
    return math.floor(value + 0.5)
