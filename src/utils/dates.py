"""
Calendar-date helpers shared by the cycle services.

All arithmetic works at day granularity. Datetimes are normalized to their
local calendar date before any comparison, so time-of-day never leaks into
phase math.

Typical usage:
    >>> day = parse_date("2024-01-05")
    >>> format_date(add_days(day, 3))
    '2024-01-08'
"""
import re
from datetime import date, datetime, timedelta
from typing import Protocol, Union

_ISO_DATE = re.compile(r"^([0-9]{4})-([0-9]{2})-([0-9]{2})\Z")

DateLike = Union[date, datetime]


def as_day(value: DateLike) -> date:
    """Drop the time-of-day component of a datetime."""
    if isinstance(value, datetime):
        return value.date()
    return value


def format_date(value: DateLike) -> str:
    """
    Format a date as a zero-padded ``YYYY-MM-DD`` string.

    Args:
        value: Date or datetime to format

    Returns:
        Local calendar date without any time zone component
    """
    day = as_day(value)
    return f"{day.year:04d}-{day.month:02d}-{day.day:02d}"


def parse_date(text: str) -> date:
    """
    Parse a ``YYYY-MM-DD`` string produced by :func:`format_date`.

    Args:
        text: Zero-padded ISO calendar date

    Returns:
        The parsed date

    Raises:
        ValueError: If the text is not a valid calendar date in that format
    """
    match = _ISO_DATE.match(text) if isinstance(text, str) else None
    if not match:
        raise ValueError(f"Invalid date string: {text!r}")
    year, month, day = (int(part) for part in match.groups())
    return date(year, month, day)


def add_days(value: DateLike, days: int) -> date:
    return as_day(value) + timedelta(days=days)


def diff_days(later: DateLike, earlier: DateLike) -> int:
    """Whole days from ``earlier`` to ``later`` (negative if reversed)."""
    return (as_day(later) - as_day(earlier)).days


def first_of_month(value: DateLike) -> date:
    return as_day(value).replace(day=1)


def shift_month(value: DateLike, delta: int) -> date:
    """
    Get the first day of the month ``delta`` months away.

    Example:
        >>> shift_month(date(2024, 1, 31), 1)
        datetime.date(2024, 2, 1)
    """
    day = as_day(value)
    index = day.year * 12 + (day.month - 1) + delta
    return date(index // 12, index % 12 + 1, 1)


class Clock(Protocol):
    """Source of the current calendar date."""

    def today(self) -> date:
        ...


class SystemClock:
    """Clock backed by the local system calendar."""

    def today(self) -> date:
        return date.today()


class FixedClock:
    """Clock pinned to a single date, for tests and replays."""

    def __init__(self, day: DateLike):
        self._day = as_day(day)

    def today(self) -> date:
        return self._day
