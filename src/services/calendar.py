"""
Service module for building month and summary calendar grids.

Grids are Monday-first and padded with days of the neighbouring months so
they always hold whole weeks. Each day carries the phase classification the
views need; nothing here formats or renders.

Typical usage:
    cells = build_month_grid(state.calendar_cursor_month, profile.anchor)
    summary = build_summary_grid(state.summary_cursor_month, state.profiles)
"""
from calendar import monthrange
from datetime import date
from typing import List, Sequence

from src.models.calendar import CalendarCell, CalendarDay, CalendarHeader, ProfileMark, SummaryCell
from src.models.profile import Anchor, AnchorSet, Profile
from src.services.cycle import compute_model
from src.services.phase import classify
from src.utils.dates import add_days, first_of_month

DAYS_PER_WEEK = 7


def build_month_days(month: date) -> List[CalendarDay]:
    """
    Get the day slots of a month grid.

    Args:
        month: Any day of the month to show

    Returns:
        Days from the Monday on or before the 1st through the Sunday on or
        after the last day, flagged ``in_month`` for the month's own days

    Example:
        >>> days = build_month_days(date(2024, 2, 1))  # Feb 1st 2024 is a Thursday
        >>> days[0].date, days[0].in_month
        (datetime.date(2024, 1, 29), False)
    """
    first = first_of_month(month)
    leading = first.weekday()
    days_in_month = monthrange(first.year, first.month)[1]
    total = leading + days_in_month
    if total % DAYS_PER_WEEK:
        total += DAYS_PER_WEEK - total % DAYS_PER_WEEK

    grid_start = add_days(first, -leading)
    days = []
    for offset in range(total):
        day = add_days(grid_start, offset)
        days.append(CalendarDay(date=day, in_month=(day.month == first.month and day.year == first.year)))
    return days


def build_month_grid(month: date, anchor: Anchor) -> List[CalendarCell]:
    """Classify every day of a month grid against one profile's anchor."""
    return [
        CalendarCell(date=day.date, in_month=day.in_month, result=classify(day.date, anchor))
        for day in build_month_days(month)
    ]


def build_summary_grid(month: date, profiles: Sequence[Profile]) -> List[SummaryCell]:
    """
    Classify every day of a month grid for all profiles at once.

    Profiles without an anchor are skipped, as are days where a profile's
    label is empty. Marks keep the profile order.
    """
    configured = [p for p in profiles if isinstance(p.anchor, AnchorSet)]
    cells = []
    for day in build_month_days(month):
        marks = []
        for profile in configured:
            result = classify(day.date, profile.anchor)
            if result.label:
                marks.append(ProfileMark(profile_id=profile.id, color=profile.color, result=result))
        cells.append(SummaryCell(date=day.date, in_month=day.in_month, marks=marks))
    return cells


def build_header(month: date, anchor: Anchor, today: date) -> CalendarHeader:
    """
    Get the cycle start covering the 1st of the shown month and today's
    probability tier. Both stay empty when the anchor is unset.
    """
    if not isinstance(anchor, AnchorSet):
        return CalendarHeader()
    model = compute_model(first_of_month(month), anchor.day)
    return CalendarHeader(
        cycle_start=model.start,
        today_probability=classify(today, anchor).probability
    )
