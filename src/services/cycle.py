"""
Service module for fixed-period cycle calculations.

Every profile follows the same 28-day arithmetic model: a known cycle start
(the anchor) repeats every 28 days in both directions, so any calendar date
falls into exactly one cycle instance.

Typical usage:
    model = compute_model(date(2024, 2, 10), anchor_date=date(2024, 1, 1))
    model.start          # 2024-01-29
    model.ovulation_day  # 2024-02-11
"""
from datetime import date

from src.models.cycle import CycleModel
from src.services.constants import (
    CYCLE_LENGTH,
    MENSTRUAL_END_OFFSET,
    OVULATION_AFTER_MENSTRUATION,
    PREMENSTRUAL_DAYS
)
from src.utils.dates import add_days, as_day, diff_days


def compute_model(query_date: date, anchor_date: date) -> CycleModel:
    """
    Compute the boundaries of the cycle instance covering a date.

    The anchor may lie before or after the query date. Floor division on the
    day delta maps dates before the anchor onto the preceding instances.

    Args:
        query_date: Date to locate, time-of-day is ignored
        anchor_date: Any known cycle start

    Returns:
        CycleModel for the instance containing ``query_date``

    Example:
        >>> compute_model(date(2023, 12, 31), date(2024, 1, 1)).start
        datetime.date(2023, 12, 4)
    """
    query_date = as_day(query_date)
    anchor_date = as_day(anchor_date)

    k = diff_days(query_date, anchor_date) // CYCLE_LENGTH
    start = add_days(anchor_date, k * CYCLE_LENGTH)
    menstrual_end = add_days(start, MENSTRUAL_END_OFFSET)
    ovulation_day = add_days(menstrual_end, OVULATION_AFTER_MENSTRUATION)
    next_start = add_days(start, CYCLE_LENGTH)

    return CycleModel(
        start=start,
        menstrual_end=menstrual_end,
        ovulation_day=ovulation_day,
        next_start=next_start,
        premenstrual_start=add_days(next_start, -PREMENSTRUAL_DAYS),
        premenstrual_end=add_days(next_start, -1)
    )


def calculate_cycle_day(query_date: date, anchor_date: date) -> int:
    """
    Day number within the covering cycle instance (1-based, 1..28).

    Example:
        >>> calculate_cycle_day(date(2024, 1, 14), date(2024, 1, 1))
        14
    """
    return diff_days(query_date, anchor_date) % CYCLE_LENGTH + 1
