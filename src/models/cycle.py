"""
Cycle model definition: the boundaries of one 28-day cycle instance.
"""
from datetime import date
from typing import Tuple

from pydantic import BaseModel, ConfigDict


class CycleModel(BaseModel):
    """
    Boundaries of the cycle instance covering a query date.

    Ordering always holds:
    start <= menstrual_end < ovulation_day < premenstrual_start
    < premenstrual_end < next_start
    """
    model_config = ConfigDict(frozen=True)

    start: date
    menstrual_end: date
    ovulation_day: date
    next_start: date
    premenstrual_start: date
    premenstrual_end: date

    @property
    def premenstrual_window(self) -> Tuple[date, date]:
        return self.premenstrual_start, self.premenstrual_end

    def contains(self, day: date) -> bool:
        """Check membership in the half-open interval [start, next_start)."""
        return self.start <= day < self.next_start
