"""
Render-ready calendar models for the month and summary views.
"""
from datetime import date
from typing import List, Optional
from pydantic import BaseModel, Field

from src.models.phase import PhaseResult, ProbabilityTier


class CalendarDay(BaseModel):
    """A day slot in a Monday-first month grid."""
    date: date
    in_month: bool


class CalendarCell(CalendarDay):
    """A day of the active profile's calendar with its classification."""
    result: PhaseResult


class ProfileMark(BaseModel):
    """One profile's label on a summary day."""
    profile_id: str
    color: str
    result: PhaseResult


class SummaryCell(CalendarDay):
    """A day of the summary view with marks from every configured profile."""
    marks: List[ProfileMark] = Field(default_factory=list)


class CalendarHeader(BaseModel):
    """Facts shown above the month grid."""
    cycle_start: Optional[date] = None
    today_probability: ProbabilityTier = ProbabilityTier.NONE
