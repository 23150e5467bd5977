"""
Profile and application state models.

The persisted snapshot uses camelCase keys and ``YYYY-MM-DD`` dates:

    {
        "name": "RedDay", "icon": "📅", "password": "",
        "profiles": [{"id": "p_1", "name": "Anna", "color": "#ef4444",
                      "startDate": "2024-01-01", "editMode": false}],
        "activeProfileId": "p_1",
        "calendarCursorMonth": "2024-01-01",
        "summaryCursorMonth": "2024-01-01"
    }
"""
from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from src.utils.dates import format_date, parse_date

DEFAULT_APP_NAME = "RedDay"
DEFAULT_PROFILE_NAME = "New profile"
ICONS: Tuple[str, ...] = ("📅", "📆", "🗓️", "📘", "✅")
DEFAULT_ICON = ICONS[0]


@dataclass(frozen=True)
class AnchorUnset:
    """The profile has no recorded cycle start yet."""


@dataclass(frozen=True)
class AnchorSet:
    """A recorded first day of a known cycle."""
    day: date


Anchor = Union[AnchorUnset, AnchorSet]

UNSET = AnchorUnset()


def anchor_from(day: Optional[date]) -> Anchor:
    """Wrap an optional date into the anchor sum type."""
    return UNSET if day is None else AnchorSet(day)


def _parse_optional_date(value):
    if isinstance(value, str):
        return parse_date(value) if value else None
    return value


class Profile(BaseModel):
    """
    A named person whose cycle is tracked.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    name: str = DEFAULT_PROFILE_NAME
    color: str
    start_date: Optional[date] = Field(None, alias="startDate")
    edit_mode: Optional[bool] = Field(None, alias="editMode")  # UI-only

    @field_validator("start_date", mode="before")
    @classmethod
    def _parse_start_date(cls, value):
        return _parse_optional_date(value)

    @field_serializer("start_date")
    def _serialize_start_date(self, value: Optional[date]) -> Optional[str]:
        return format_date(value) if value is not None else None

    @property
    def anchor(self) -> Anchor:
        return anchor_from(self.start_date)

    @property
    def is_editing(self) -> bool:
        return bool(self.edit_mode)


class AppState(BaseModel):
    """
    Full application snapshot. Never mutated in place; every change
    produces a new instance.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = DEFAULT_APP_NAME
    icon: str = DEFAULT_ICON
    password: str = ""
    profiles: List[Profile]
    active_profile_id: Optional[str] = Field(None, alias="activeProfileId")
    calendar_cursor_month: date = Field(alias="calendarCursorMonth")
    summary_cursor_month: date = Field(alias="summaryCursorMonth")

    @field_validator("calendar_cursor_month", "summary_cursor_month", mode="before")
    @classmethod
    def _parse_cursor(cls, value):
        if isinstance(value, str):
            return parse_date(value)
        return value

    @field_serializer("calendar_cursor_month", "summary_cursor_month")
    def _serialize_cursor(self, value: date) -> str:
        return format_date(value)

    def find_profile(self, profile_id: str) -> Optional[Profile]:
        return next((p for p in self.profiles if p.id == profile_id), None)
