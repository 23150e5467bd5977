"""
Pytest configuration and shared fixtures.
"""
import itertools
import pytest
from datetime import date

from src.models.profile import AnchorSet, AppState, Profile
from src.services.state import StateRepository
from src.utils.dates import FixedClock
from src.utils.storage import InMemoryStorage


@pytest.fixture
def anchor() -> AnchorSet:
    """Anchor on the first day of 2024."""
    return AnchorSet(date(2024, 1, 1))


@pytest.fixture
def clock() -> FixedClock:
    """Clock pinned to mid January 2024."""
    return FixedClock(date(2024, 1, 14))


@pytest.fixture
def id_factory():
    """Deterministic profile ids: p_1, p_2, ..."""
    counter = itertools.count(1)
    return lambda: f"p_{next(counter)}"


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def repository(storage, clock, id_factory) -> StateRepository:
    """Repository over in-memory storage with a fixed clock."""
    return StateRepository(storage, clock=clock, id_factory=id_factory)


@pytest.fixture
def three_profile_state() -> AppState:
    """State with three profiles, the second one active."""
    return AppState(
        profiles=[
            Profile(id="a", name="Anna", color="#ef4444", start_date=date(2024, 1, 1)),
            Profile(id="b", name="Bea", color="#10b981", start_date=date(2024, 1, 10)),
            Profile(id="c", name="Cleo", color="#3b82f6"),
        ],
        active_profile_id="b",
        calendar_cursor_month=date(2024, 1, 1),
        summary_cursor_month=date(2024, 1, 1)
    )
