"""
Tests for the state repository and snapshot transitions.
"""
import json
import pytest
from datetime import date
from unittest.mock import Mock

from src.models.profile import DEFAULT_APP_NAME, DEFAULT_ICON, DEFAULT_PROFILE_NAME, AnchorSet, AnchorUnset, AppState, Profile
from src.services.constants import PALETTE, STORAGE_KEY
from src.services.exceptions import (
    InvalidSettingError,
    ProfileNotFoundError,
    StateDecodeError,
    StateStorageError
)
from src.services.state import (
    StateRepository,
    add_profile,
    create_initial_state,
    decode_state,
    delete_profile,
    enable_edit_mode,
    encode_state,
    get_active_profile,
    set_active_profile,
    set_anchor,
    shift_calendar_month,
    shift_summary_month,
    update_profile,
    update_settings
)
from src.utils.dates import FixedClock


def test_load_without_stored_state_returns_default(repository):
    """Test the default state: one unconfigured profile in edit mode."""
    state = repository.load()

    assert len(state.profiles) == 1
    profile = state.profiles[0]
    assert profile.id == "p_1"
    assert profile.name == "New profile"
    assert profile.color == PALETTE[0]
    assert isinstance(profile.anchor, AnchorUnset)
    assert profile.is_editing
    assert state.active_profile_id == "p_1"
    assert state.name == "RedDay"
    assert state.icon == "📅"
    assert state.password == ""
    assert state.calendar_cursor_month == date(2024, 1, 1)
    assert state.summary_cursor_month == date(2024, 1, 1)


@pytest.mark.parametrize("raw", [
    "not json",
    "[]",
    json.dumps({"profiles": "nope"}),
    json.dumps({"profiles": [{"id": "x", "color": "#fff", "startDate": "bad"}],
                "calendarCursorMonth": "2024-01-01", "summaryCursorMonth": "2024-01-01"}),
])
def test_load_corrupt_state_falls_back(storage, repository, raw):
    """Test corrupt snapshots silently fall back to defaults."""
    storage.set(STORAGE_KEY, raw)
    state = repository.load()
    assert [p.id for p in state.profiles] == ["p_1"]


def test_load_empty_profile_list_falls_back(storage, repository):
    storage.set(STORAGE_KEY, json.dumps({
        "profiles": [],
        "calendarCursorMonth": "2024-01-01",
        "summaryCursorMonth": "2024-01-01"
    }))
    assert len(repository.load().profiles) == 1


def test_load_backend_failure_falls_back(clock, id_factory):
    """Test a failing backend read never raises."""
    storage = Mock()
    storage.get.side_effect = OSError("disk gone")
    state = StateRepository(storage, clock=clock, id_factory=id_factory).load()
    assert state.profiles[0].id == "p_1"


def test_load_repoints_dangling_active_id(storage, repository, three_profile_state):
    """Test an active id for a deleted profile is repointed to the first."""
    stale = three_profile_state.model_copy(update={"active_profile_id": "gone"})
    storage.set(STORAGE_KEY, encode_state(stale))
    assert repository.load().active_profile_id == "a"


def test_save_and_load_round_trip(storage, repository, three_profile_state):
    """Test the persisted shape and that loading restores the snapshot."""
    repository.save(three_profile_state)

    payload = json.loads(storage.get(STORAGE_KEY))
    assert set(payload) == {
        "name", "icon", "password", "profiles", "activeProfileId",
        "calendarCursorMonth", "summaryCursorMonth"
    }
    assert payload["profiles"][0]["startDate"] == "2024-01-01"
    assert payload["profiles"][2]["startDate"] is None
    assert payload["calendarCursorMonth"] == "2024-01-01"
    assert repository.load() == three_profile_state


def test_save_wraps_backend_errors(clock):
    storage = Mock()
    storage.set.side_effect = OSError("read-only")
    repository = StateRepository(storage, clock=clock)
    with pytest.raises(StateStorageError, match="read-only"):
        repository.save(repository.default_state())


def test_decode_state_rejects_garbage():
    with pytest.raises(StateDecodeError):
        decode_state("{")


def test_add_profile_selects_new_profile(three_profile_state):
    """Test a new profile gets the next unused color and becomes active."""
    state = add_profile(three_profile_state, id_factory=lambda: "d")

    new = state.profiles[-1]
    assert new.id == "d"
    assert new.color == PALETTE[3]
    assert new.is_editing
    assert state.active_profile_id == "d"
    assert len(three_profile_state.profiles) == 3  # input snapshot untouched


def test_delete_selects_preceding_profile(three_profile_state):
    state = delete_profile(three_profile_state, "c")
    assert [p.id for p in state.profiles] == ["a", "b"]
    assert state.active_profile_id == "b"

    state = delete_profile(three_profile_state, "b")
    assert state.active_profile_id == "a"


def test_delete_first_profile_selects_new_first(three_profile_state):
    state = delete_profile(three_profile_state, "a")
    assert state.active_profile_id == "b"


def test_delete_last_profile_resets_state(three_profile_state):
    """Test deleting the sole profile resets to a fresh default."""
    state = three_profile_state.model_copy(update={
        "profiles": three_profile_state.profiles[:1],
        "name": "Custom"
    })
    state = delete_profile(state, "a", clock=FixedClock(date(2025, 3, 9)), id_factory=lambda: "fresh")

    assert [p.id for p in state.profiles] == ["fresh"]
    assert state.name == "RedDay"
    assert state.calendar_cursor_month == date(2025, 3, 1)


def test_unknown_profile_ids_raise(three_profile_state):
    with pytest.raises(ProfileNotFoundError):
        delete_profile(three_profile_state, "zzz")
    with pytest.raises(ProfileNotFoundError):
        set_active_profile(three_profile_state, "zzz")
    with pytest.raises(ProfileNotFoundError):
        update_profile(three_profile_state, "zzz", name="X")


def test_update_profile(three_profile_state):
    """Test field updates and blank-name fallback."""
    state = update_profile(three_profile_state, "a", name="Ann", color="#000000")
    assert state.profiles[0].name == "Ann"
    assert state.profiles[0].color == "#000000"

    state = update_profile(state, "a", name="")
    assert state.profiles[0].name == "New profile"

    with pytest.raises(ValueError):
        update_profile(state, "a", id="hijack")


def test_update_profile_validates_start_date(three_profile_state):
    """Test string dates are parsed and bad values rejected like stored snapshots."""
    state = update_profile(three_profile_state, "c", start_date="2024-02-01")
    assert state.find_profile("c").anchor == AnchorSet(date(2024, 2, 1))
    assert json.loads(encode_state(state))["profiles"][2]["startDate"] == "2024-02-01"

    state = update_profile(state, "c", start_date=None)
    assert state.find_profile("c").anchor == AnchorUnset()

    with pytest.raises(ValueError):
        update_profile(three_profile_state, "c", start_date="2024-02-30")
    with pytest.raises(ValueError):
        update_profile(three_profile_state, "c", edit_mode="sometimes")


def test_set_anchor_only_in_edit_mode(three_profile_state):
    """Test a day click records the anchor only while editing."""
    unchanged = set_anchor(three_profile_state, date(2024, 2, 2))
    assert unchanged is three_profile_state

    editing = enable_edit_mode(three_profile_state)
    assert get_active_profile(editing).is_editing

    state = set_anchor(editing, date(2024, 2, 2))
    active = get_active_profile(state)
    assert active.anchor == AnchorSet(date(2024, 2, 2))
    assert not active.is_editing


def test_enable_edit_mode_for_other_profile(three_profile_state):
    state = enable_edit_mode(three_profile_state, "c")
    assert state.find_profile("c").is_editing
    assert not state.find_profile("b").is_editing


def test_get_active_profile_falls_back_to_first(three_profile_state):
    state = three_profile_state.model_copy(update={"active_profile_id": None})
    assert get_active_profile(state).id == "a"


def test_month_cursors_move_independently(three_profile_state):
    state = shift_calendar_month(three_profile_state, -1)
    assert state.calendar_cursor_month == date(2023, 12, 1)
    assert state.summary_cursor_month == date(2024, 1, 1)

    state = shift_summary_month(state, 2)
    assert state.summary_cursor_month == date(2024, 3, 1)


def test_update_settings(three_profile_state):
    """Test settings updates, blank name fallback and icon validation."""
    state = update_settings(three_profile_state, name="Tracker", icon="✅", password="secret")
    assert (state.name, state.icon, state.password) == ("Tracker", "✅", "secret")

    state = update_settings(state, name="")
    assert state.name == "RedDay"
    assert state.password == "secret"

    with pytest.raises(InvalidSettingError):
        update_settings(state, icon="🐍")


def test_repository_apply_persists(storage, repository, three_profile_state):
    """Test every applied transition is written through."""
    state = repository.apply(three_profile_state, set_active_profile, "c")
    assert state.active_profile_id == "c"
    assert json.loads(storage.get(STORAGE_KEY))["activeProfileId"] == "c"


def test_repository_add_and_delete(storage, repository):
    state = repository.load()
    state = repository.add_profile(state)
    assert [p.id for p in state.profiles] == ["p_1", "p_2"]
    assert state.profiles[1].color == PALETTE[1]

    state = repository.delete_profile(state, "p_2")
    assert repository.load() == state
    assert state.active_profile_id == "p_1"

    state = repository.delete_profile(state, "p_1")
    assert [p.id for p in state.profiles] == ["p_3"]
    assert isinstance(AppState.model_validate_json(storage.get(STORAGE_KEY)), AppState)


def test_model_defaults_match_new_state(clock, id_factory):
    state = create_initial_state(clock, id_factory)
    profile = Profile(id="x", color=PALETTE[0])
    bare = AppState(profiles=[profile], calendarCursorMonth="2024-01-01", summaryCursorMonth="2024-01-01")

    assert (state.name, state.icon) == (bare.name, bare.icon) == (DEFAULT_APP_NAME, DEFAULT_ICON)
    assert state.profiles[0].name == profile.name == DEFAULT_PROFILE_NAME
