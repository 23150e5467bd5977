"""
State repository and snapshot transitions.

The whole application state is one immutable ``AppState`` snapshot. Every
change goes through a pure transition that returns a new snapshot, and the
repository persists the full snapshot under a fixed storage key after each
change (last write wins).

Typical usage:
    repository = StateRepository(FileStorage(data_dir))
    state = repository.load()
    state = repository.add_profile(state)
    state = repository.apply(state, update_profile, state.active_profile_id, name="Anna")
"""
import json
import uuid
from datetime import date
from typing import Any, Callable, Optional

from pydantic import ValidationError

from src.models.profile import (
    DEFAULT_APP_NAME,
    DEFAULT_ICON,
    DEFAULT_PROFILE_NAME,
    ICONS,
    AppState,
    Profile
)
from src.services.constants import PALETTE, STORAGE_KEY
from src.services.exceptions import (
    InvalidSettingError,
    ProfileNotFoundError,
    StateDecodeError,
    StateStorageError
)
from src.services.palette import next_color
from src.utils.dates import Clock, SystemClock, first_of_month, shift_month
from src.utils.logging import logger
from src.utils.storage import KeyValueStorage

IdFactory = Callable[[], str]

_UPDATABLE_PROFILE_FIELDS = {"name", "color", "start_date", "edit_mode"}


def new_profile_id() -> str:
    return f"p_{uuid.uuid4().hex[:12]}"


def create_initial_state(
    clock: Optional[Clock] = None,
    id_factory: IdFactory = new_profile_id
) -> AppState:
    """
    Build the default snapshot: one unconfigured profile in edit mode and
    both month cursors on the current month.
    """
    clock = clock or SystemClock()
    month = first_of_month(clock.today())
    profile = Profile(
        id=id_factory(),
        name=DEFAULT_PROFILE_NAME,
        color=PALETTE[0],
        start_date=None,
        edit_mode=True
    )
    return AppState(
        name=DEFAULT_APP_NAME,
        icon=DEFAULT_ICON,
        password="",
        profiles=[profile],
        active_profile_id=profile.id,
        calendar_cursor_month=month,
        summary_cursor_month=month
    )


def decode_state(raw: str) -> AppState:
    """
    Decode a stored snapshot.

    Raises:
        StateDecodeError: If the payload is not a valid snapshot
    """
    try:
        return AppState.model_validate(json.loads(raw))
    except (ValueError, TypeError, ValidationError) as e:
        raise StateDecodeError(f"Failed to decode state: {str(e)}") from e


def encode_state(state: AppState) -> str:
    return state.model_dump_json(by_alias=True)


def _require_profile(state: AppState, profile_id: str) -> Profile:
    profile = state.find_profile(profile_id)
    if profile is None:
        raise ProfileNotFoundError(profile_id)
    return profile


def _replace_profile(state: AppState, profile: Profile) -> AppState:
    profiles = [profile if p.id == profile.id else p for p in state.profiles]
    return state.model_copy(update={"profiles": profiles})


def get_active_profile(state: AppState) -> Profile:
    """Get the selected profile, falling back to the first one."""
    return state.find_profile(state.active_profile_id) or state.profiles[0]


def add_profile(state: AppState, id_factory: IdFactory = new_profile_id) -> AppState:
    """Append a fresh profile in edit mode and select it."""
    profile = Profile(
        id=id_factory(),
        name=DEFAULT_PROFILE_NAME,
        color=next_color(state.profiles),
        start_date=None,
        edit_mode=True
    )
    return state.model_copy(update={
        "profiles": [*state.profiles, profile],
        "active_profile_id": profile.id
    })


def delete_profile(
    state: AppState,
    profile_id: str,
    clock: Optional[Clock] = None,
    id_factory: IdFactory = new_profile_id
) -> AppState:
    """
    Remove a profile.

    Deleting the only profile resets the whole state to the default. Otherwise
    the profile preceding the deleted one becomes active (or the first one if
    the deleted profile was first).
    """
    _require_profile(state, profile_id)
    remaining = [p for p in state.profiles if p.id != profile_id]
    if not remaining:
        logger.info("Last profile deleted, resetting state", extra={"profile_id": profile_id})
        return create_initial_state(clock, id_factory)

    index = next(i for i, p in enumerate(state.profiles) if p.id == profile_id)
    active = remaining[max(0, index - 1)]
    return state.model_copy(update={
        "profiles": remaining,
        "active_profile_id": active.id
    })


def update_profile(state: AppState, profile_id: str, **changes: Any) -> AppState:
    """
    Change editable profile fields (name, color, start_date, edit_mode).

    A blank name falls back to the default profile name.

    Raises:
        ProfileNotFoundError: If the profile does not exist
        ValueError: If an unknown field is passed
        ValidationError: If a value has the wrong type
    """
    profile = _require_profile(state, profile_id)
    unknown = set(changes) - _UPDATABLE_PROFILE_FIELDS
    if unknown:
        raise ValueError(f"Unknown profile fields: {', '.join(sorted(unknown))}")
    if "name" in changes and not changes["name"]:
        changes["name"] = DEFAULT_PROFILE_NAME
    return _replace_profile(state, Profile.model_validate({**profile.model_dump(), **changes}))


def set_active_profile(state: AppState, profile_id: str) -> AppState:
    _require_profile(state, profile_id)
    return state.model_copy(update={"active_profile_id": profile_id})


def set_anchor(state: AppState, day: date) -> AppState:
    """
    Record ``day`` as the active profile's cycle start.

    Only applies while the profile is in edit mode; the profile then leaves
    edit mode. Outside edit mode the state is returned unchanged.
    """
    profile = get_active_profile(state)
    if not profile.is_editing:
        return state
    return _replace_profile(state, profile.model_copy(update={
        "start_date": day,
        "edit_mode": False
    }))


def enable_edit_mode(state: AppState, profile_id: Optional[str] = None) -> AppState:
    """Put a profile (the active one by default) into edit mode."""
    if profile_id is None:
        profile = get_active_profile(state)
    else:
        profile = _require_profile(state, profile_id)
    return _replace_profile(state, profile.model_copy(update={"edit_mode": True}))


def shift_calendar_month(state: AppState, delta: int) -> AppState:
    return state.model_copy(update={
        "calendar_cursor_month": shift_month(state.calendar_cursor_month, delta)
    })


def shift_summary_month(state: AppState, delta: int) -> AppState:
    return state.model_copy(update={
        "summary_cursor_month": shift_month(state.summary_cursor_month, delta)
    })


def update_settings(
    state: AppState,
    name: Optional[str] = None,
    icon: Optional[str] = None,
    password: Optional[str] = None
) -> AppState:
    """
    Change application settings. ``None`` leaves a value untouched, a blank
    name falls back to the default app name.

    Raises:
        InvalidSettingError: If the icon is not one of ``ICONS``
    """
    update = {}
    if name is not None:
        update["name"] = name or DEFAULT_APP_NAME
    if icon is not None:
        if icon not in ICONS:
            raise InvalidSettingError(f"Unsupported icon: {icon}")
        update["icon"] = icon
    if password is not None:
        update["password"] = password
    return state.model_copy(update=update)


class StateRepository:
    """
    Loads and saves the application snapshot through an injected backend.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        clock: Optional[Clock] = None,
        id_factory: IdFactory = new_profile_id,
        storage_key: str = STORAGE_KEY
    ):
        self.storage = storage
        self.clock = clock or SystemClock()
        self.id_factory = id_factory
        self.storage_key = storage_key

    def default_state(self) -> AppState:
        return create_initial_state(self.clock, self.id_factory)

    def load(self) -> AppState:
        """
        Read the stored snapshot.

        Missing, corrupt or empty data yields a fresh default state; this
        method never raises. A dangling active profile id is repointed to the
        first profile.
        """
        try:
            raw = self.storage.get(self.storage_key)
        except Exception as e:
            logger.warning("Failed to read stored state", extra={
                "storage_key": self.storage_key,
                "error": str(e),
                "error_type": e.__class__.__name__
            })
            return self.default_state()

        if not raw:
            logger.info("No stored state, using defaults", extra={"storage_key": self.storage_key})
            return self.default_state()

        try:
            state = decode_state(raw)
        except StateDecodeError as e:
            logger.warning("Stored state is corrupt, using defaults", extra={
                "storage_key": self.storage_key,
                "error": str(e)
            })
            return self.default_state()

        if not state.profiles:
            logger.info("Stored state has no profiles, using defaults")
            return self.default_state()

        if state.find_profile(state.active_profile_id) is None:
            state = state.model_copy(update={"active_profile_id": state.profiles[0].id})

        return state

    def save(self, state: AppState) -> None:
        """
        Persist the full snapshot, replacing any previous one.

        Raises:
            StateStorageError: If the backend fails to write
        """
        try:
            self.storage.set(self.storage_key, encode_state(state))
        except Exception as e:
            logger.error("Error saving state", extra={
                "storage_key": self.storage_key,
                "error": str(e),
                "error_type": e.__class__.__name__
            })
            raise StateStorageError(f"Failed to save state: {str(e)}") from e

    def apply(self, state: AppState, transition: Callable[..., AppState], *args, **kwargs) -> AppState:
        """Run a transition and persist the resulting snapshot."""
        new_state = transition(state, *args, **kwargs)
        self.save(new_state)
        return new_state

    def add_profile(self, state: AppState) -> AppState:
        return self.apply(state, add_profile, id_factory=self.id_factory)

    def delete_profile(self, state: AppState, profile_id: str) -> AppState:
        return self.apply(
            state, delete_profile, profile_id,
            clock=self.clock, id_factory=self.id_factory
        )
