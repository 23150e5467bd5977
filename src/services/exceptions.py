"""
Service-level exceptions.

The cycle and phase services never raise; these cover the state
repository and its transitions.
"""


class StateError(Exception):
    """Base exception for application state errors."""
    pass


class StateDecodeError(StateError):
    """Raised when a stored snapshot cannot be decoded."""
    pass


class StateStorageError(StateError):
    """Raised when the storage backend fails to persist a snapshot."""
    pass


class ProfileNotFoundError(StateError):
    """Raised when a transition references an unknown profile id."""

    def __init__(self, profile_id: str):
        super().__init__(f"Profile not found: {profile_id}")
        self.profile_id = profile_id


class InvalidSettingError(StateError):
    """Raised when a settings value is outside its allowed set."""
    pass
