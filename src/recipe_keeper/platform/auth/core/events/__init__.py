"""Authentication events."""

from .auth_state_changed import AuthChangeEvent, AuthStateListener

__all__ = [
    "AuthChangeEvent",
    "AuthStateListener",
]
