"""Authentication domain entities."""

from .auth_session import Principal, Session
from .auth_state import AuthState, AuthStatus

__all__ = [
    "Principal",
    "Session",
    "AuthState",
    "AuthStatus",
]
