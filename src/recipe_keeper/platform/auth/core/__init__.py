"""Authentication core: domain objects and contracts only."""

from .entities import AuthState, AuthStatus, Principal, Session
from .events import AuthChangeEvent, AuthStateListener
from .exceptions import (
    ErrorKind,
    LivenessRevoked,
    PermanentSessionError,
    SessionError,
    SessionValidationError,
    TransientSessionError,
)
from .protocols import AuthSubscription, Clock, IdentityProvider, LocalCache
from .value_objects import Credentials, SignUpOptions

__all__ = [
    "AuthState",
    "AuthStatus",
    "Principal",
    "Session",
    "AuthChangeEvent",
    "AuthStateListener",
    "ErrorKind",
    "LivenessRevoked",
    "PermanentSessionError",
    "SessionError",
    "SessionValidationError",
    "TransientSessionError",
    "AuthSubscription",
    "Clock",
    "IdentityProvider",
    "LocalCache",
    "Credentials",
    "SignUpOptions",
]
