"""Authentication state and teardown tracking."""

from .liveness_token import LivenessToken
from .auth_state_store import AuthStateStore, StateListener

__all__ = [
    "LivenessToken",
    "AuthStateStore",
    "StateListener",
]
