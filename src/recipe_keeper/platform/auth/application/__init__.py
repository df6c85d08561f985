"""Authentication application layer.

Retry, state, scheduling and the SessionManager service that composes them.
"""

from .retry import ErrorClassifier, RetryExecutor, RetryPolicy
from .state import AuthStateStore, LivenessToken, StateListener
from .scheduling import DEFAULT_REFRESH_INTERVAL, RefreshScheduler, ScheduleHandle
from .services import SessionManager

__all__ = [
    "ErrorClassifier",
    "RetryExecutor",
    "RetryPolicy",
    "AuthStateStore",
    "LivenessToken",
    "StateListener",
    "DEFAULT_REFRESH_INTERVAL",
    "RefreshScheduler",
    "ScheduleHandle",
    "SessionManager",
]
