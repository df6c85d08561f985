"""Session error taxonomy.

Every failure the session manager surfaces is a SessionError carrying one
ErrorKind: transient (retryable), permanent, or validation.
"""

from .session_error import ErrorKind, SessionError
from .transient_error import TransientSessionError
from .permanent_error import PermanentSessionError
from .validation_error import SessionValidationError
from .liveness_revoked import LivenessRevoked

__all__ = [
    "ErrorKind",
    "SessionError",
    "TransientSessionError",
    "PermanentSessionError",
    "SessionValidationError",
    "LivenessRevoked",
]
