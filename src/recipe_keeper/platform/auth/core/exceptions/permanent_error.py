"""Permanent (non-retryable) session failure."""

from typing import Optional

from .session_error import ErrorKind, SessionError


class PermanentSessionError(SessionError):
    """Raised when the identity provider rejected the request.

    Retrying will not help: bad credentials, expired refresh tokens,
    duplicate accounts and unknown failures.
    """

    kind = ErrorKind.PERMANENT

    @classmethod
    def invalid_credentials(cls, message: str = "Invalid login credentials") -> "PermanentSessionError":
        return cls(message, reason="invalid_credentials")

    @classmethod
    def session_missing(cls) -> "PermanentSessionError":
        return cls("Auth session missing!", reason="session_missing")

    @classmethod
    def session_expired(cls, message: Optional[str] = None) -> "PermanentSessionError":
        return cls(message or "Your session has expired. Please sign in again.", reason="session_expired")
