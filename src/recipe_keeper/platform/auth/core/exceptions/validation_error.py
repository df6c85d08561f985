"""Validation failure for caller-supplied input."""

from typing import Optional

from .session_error import ErrorKind, SessionError


class SessionValidationError(SessionError):
    """Raised when the caller passes malformed input (email, password)."""

    kind = ErrorKind.VALIDATION

    def __init__(self, message: str, *, field: Optional[str] = None) -> None:
        super().__init__(
            message,
            reason="invalid_input",
            details={"field": field} if field else None,
        )
        self.field = field
