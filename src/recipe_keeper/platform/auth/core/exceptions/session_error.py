"""Base session error with failure classification."""

from enum import Enum
from typing import Any, Dict, Optional

from .....core.exceptions import RecipeKeeperError


class ErrorKind(str, Enum):
    """How a failure should be treated by retry logic and callers."""

    TRANSIENT = "transient"    # network/connectivity, retryable
    PERMANENT = "permanent"    # credential or provider-side rejection
    VALIDATION = "validation"  # malformed caller input


class SessionError(RecipeKeeperError):
    """Base class for every failure surfaced by the session manager.

    The message is kept exactly as the underlying failure reported it so
    the UI can show it as-is.
    """

    kind: ErrorKind = ErrorKind.PERMANENT

    def __init__(
        self,
        message: str,
        *,
        reason: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, error_code=reason, details=details)
        self.reason = reason

    @property
    def is_retryable(self) -> bool:
        return self.kind is ErrorKind.TRANSIENT

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, reason={self.reason!r})"
