"""Authentication status and state snapshot."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .auth_session import Principal, Session


class AuthStatus(str, Enum):
    """Lifecycle status of a session manager."""

    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    AUTHENTICATED = "authenticated"
    UNAUTHENTICATED = "unauthenticated"
    FAILED = "failed"


@dataclass(frozen=True)
class AuthState:
    """Snapshot held by the AuthStateStore.

    Exactly one status holds at a time. ``session`` is present only when
    AUTHENTICATED. ``error`` is required for FAILED; for every other status
    it is an annotation left by the last failed operation.
    """

    status: AuthStatus = AuthStatus.UNINITIALIZED
    session: Optional[Session] = None
    error: Optional[str] = None

    def __post_init__(self) -> None:
        if self.status is AuthStatus.AUTHENTICATED and self.session is None:
            raise ValueError("AUTHENTICATED state requires a session")
        if self.status is not AuthStatus.AUTHENTICATED and self.session is not None:
            raise ValueError(f"{self.status.value} state cannot carry a session")
        if self.status is AuthStatus.FAILED and not self.error:
            raise ValueError("FAILED state requires an error message")

    @classmethod
    def initializing(cls) -> "AuthState":
        return cls(status=AuthStatus.INITIALIZING)

    @classmethod
    def authenticated(cls, session: Session, error: Optional[str] = None) -> "AuthState":
        return cls(status=AuthStatus.AUTHENTICATED, session=session, error=error)

    @classmethod
    def unauthenticated(cls, error: Optional[str] = None) -> "AuthState":
        return cls(status=AuthStatus.UNAUTHENTICATED, error=error)

    @classmethod
    def failed(cls, error: str) -> "AuthState":
        return cls(status=AuthStatus.FAILED, error=error)

    @property
    def is_authenticated(self) -> bool:
        return self.status is AuthStatus.AUTHENTICATED

    @property
    def is_loading(self) -> bool:
        return self.status in (AuthStatus.UNINITIALIZED, AuthStatus.INITIALIZING)

    @property
    def user(self) -> Optional[Principal]:
        return self.session.user if self.session else None
