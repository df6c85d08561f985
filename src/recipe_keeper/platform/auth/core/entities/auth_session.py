"""Authenticated session and principal entities."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class Principal:
    """The authenticated user a session is bound to."""

    user_id: str
    email: Optional[str] = None
    attributes: Dict[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        if not self.user_id:
            raise ValueError("Principal user_id cannot be empty")


@dataclass(frozen=True)
class Session:
    """Session issued by the identity provider.

    Immutable once issued. A refresh or a provider push event replaces the
    whole session, it is never patched in place.
    """

    access_token: str
    user: Principal
    refresh_token: Optional[str] = None
    expires_at: Optional[datetime] = None
    token_type: str = "bearer"

    def __post_init__(self) -> None:
        if not self.access_token:
            raise ValueError("Session access_token cannot be empty")

        if self.expires_at and self.expires_at.tzinfo is None:
            object.__setattr__(
                self, "expires_at", self.expires_at.replace(tzinfo=timezone.utc)
            )

    @property
    def user_id(self) -> str:
        return self.user.user_id

    def expires_within(self, margin_seconds: float, now: Optional[datetime] = None) -> bool:
        """Check if the session is expired or expires within the margin.

        A session without an expiry is treated as expired so callers refresh it.
        """
        if not self.expires_at:
            return True
        now = now or datetime.now(timezone.utc)
        return now + timedelta(seconds=margin_seconds) >= self.expires_at

    @property
    def is_expired(self) -> bool:
        return self.expires_within(0)

    @staticmethod
    def _mask(token: Optional[str]) -> str:
        if not token:
            return "None"
        if len(token) <= 12:
            return "***"
        return f"{token[:6]}...{token[-4:]}"

    def __repr__(self) -> str:
        """Debug representation (tokens masked)."""
        return (
            f"Session(user_id={self.user.user_id!r}, "
            f"access_token={self._mask(self.access_token)!r}, "
            f"refresh_token={self._mask(self.refresh_token)!r}, "
            f"expires_at={self.expires_at})"
        )
