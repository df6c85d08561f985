"""Identity provider protocol contract."""

from typing import Optional, Protocol, runtime_checkable

from ..entities import Session
from ..events import AuthStateListener
from ..value_objects import Credentials, SignUpOptions


@runtime_checkable
class AuthSubscription(Protocol):
    """Handle returned by a push-event subscription."""

    def unsubscribe(self) -> None:
        """Stop delivering events to the listener. Safe to call twice."""
        ...


@runtime_checkable
class IdentityProvider(Protocol):
    """Protocol for the remote identity provider.

    Defines ONLY the capability surface the session manager consumes.
    Failures may be raised as any exception; the session manager classifies
    them. Implementations that know better should raise SessionError
    subclasses directly.
    """

    async def get_current_session(self) -> Optional[Session]:
        """Return the active session, or None when signed out."""
        ...

    async def sign_in_with_password(self, credentials: Credentials) -> None:
        """Sign in; success is announced through a SIGNED_IN push event."""
        ...

    async def sign_up(self, credentials: Credentials, options: SignUpOptions) -> None:
        """Register a new account."""
        ...

    async def sign_out(self) -> None:
        """End the session; success is announced through SIGNED_OUT."""
        ...

    async def refresh_session(self) -> None:
        """Refresh the session; success is announced through TOKEN_REFRESHED."""
        ...

    async def update_password(self, new_password: str) -> None:
        """Change the signed-in user's password."""
        ...

    async def reset_password_for_email(self, email: str, redirect_to: Optional[str] = None) -> None:
        """Send a password recovery link."""
        ...

    def subscribe_to_auth_state_changes(self, listener: AuthStateListener) -> AuthSubscription:
        """Register a listener for push events."""
        ...
