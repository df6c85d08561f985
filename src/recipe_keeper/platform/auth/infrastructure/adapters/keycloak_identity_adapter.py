"""Keycloak identity provider adapter for the session manager."""

import json
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple

from jose import jwt
from jose.exceptions import JWTError
from keycloak.exceptions import (
    KeycloakAuthenticationError,
    KeycloakConnectionError,
    KeycloakError,
)

from ...core.entities import Principal, Session
from ...core.events import AuthChangeEvent, AuthStateListener
from ...core.exceptions import PermanentSessionError, SessionError, TransientSessionError
from ...core.value_objects import Credentials, SignUpOptions

logger = logging.getLogger(__name__)


class _ListenerSubscription:
    """Subscription handle returned to push-event listeners."""

    def __init__(self, adapter: "KeycloakIdentityAdapter", listener: AuthStateListener):
        self._adapter = adapter
        self._listener = listener

    def unsubscribe(self) -> None:
        if self._listener in self._adapter._listeners:
            self._adapter._listeners.remove(self._listener)


class KeycloakIdentityAdapter:
    """IdentityProvider implementation backed by python-keycloak.

    Handles ONLY the translation between Keycloak's OpenID/Admin APIs and the
    session manager's provider contract. The session lives in memory; state
    changes are announced to subscribers as AuthChangeEvents.

    Sign-up and password management need an admin client; without one they
    fail with a permanent ``signup_disabled`` error.
    """

    def __init__(
        self,
        openid_client,
        admin_client=None,
        expiry_margin_seconds: float = 60.0,
    ):
        """Initialize Keycloak identity adapter.

        Args:
            openid_client: KeycloakOpenID client for the application realm
            admin_client: Optional KeycloakAdmin client for account management
            expiry_margin_seconds: Refresh sessions expiring within this margin
        """
        if not openid_client:
            raise ValueError("Keycloak OpenID client is required")

        self.openid_client = openid_client
        self.admin_client = admin_client
        self.expiry_margin_seconds = expiry_margin_seconds
        self._session: Optional[Session] = None
        self._listeners: List[AuthStateListener] = []

    @property
    def session(self) -> Optional[Session]:
        return self._session

    async def get_current_session(self) -> Optional[Session]:
        """Return the in-memory session, refreshing it if close to expiry."""
        session = self._session
        if session is None:
            return None

        if session.refresh_token and session.expires_within(self.expiry_margin_seconds):
            logger.debug(f"Session for user {session.user_id} near expiry, refreshing")
            try:
                await self.refresh_session()
            except PermanentSessionError as e:
                if e.reason != "session_expired":
                    raise
                return None

        return self._session

    async def sign_in_with_password(self, credentials: Credentials) -> None:
        """Authenticate with Keycloak and emit SIGNED_IN.

        Raises:
            PermanentSessionError: Invalid credentials or token response
            TransientSessionError: Keycloak unreachable
        """
        try:
            logger.info(f"Authenticating user {credentials.email} via Keycloak")
            token_data = await self.openid_client.a_token(credentials.email, credentials.password)
        except KeycloakError as e:
            raise self._translate(e) from e

        self._set_session(self._session_from_tokens(token_data), AuthChangeEvent.SIGNED_IN)
        logger.info(f"Successfully authenticated user {credentials.email}")

    async def sign_up(self, credentials: Credentials, options: SignUpOptions) -> None:
        """Create a Keycloak user and send the verification email."""
        admin = self._require_admin()
        payload = {
            "username": credentials.email,
            "email": credentials.email,
            "enabled": True,
            "emailVerified": False,
            "attributes": {key: [str(value)] for key, value in options.data.items()},
            "credentials": [
                {"type": "password", "value": credentials.password, "temporary": False}
            ],
        }

        try:
            user_id = await admin.a_create_user(payload, exist_ok=False)
            if options.email_redirect_to:
                await admin.a_send_verify_email(
                    user_id=user_id,
                    client_id=self.openid_client.client_id,
                    redirect_uri=options.email_redirect_to,
                )
        except KeycloakError as e:
            if getattr(e, "response_code", None) == 409:
                raise PermanentSessionError(
                    "User already registered", reason="user_already_exists"
                ) from e
            raise self._translate(e) from e

        logger.info(f"Created Keycloak user {user_id} for {credentials.email}")

    async def sign_out(self) -> None:
        """End the Keycloak session and emit SIGNED_OUT.

        Token errors are ignored since the session is already invalid at
        Keycloak; only connectivity failures are raised.
        """
        session = self._session
        if session is not None and session.refresh_token:
            try:
                await self.openid_client.a_logout(session.refresh_token)
            except KeycloakError as e:
                error = self._translate(e)
                if error.is_retryable:
                    raise error from e
                logger.warning(f"Keycloak logout rejected, clearing session anyway: {error}")

        self._set_session(None, AuthChangeEvent.SIGNED_OUT)

    async def refresh_session(self) -> None:
        """Exchange the refresh token and emit TOKEN_REFRESHED.

        Raises:
            PermanentSessionError: No session, or refresh token rejected
                (the session is cleared and SIGNED_OUT emitted)
            TransientSessionError: Keycloak unreachable
        """
        session = self._session
        if session is None or not session.refresh_token:
            raise PermanentSessionError.session_missing()

        try:
            token_data = await self.openid_client.a_refresh_token(session.refresh_token)
        except KeycloakError as e:
            error = self._translate(e)
            if error.is_retryable:
                raise error from e

            code, _ = self._error_details(e)
            if code == "invalid_grant" or isinstance(e, KeycloakAuthenticationError):
                logger.info(f"Refresh token rejected for user {session.user_id}: {error}")
                self._set_session(None, AuthChangeEvent.SIGNED_OUT)
                raise PermanentSessionError.session_expired() from e
            raise error from e

        self._set_session(self._session_from_tokens(token_data), AuthChangeEvent.TOKEN_REFRESHED)
        logger.debug(f"Refreshed session for user {self._session.user_id}")

    async def update_password(self, new_password: str) -> None:
        """Set a new permanent password for the signed-in user."""
        session = self._session
        if session is None:
            raise PermanentSessionError.session_missing()

        admin = self._require_admin()
        try:
            await admin.a_set_user_password(session.user_id, new_password, temporary=False)
        except KeycloakError as e:
            raise self._translate(e) from e

        logger.info(f"Password updated for user {session.user_id}")
        self._emit(AuthChangeEvent.USER_UPDATED, session)

    async def reset_password_for_email(self, email: str, redirect_to: Optional[str] = None) -> None:
        """Send an UPDATE_PASSWORD action email.

        Unknown addresses succeed silently so account existence is not leaked.
        """
        admin = self._require_admin()
        try:
            user_id = await admin.a_get_user_id(email)
            if not user_id:
                logger.debug("Password reset requested for unknown email")
                return
            await admin.a_send_update_account(
                user_id=user_id,
                payload=["UPDATE_PASSWORD"],
                client_id=self.openid_client.client_id,
                redirect_uri=redirect_to,
            )
        except KeycloakError as e:
            raise self._translate(e) from e

        logger.info(f"Password reset email sent to user {user_id}")

    def subscribe_to_auth_state_changes(self, listener: AuthStateListener) -> _ListenerSubscription:
        self._listeners.append(listener)
        return _ListenerSubscription(self, listener)

    def _set_session(self, session: Optional[Session], event: AuthChangeEvent) -> None:
        self._session = session
        self._emit(event, session)

    def _emit(self, event: AuthChangeEvent, session: Optional[Session]) -> None:
        for listener in list(self._listeners):
            try:
                listener(event, session)
            except Exception as e:
                logger.error(f"Auth listener failed on {event.value}: {e}", exc_info=True)

    def _require_admin(self):
        if self.admin_client is None:
            raise PermanentSessionError(
                "Account management is not configured", reason="signup_disabled"
            )
        return self.admin_client

    def _session_from_tokens(self, token_data: Dict[str, Any]) -> Session:
        """Build a Session from a Keycloak token response."""
        if not isinstance(token_data, dict) or not token_data.get("access_token"):
            raise PermanentSessionError(
                "Invalid token response from Keycloak", reason="invalid_token_response"
            )

        access_token = token_data["access_token"]
        try:
            # Keycloak already validated the token it just issued
            claims = jwt.get_unverified_claims(access_token)
        except JWTError as e:
            raise PermanentSessionError(
                f"Unreadable access token: {e}", reason="invalid_token_response"
            ) from e

        user_id = claims.get("sub") or claims.get("preferred_username")
        if not user_id:
            raise PermanentSessionError(
                "No user identifier in access token", reason="missing_subject"
            )

        if claims.get("exp"):
            expires_at = datetime.fromtimestamp(claims["exp"], tz=timezone.utc)
        elif token_data.get("expires_in"):
            expires_at = datetime.now(timezone.utc) + timedelta(seconds=token_data["expires_in"])
        else:
            expires_at = None

        attributes = {
            "username": claims.get("preferred_username"),
            "first_name": claims.get("given_name"),
            "last_name": claims.get("family_name"),
            "roles": claims.get("realm_access", {}).get("roles", []),
        }
        principal = Principal(
            user_id=user_id,
            email=claims.get("email"),
            attributes={k: v for k, v in attributes.items() if v},
        )

        return Session(
            access_token=access_token,
            user=principal,
            refresh_token=token_data.get("refresh_token"),
            expires_at=expires_at,
            token_type=token_data.get("token_type", "bearer").lower(),
        )

    @staticmethod
    def _error_details(error: KeycloakError) -> Tuple[Optional[str], Optional[str]]:
        """Extract ``error`` and ``error_description`` from a Keycloak response."""
        body = getattr(error, "response_body", None)
        if isinstance(body, bytes):
            body = body.decode("utf-8", errors="replace")
        if isinstance(body, str) and body:
            try:
                body = json.loads(body)
            except ValueError:
                body = None
        if isinstance(body, dict):
            return body.get("error"), body.get("error_description") or body.get("errorMessage")
        return None, None

    def _translate(self, error: KeycloakError) -> SessionError:
        """Map a python-keycloak error onto the session error taxonomy."""
        code, description = self._error_details(error)
        raw = getattr(error, "error_message", None) or ""
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8", errors="replace")
        message = description or str(raw)
        status = getattr(error, "response_code", None)

        if isinstance(error, KeycloakConnectionError):
            return TransientSessionError(message or "Network error", reason="network")
        if status is not None and status >= 500:
            return TransientSessionError(
                message or "Identity provider unavailable", reason="service_unavailable"
            )
        if isinstance(error, KeycloakAuthenticationError):
            return PermanentSessionError.invalid_credentials(message or "Invalid login credentials")
        return PermanentSessionError(
            message or "Identity provider error", reason=code or "provider_error"
        )
