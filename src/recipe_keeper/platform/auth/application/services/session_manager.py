"""Session lifecycle orchestration."""

import asyncio
import functools
import logging
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, TypeVar

from ...core.entities import AuthState, AuthStatus, Principal, Session
from ...core.events import AuthChangeEvent
from ...core.exceptions import LivenessRevoked, SessionError, SessionValidationError
from ...core.protocols import AuthSubscription, Clock, IdentityProvider, LocalCache
from ...core.value_objects import Credentials, SignUpOptions
from ..retry import ErrorClassifier, RetryExecutor, RetryPolicy
from ..scheduling import DEFAULT_REFRESH_INTERVAL, RefreshScheduler
from ..state import AuthStateStore, LivenessToken, StateListener

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _while_alive(method):
    """Turn post-teardown calls and in-flight teardown into a ``None`` return."""

    @functools.wraps(method)
    async def wrapper(self: "SessionManager", *args, **kwargs):
        if not self._liveness.is_alive:
            logger.debug(f"Ignoring {method.__name__}() after teardown")
            return None
        try:
            return await method(self, *args, **kwargs)
        except LivenessRevoked:
            logger.debug(f"{method.__name__}() interrupted by teardown")
            return None

    return wrapper


def _retrieve_exception(task: asyncio.Future) -> None:
    # The failure is already recorded in the store; callers may have gone away
    if not task.cancelled():
        task.exception()


class SessionManager:
    """Owns the authenticated session of one application instance.

    Composes the retry executor, the refresh scheduler and the state store
    around an IdentityProvider, and reconciles the provider's push events
    into the store. Every failure surfaces as a SessionError subclass and is
    also recorded in the store's ``error`` field for display.

    Retries apply to initialize, sign_up, sign_out and refresh_session.
    sign_in, update_password and reset_password fail on their first error.
    """

    def __init__(
        self,
        provider: IdentityProvider,
        clock: Clock,
        retry_policy: Optional[RetryPolicy] = None,
        local_caches: Iterable[LocalCache] = (),
        refresh_interval: float = DEFAULT_REFRESH_INTERVAL,
        app_url: str = "http://localhost:5173",
    ):
        self._provider = provider
        self._clock = clock
        self._liveness = LivenessToken()
        self._store = AuthStateStore(self._liveness)
        self._executor = RetryExecutor(retry_policy or RetryPolicy(), clock, self._liveness)
        self._scheduler = RefreshScheduler(clock, self._liveness)
        self._local_caches: List[LocalCache] = list(local_caches)
        self._refresh_interval = refresh_interval
        self._app_url = app_url.rstrip("/")
        self._refresh_task: Optional[asyncio.Future] = None

        self._subscription: Optional[AuthSubscription] = provider.subscribe_to_auth_state_changes(
            self.on_provider_state_change
        )

    # Exposed state

    @property
    def state(self) -> AuthState:
        return self._store.current()

    @property
    def status(self) -> AuthStatus:
        return self.state.status

    @property
    def session(self) -> Optional[Session]:
        return self.state.session

    @property
    def user(self) -> Optional[Principal]:
        return self.state.user

    @property
    def error(self) -> Optional[str]:
        return self.state.error

    @property
    def is_authenticated(self) -> bool:
        return self.state.is_authenticated

    @property
    def is_loading(self) -> bool:
        return self.state.is_loading

    @property
    def is_alive(self) -> bool:
        return self._liveness.is_alive

    @property
    def retry_policy(self) -> RetryPolicy:
        return self._executor.policy

    @property
    def scheduler(self) -> RefreshScheduler:
        return self._scheduler

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Observe state changes. Returns an unsubscribe callable."""
        return self._store.subscribe(listener)

    def register_local_cache(self, cache: LocalCache) -> None:
        """Add a cache to be cleared on sign-out."""
        self._local_caches.append(cache)

    # Operations

    @_while_alive
    async def initialize(self) -> Optional[AuthState]:
        """
        Establish the initial state from the provider's current session.

        Returns:
            The resulting state, or None if torn down meanwhile

        Raises:
            SessionError: Retries exhausted; the state is FAILED
        """
        self._store.set(AuthState.initializing())
        try:
            session = await self._executor.run(self._provider.get_current_session, name="initialize")
        except SessionError as error:
            logger.error(f"Failed to initialize auth: {error}")
            self._store.set(AuthState.failed(error.message))
            self._scheduler.stop()
            raise

        self._apply_session(session)
        logger.info(f"Auth initialized: {self.status.value}")
        return self.state

    def on_provider_state_change(self, event: AuthChangeEvent, session: Optional[Session]) -> None:
        """Reconcile a provider push event into the store."""
        if not self._liveness.is_alive:
            return

        logger.debug(f"Auth state changed: {getattr(event, 'value', event)}")
        current = self._store.current()
        error = None if current.status is AuthStatus.FAILED else current.error
        self._apply_session(session, error)

    @_while_alive
    async def sign_in(self, email: str, password: str) -> None:
        """Sign in with email and password. Never retried."""
        credentials = self._validated("sign_in", Credentials, email, password)
        await self._call(
            "sign_in",
            lambda: self._provider.sign_in_with_password(credentials),
            retry=False,
        )

    @_while_alive
    async def sign_up(
        self,
        email: str,
        password: str,
        data: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Register a new account.

        The store shows INITIALIZING while the request runs. Afterwards the
        previous state is restored unless a push event replaced it meanwhile.
        """
        credentials = self._validated("sign_up", Credentials, email, password)
        options = SignUpOptions(
            email_redirect_to=self._app_url,
            data={"created_at": datetime.now(timezone.utc).isoformat(), **(data or {})},
        )

        previous = self._store.current()
        if previous.status is not AuthStatus.FAILED:
            previous = AuthState(previous.status, previous.session)
        initializing = AuthState.initializing()
        self._store.set(initializing)

        try:
            await self._executor.run(
                lambda: self._provider.sign_up(credentials, options), name="sign_up"
            )
        except SessionError as error:
            self._restore(initializing, previous)
            self._record_failure("sign_up", error)
            raise

        self._restore(initializing, previous)
        logger.info(f"Sign-up requested for {credentials.email}")

    @_while_alive
    async def sign_out(self) -> None:
        """
        Sign out at the provider.

        Local caches are cleared and the refresh timer stopped whatever the
        outcome, unless the manager was torn down meanwhile. A provider
        failure is raised after that cleanup.
        """
        try:
            await self._call("sign_out", self._provider.sign_out, retry=True)
        finally:
            # Caches are left alone once torn down
            if self._liveness.is_alive:
                self._clear_local_caches()
            self._scheduler.stop()

    @_while_alive
    async def refresh_session(self) -> None:
        """Refresh the session now. Concurrent callers share one refresh."""
        if self._refresh_task is None or self._refresh_task.done():
            self._refresh_task = asyncio.ensure_future(
                self._call("refresh_session", self._provider.refresh_session, retry=True)
            )
            self._refresh_task.add_done_callback(_retrieve_exception)
        await asyncio.shield(self._refresh_task)

    @_while_alive
    async def update_password(self, new_password: str) -> None:
        """Change the signed-in user's password. Never retried."""
        new_password = self._validated(
            "update_password", Credentials.validate_password, new_password
        )
        await self._call(
            "update_password",
            lambda: self._provider.update_password(new_password),
            retry=False,
        )

    @_while_alive
    async def reset_password(self, email: str) -> None:
        """Send a password recovery link. Never retried."""
        email = self._validated("reset_password", Credentials.validate_email, email)
        redirect_to = f"{self._app_url}/reset-password"
        await self._call(
            "reset_password",
            lambda: self._provider.reset_password_for_email(email, redirect_to),
            retry=False,
        )

    def teardown(self) -> None:
        """Stop all work of this manager. Safe to call more than once."""
        if not self._liveness.revoke():
            return

        try:
            if self._subscription is not None:
                self._subscription.unsubscribe()
        finally:
            self._subscription = None
            self._scheduler.stop()
        logger.debug("Session manager torn down")

    async def __aenter__(self) -> "SessionManager":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.teardown()

    # Internals

    async def _call(self, name: str, operation: Callable[[], Awaitable[T]], retry: bool) -> T:
        """Run a provider operation, recording and re-raising its failure."""
        self._store.clear_error()
        try:
            if retry:
                return await self._executor.run(operation, name=name)
            result = await operation()
            self._liveness.ensure_alive()
            return result
        except (LivenessRevoked, asyncio.CancelledError):
            raise
        except Exception as exc:
            self._liveness.ensure_alive()
            error = ErrorClassifier.classify(exc)
            self._record_failure(name, error)
            if error is exc:
                raise
            raise error from exc

    def _validated(self, name: str, validate: Callable[..., T], *args: Any) -> T:
        try:
            return validate(*args)
        except SessionValidationError as error:
            self._record_failure(name, error)
            raise

    def _record_failure(self, name: str, error: SessionError) -> None:
        logger.error(f"{name} failed ({error.kind.value}): {error}")
        self._store.annotate_error(error.message)

    def _restore(self, expected: AuthState, previous: AuthState) -> None:
        if self._store.current() == expected:
            self._store.set(previous)

    def _apply_session(self, session: Optional[Session], error: Optional[str] = None) -> None:
        if session is not None:
            self._store.set(AuthState.authenticated(session, error))
            self._scheduler.start(self._refresh_interval, self._refresh_on_schedule)
        else:
            self._store.set(AuthState.unauthenticated(error))
            self._scheduler.stop()

    async def _refresh_on_schedule(self) -> None:
        await self._provider.refresh_session()

    def _clear_local_caches(self) -> None:
        for cache in self._local_caches:
            try:
                cache.clear()
            except Exception as e:
                logger.warning(f"Failed to clear local cache {cache!r}: {e}")
