"""Single mutation point for authentication state."""

import dataclasses
import logging
from typing import Callable, List, Optional

from ...core.entities import AuthState, AuthStatus
from .liveness_token import LivenessToken

logger = logging.getLogger(__name__)

StateListener = Callable[[AuthState], None]


class AuthStateStore:
    """Holds the current AuthState and notifies listeners of changes.

    Single writer: every mutation runs on the event loop thread and writes
    after the owning liveness token is revoked are dropped.
    """

    def __init__(self, liveness: LivenessToken, initial: Optional[AuthState] = None):
        self._liveness = liveness
        self._state = initial or AuthState()
        self._listeners: List[StateListener] = []

    def current(self) -> AuthState:
        return self._state

    def set(self, state: AuthState) -> bool:
        """
        Replace the current state.

        Returns:
            True if the state changed and listeners were notified
        """
        if not self._liveness.is_alive:
            logger.debug(f"Dropped post-teardown write of {state.status.value}")
            return False
        if state == self._state:
            return False

        previous = self._state
        self._state = state
        if previous.status is not state.status:
            logger.debug(f"Auth status {previous.status.value} -> {state.status.value}")
        self._notify(state)
        return True

    def annotate_error(self, message: str) -> bool:
        """Record an error message without changing status or session."""
        if self._state.status is AuthStatus.FAILED:
            return self.set(AuthState.failed(message))
        return self.set(dataclasses.replace(self._state, error=message))

    def clear_error(self) -> bool:
        """Drop the error annotation. A FAILED state keeps its error."""
        if self._state.error is None or self._state.status is AuthStatus.FAILED:
            return False
        return self.set(dataclasses.replace(self._state, error=None))

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """
        Register a listener called synchronously on every change.

        Returns:
            Callable that removes the listener; safe to call more than once
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, state: AuthState) -> None:
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception as e:
                logger.error(f"Auth state listener {listener!r} failed: {e}", exc_info=True)
