"""Tests for the auth state store and session entities."""

import pytest
from unittest.mock import MagicMock

from conftest import make_session
from recipe_keeper.platform.auth import (
    AuthState,
    AuthStateStore,
    AuthStatus,
    LivenessToken,
    Principal,
    Session,
)


class TestAuthState:
    """Test state invariants."""

    def test_default_is_uninitialized_and_loading(self):
        state = AuthState()
        assert state.status is AuthStatus.UNINITIALIZED
        assert state.is_loading
        assert not state.is_authenticated
        assert state.user is None

    def test_authenticated_requires_session(self):
        with pytest.raises(ValueError):
            AuthState(status=AuthStatus.AUTHENTICATED)

    def test_session_only_when_authenticated(self):
        with pytest.raises(ValueError):
            AuthState(status=AuthStatus.UNAUTHENTICATED, session=make_session())

    def test_failed_requires_error(self):
        with pytest.raises(ValueError):
            AuthState(status=AuthStatus.FAILED)

    def test_authenticated_exposes_user(self):
        session = make_session(user_id="chef")
        state = AuthState.authenticated(session)
        assert state.is_authenticated
        assert state.user.user_id == "chef"


class TestSession:
    """Test session expiry helpers."""

    def test_expires_within_margin(self):
        assert make_session(expires_in=30).expires_within(60)
        assert not make_session(expires_in=3600).expires_within(60)

    def test_without_expiry_counts_as_expired(self):
        assert make_session(expires_in=None).is_expired

    def test_repr_masks_tokens(self):
        session = make_session(access_token="eyJhbGciOiJIUzI1NiJ9.payload.signature")
        assert "payload" not in repr(session)

    def test_empty_access_token_rejected(self):
        with pytest.raises(ValueError):
            Session(access_token="", user=Principal(user_id="chef"))


class TestAuthStateStore:
    """Test single-writer store semantics."""

    @pytest.fixture
    def liveness(self):
        return LivenessToken()

    @pytest.fixture
    def store(self, liveness):
        return AuthStateStore(liveness)

    def test_set_notifies_in_subscription_order(self, store):
        calls = []
        store.subscribe(lambda state: calls.append(("first", state.status)))
        store.subscribe(lambda state: calls.append(("second", state.status)))

        assert store.set(AuthState.initializing()) is True

        assert calls == [
            ("first", AuthStatus.INITIALIZING),
            ("second", AuthStatus.INITIALIZING),
        ]
        assert store.current().status is AuthStatus.INITIALIZING

    def test_identical_state_not_renotified(self, store):
        listener = MagicMock()
        store.subscribe(listener)

        store.set(AuthState.unauthenticated())
        assert store.set(AuthState.unauthenticated()) is False

        listener.assert_called_once()

    def test_set_after_revoke_is_noop(self, store, liveness):
        listener = MagicMock()
        store.subscribe(listener)
        liveness.revoke()

        assert store.set(AuthState.unauthenticated()) is False

        listener.assert_not_called()
        assert store.current().status is AuthStatus.UNINITIALIZED

    def test_failing_listener_does_not_stop_others(self, store):
        later = MagicMock()
        store.subscribe(MagicMock(side_effect=RuntimeError("render failed")))
        store.subscribe(later)

        store.set(AuthState.initializing())

        later.assert_called_once()

    def test_unsubscribe(self, store):
        listener = MagicMock()
        unsubscribe = store.subscribe(listener)
        unsubscribe()
        unsubscribe()

        store.set(AuthState.initializing())

        listener.assert_not_called()

    def test_annotate_error_keeps_status_and_session(self, store):
        session = make_session()
        store.set(AuthState.authenticated(session))

        store.annotate_error("Invalid login credentials")

        state = store.current()
        assert state.status is AuthStatus.AUTHENTICATED
        assert state.session is session
        assert state.error == "Invalid login credentials"

    def test_clear_error(self, store):
        store.set(AuthState.unauthenticated(error="offline"))
        assert store.clear_error() is True
        assert store.current().error is None
        assert store.clear_error() is False

    def test_failed_state_keeps_its_error(self, store):
        store.set(AuthState.failed("Failed to fetch"))
        assert store.clear_error() is False

        store.annotate_error("Invalid login credentials")

        assert store.current() == AuthState.failed("Invalid login credentials")
