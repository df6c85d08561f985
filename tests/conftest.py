"""Pytest configuration and fixtures for recipe-keeper tests."""

import asyncio
import heapq
import itertools
from collections import Counter, defaultdict, deque
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from typing import Any, Deque, Dict, List, Optional, Tuple

import pytest
import pytest_asyncio

from recipe_keeper.platform.auth import (
    AuthChangeEvent,
    Credentials,
    PermanentSessionError,
    Principal,
    RetryPolicy,
    Session,
    SessionManager,
    SignUpOptions,
)


async def settle(rounds: int = 50) -> None:
    """Let every ready task run until the loop goes quiet."""
    for _ in range(rounds):
        await asyncio.sleep(0)


class FakeClock:
    """Deterministic Clock: sleeps resolve only when time is advanced."""

    def __init__(self, start: float = 0.0):
        self._now = start
        self._sleepers: List[Tuple[float, int, asyncio.Future]] = []
        self._seq = itertools.count()

    def monotonic(self) -> float:
        return self._now

    async def sleep(self, seconds: float) -> None:
        future = asyncio.get_running_loop().create_future()
        heapq.heappush(self._sleepers, (self._now + max(0.0, seconds), next(self._seq), future))
        await future

    @property
    def pending(self) -> int:
        return sum(1 for _, _, future in self._sleepers if not future.done())

    def _pop_next(self) -> Optional[Tuple[float, asyncio.Future]]:
        while self._sleepers:
            wake_at, _, future = heapq.heappop(self._sleepers)
            if not future.done():
                return wake_at, future
        return None

    async def advance(self, seconds: float) -> None:
        """Move time forward, waking sleepers in deadline order."""
        target = self._now + seconds
        await settle()
        while self._sleepers and self._sleepers[0][0] <= target:
            wake_at, _, future = heapq.heappop(self._sleepers)
            if future.done():
                continue
            self._now = max(self._now, wake_at)
            future.set_result(None)
            await settle()
        self._now = target
        await settle()

    async def run(self, awaitable) -> Any:
        """Drive ``awaitable`` to completion, jumping to each next deadline."""
        task = asyncio.ensure_future(awaitable)
        await settle()
        while not task.done():
            sleeper = self._pop_next()
            if sleeper is None:
                break
            wake_at, future = sleeper
            self._now = max(self._now, wake_at)
            future.set_result(None)
            await settle()
        return await task


class FakeSubscription:
    def __init__(self, provider: "FakeIdentityProvider", listener):
        self._provider = provider
        self._listener = listener
        self.unsubscribed = False

    def unsubscribe(self) -> None:
        self.unsubscribed = True
        if self._listener in self._provider.listeners:
            self._provider.listeners.remove(self._listener)


class FakeIdentityProvider:
    """Scriptable IdentityProvider.

    ``fail(operation, *errors)`` queues errors raised by the next calls of
    ``operation``; ``block(operation)`` returns an event the call waits on.
    """

    def __init__(self, session: Optional[Session] = None, sign_in_session: Optional[Session] = None):
        self.session = session
        self.sign_in_session = sign_in_session or make_session(user_id="signed-in-user")
        self.calls: Counter = Counter()
        self.listeners: List = []
        self.subscriptions: List[FakeSubscription] = []
        self.sign_ups: List[Tuple[Credentials, SignUpOptions]] = []
        self.password_updates: List[str] = []
        self.password_resets: List[Tuple[str, Optional[str]]] = []
        self._failures: Dict[str, Deque[BaseException]] = defaultdict(deque)
        self._gates: Dict[str, asyncio.Event] = {}

    def fail(self, operation: str, *errors: BaseException) -> None:
        self._failures[operation].extend(errors)

    def block(self, operation: str) -> asyncio.Event:
        gate = asyncio.Event()
        self._gates[operation] = gate
        return gate

    def emit(self, event: AuthChangeEvent, session: Optional[Session]) -> None:
        for listener in list(self.listeners):
            listener(event, session)

    async def _attempt(self, operation: str) -> None:
        self.calls[operation] += 1
        gate = self._gates.get(operation)
        if gate is not None:
            await gate.wait()
        if self._failures[operation]:
            raise self._failures[operation].popleft()

    async def get_current_session(self) -> Optional[Session]:
        await self._attempt("get_current_session")
        return self.session

    async def sign_in_with_password(self, credentials: Credentials) -> None:
        await self._attempt("sign_in_with_password")
        self.session = self.sign_in_session
        self.emit(AuthChangeEvent.SIGNED_IN, self.session)

    async def sign_up(self, credentials: Credentials, options: SignUpOptions) -> None:
        await self._attempt("sign_up")
        self.sign_ups.append((credentials, options))

    async def sign_out(self) -> None:
        await self._attempt("sign_out")
        self.session = None
        self.emit(AuthChangeEvent.SIGNED_OUT, None)

    async def refresh_session(self) -> None:
        await self._attempt("refresh_session")
        if self.session is None:
            raise PermanentSessionError.session_missing()
        self.session = replace(self.session, access_token=f"{self.session.access_token}.refreshed")
        self.emit(AuthChangeEvent.TOKEN_REFRESHED, self.session)

    async def update_password(self, new_password: str) -> None:
        await self._attempt("update_password")
        self.password_updates.append(new_password)

    async def reset_password_for_email(self, email: str, redirect_to: Optional[str] = None) -> None:
        await self._attempt("reset_password_for_email")
        self.password_resets.append((email, redirect_to))

    def subscribe_to_auth_state_changes(self, listener) -> FakeSubscription:
        self.listeners.append(listener)
        subscription = FakeSubscription(self, listener)
        self.subscriptions.append(subscription)
        return subscription


def make_session(
    user_id: str = "user-1",
    email: str = "cook@example.com",
    expires_in: Optional[float] = 3600,
    access_token: Optional[str] = None,
) -> Session:
    """Build a Session for tests."""
    expires_at = (
        datetime.now(timezone.utc) + timedelta(seconds=expires_in)
        if expires_in is not None
        else None
    )
    return Session(
        access_token=access_token or f"access-token-for-{user_id}",
        refresh_token=f"refresh-token-for-{user_id}",
        expires_at=expires_at,
        user=Principal(user_id=user_id, email=email),
    )


@pytest.fixture
def clock():
    """Deterministic fake clock."""
    return FakeClock()


@pytest.fixture
def session():
    """Sample active session."""
    return make_session()


@pytest.fixture
def provider():
    """Fake identity provider with no active session."""
    return FakeIdentityProvider()


@pytest_asyncio.fixture
async def manager(provider, clock):
    """SessionManager on the fake provider and clock."""
    manager = SessionManager(
        provider=provider,
        clock=clock,
        retry_policy=RetryPolicy(max_attempts=5, base_delay=1.0),
        refresh_interval=600.0,
        app_url="https://recipes.example.com",
    )
    yield manager
    manager.teardown()
    await settle()


@pytest.fixture
def recorded_states(manager):
    """States the manager publishes, in order."""
    states = []
    manager.subscribe(states.append)
    return states
