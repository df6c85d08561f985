"""Retry policy and executor for identity provider calls."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, TypeVar

import httpx

from ...core.exceptions import (
    PermanentSessionError,
    SessionError,
    SessionValidationError,
    TransientSessionError,
)
from ...core.protocols import Clock
from ..state.liveness_token import LivenessToken

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """Configuration for identity provider retry behavior.

    Attempts are counted from 1. The delay before the next attempt grows
    linearly: ``base_delay * attempt``.
    """

    max_attempts: int = 5
    base_delay: float = 1.0

    def __post_init__(self):
        """Validate retry policy parameters."""
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.base_delay < 0:
            raise ValueError("base_delay must be non-negative")

    def delay_for(self, attempt: int) -> float:
        """
        Calculate delay after a failed attempt.

        Args:
            attempt: Attempt number that just failed (1-based)

        Returns:
            Delay in seconds
        """
        if attempt <= 0:
            return 0.0
        return self.base_delay * attempt

    def should_retry(self, error: BaseException, attempt: int) -> bool:
        """
        Determine if a failed attempt should be retried.

        Args:
            error: Failure raised by the attempt
            attempt: Attempt number that just failed (1-based)

        Returns:
            True if another attempt is allowed, False otherwise
        """
        if attempt >= self.max_attempts:
            return False
        return ErrorClassifier.classify(error).is_retryable


class ErrorClassifier:
    """Maps arbitrary exceptions onto the session error taxonomy."""

    TRANSIENT_TYPES = (
        ConnectionError,
        TimeoutError,
        asyncio.TimeoutError,
        httpx.TransportError,
    )

    # Matched by name so optional provider SDKs need not be importable here
    TRANSIENT_ERROR_NAMES = {
        "AuthRetryableFetchError",
        "AuthRetryableError",
        "KeycloakConnectionError",
        "NetworkError",
    }

    @classmethod
    def classify(cls, exception: BaseException) -> SessionError:
        """
        Classify an exception into a SessionError.

        The original message is preserved unchanged. SessionErrors are
        returned as-is.
        """
        if isinstance(exception, SessionError):
            return exception

        message = str(exception) or type(exception).__name__

        if (
            isinstance(exception, cls.TRANSIENT_TYPES)
            or type(exception).__name__ in cls.TRANSIENT_ERROR_NAMES
        ):
            return TransientSessionError(message, reason="network")

        # pydantic.ValidationError is a ValueError subclass
        if isinstance(exception, ValueError):
            return SessionValidationError(message)

        return PermanentSessionError(message)


class RetryExecutor:
    """Runs one provider operation under a RetryPolicy.

    The liveness token is checked before every attempt, after every provider
    response and around every delay. A revoked token raises LivenessRevoked
    out of ``run``.
    """

    def __init__(self, policy: RetryPolicy, clock: Clock, liveness: LivenessToken):
        self.policy = policy
        self._clock = clock
        self._liveness = liveness

    async def run(self, operation: Callable[[], Awaitable[T]], name: Optional[str] = None) -> T:
        """
        Execute ``operation`` until it succeeds or retries are exhausted.

        Args:
            operation: Zero-argument coroutine function, called once per attempt
            name: Operation name used in log messages

        Returns:
            The result of the first successful attempt

        Raises:
            SessionError: Classified failure of the final attempt
            LivenessRevoked: The owning manager was torn down
        """
        name = name or getattr(operation, "__name__", "operation")
        attempt = 0

        while True:
            attempt += 1
            self._liveness.ensure_alive()
            try:
                result = await operation()
            except asyncio.CancelledError:
                raise
            except Exception as exc:
                self._liveness.ensure_alive()
                error = ErrorClassifier.classify(exc)

                if not self.policy.should_retry(error, attempt):
                    if error.is_retryable:
                        logger.error(
                            f"{name} failed after {attempt} attempts: {error}"
                        )
                    if error is exc:
                        raise
                    raise error from exc

                delay = self.policy.delay_for(attempt)
                logger.warning(
                    f"{name} attempt {attempt}/{self.policy.max_attempts} failed "
                    f"({error}), retrying in {delay:.1f}s"
                )
                await self._liveness.sleep(self._clock, delay)
                continue

            self._liveness.ensure_alive()
            if attempt > 1:
                logger.info(f"{name} succeeded on attempt {attempt}")
            return result
