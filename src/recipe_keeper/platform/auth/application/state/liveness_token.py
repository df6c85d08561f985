"""Teardown flag shared by all in-flight work of one session manager."""

import asyncio
import logging
from typing import Set

from ...core.exceptions import LivenessRevoked
from ...core.protocols import Clock

logger = logging.getLogger(__name__)


class LivenessToken:
    """Cancellation flag gating post-teardown work.

    True while the owning manager is active; flips to False exactly once.
    Retry delays are slept through the token so revoking it can cancel
    them immediately instead of waiting for them to elapse.
    """

    def __init__(self):
        self._alive = True
        self._pending: Set[asyncio.Future] = set()

    @property
    def is_alive(self) -> bool:
        return self._alive

    @property
    def pending_delays(self) -> int:
        return len(self._pending)

    def ensure_alive(self) -> None:
        """Checkpoint: raise LivenessRevoked once the token is revoked."""
        if not self._alive:
            raise LivenessRevoked()

    async def sleep(self, clock: Clock, seconds: float) -> None:
        """Sleep on ``clock``, aborting with LivenessRevoked on revocation."""
        self.ensure_alive()
        delay = asyncio.ensure_future(clock.sleep(seconds))
        self._pending.add(delay)
        try:
            await delay
        except asyncio.CancelledError:
            if not self._alive:
                raise LivenessRevoked() from None
            raise
        finally:
            self._pending.discard(delay)
        self.ensure_alive()

    def revoke(self) -> bool:
        """
        Flip the token and cancel pending delays.

        Returns:
            True on the first call, False if already revoked
        """
        if not self._alive:
            return False

        self._alive = False
        pending = list(self._pending)
        self._pending.clear()
        for delay in pending:
            if not delay.done():
                delay.cancel()

        logger.debug(f"Liveness revoked, cancelled {len(pending)} pending delays")
        return True
