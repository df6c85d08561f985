"""Periodic background session refresh."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from ...core.protocols import Clock
from ..state.liveness_token import LivenessToken

logger = logging.getLogger(__name__)

RefreshFn = Callable[[], Awaitable[None]]

DEFAULT_REFRESH_INTERVAL = 600.0  # 10 minutes


@dataclass
class ScheduleHandle:
    """The active periodic refresh timer."""

    interval: float
    task: Optional[asyncio.Task] = None
    cancelled: bool = False
    ticks: int = 0

    @property
    def is_active(self) -> bool:
        return not self.cancelled and self.task is not None and not self.task.done()


class RefreshScheduler:
    """Owns at most one periodic refresh timer.

    A failing ``refresh_fn`` is logged and stops the scheduler. It is never
    retried or rescheduled.
    """

    def __init__(self, clock: Clock, liveness: LivenessToken):
        self._clock = clock
        self._liveness = liveness
        self._handle: Optional[ScheduleHandle] = None

    @property
    def handle(self) -> Optional[ScheduleHandle]:
        return self._handle

    @property
    def is_running(self) -> bool:
        return self._handle is not None and self._handle.is_active

    def start(
        self,
        interval: float,
        refresh_fn: RefreshFn,
    ) -> Optional[ScheduleHandle]:
        """
        Replace any running timer with a new one.

        Args:
            interval: Seconds between ticks
            refresh_fn: Coroutine function awaited on every tick

        Returns:
            The new handle, or None if the owning manager was torn down
        """
        if interval <= 0:
            raise ValueError("Refresh interval must be positive")

        self.stop()
        if not self._liveness.is_alive:
            return None

        handle = ScheduleHandle(interval=interval)
        handle.task = asyncio.create_task(self._run(handle, refresh_fn))
        self._handle = handle
        logger.debug(f"Session refresh scheduled every {interval:.0f}s")
        return handle

    def stop(self) -> None:
        """Cancel the running timer. Idempotent."""
        handle, self._handle = self._handle, None
        if handle is None or handle.cancelled:
            return

        handle.cancelled = True
        try:
            current = asyncio.current_task()
        except RuntimeError:
            current = None

        # A tick that stops its own timer finishes its refresh and then exits
        if handle.task is not None and handle.task is not current and not handle.task.done():
            handle.task.cancel()
        logger.debug("Session refresh stopped")

    async def _run(self, handle: ScheduleHandle, refresh_fn: RefreshFn) -> None:
        try:
            while True:
                await self._clock.sleep(handle.interval)
                if handle.cancelled or not self._liveness.is_alive:
                    return

                handle.ticks += 1
                try:
                    await refresh_fn()
                except asyncio.CancelledError:
                    raise
                except Exception as e:
                    logger.error(
                        f"Scheduled session refresh failed, stopping refresh timer: {e}",
                        exc_info=True,
                    )
                    if self._handle is handle:
                        self.stop()
                    return

                if handle.cancelled:
                    return
        finally:
            if self._handle is handle:
                self._handle = None
