"""Wall-clock implementation of the Clock protocol."""

import asyncio
import time


class SystemClock:
    """Clock backed by ``time.monotonic`` and ``asyncio.sleep``."""

    def monotonic(self) -> float:
        return time.monotonic()

    async def sleep(self, seconds: float) -> None:
        await asyncio.sleep(max(0.0, seconds))
