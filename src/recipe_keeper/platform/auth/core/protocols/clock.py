"""Clock protocol used for retry delays and the refresh timer."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class Clock(Protocol):
    """Source of time and suspension for the session manager."""

    def monotonic(self) -> float:
        """Seconds on a monotonic clock."""
        ...

    async def sleep(self, seconds: float) -> None:
        """Suspend the calling task for ``seconds``."""
        ...
