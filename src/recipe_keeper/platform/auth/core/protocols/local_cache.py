"""Local cache protocol."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class LocalCache(Protocol):
    """Client-side data that must not outlive a signed-in user."""

    def clear(self) -> None:
        """Drop every cached entry."""
        ...
