"""In-memory local cache cleared on sign-out."""

import logging
import time
from typing import Any, Callable, Dict, Optional, Tuple

logger = logging.getLogger(__name__)


class MemoryLocalCache:
    """Memory-based key/value cache with optional per-key TTL.

    Handles ONLY client-side data that belongs to the signed-in user
    (drafts, recently viewed recipes, preferences). Registered with the
    SessionManager so sign-out always drops it.
    """

    def __init__(
        self,
        name: str = "local",
        default_ttl_seconds: Optional[float] = None,
        time_fn: Callable[[], float] = time.monotonic,
    ):
        """Initialize memory local cache.

        Args:
            name: Cache name used in log messages
            default_ttl_seconds: TTL applied when ``set`` gets none; None keeps forever
            time_fn: Monotonic time source
        """
        if default_ttl_seconds is not None and default_ttl_seconds <= 0:
            raise ValueError("Default TTL must be positive")

        self.name = name
        self.default_ttl_seconds = default_ttl_seconds
        self._time = time_fn
        # key -> (value, expires_at or None)
        self._entries: Dict[str, Tuple[Any, Optional[float]]] = {}

    def get(self, key: str, default: Any = None) -> Any:
        entry = self._entries.get(key)
        if entry is None:
            return default

        value, expires_at = entry
        if expires_at is not None and self._time() >= expires_at:
            del self._entries[key]
            return default
        return value

    def set(self, key: str, value: Any, ttl_seconds: Optional[float] = None) -> None:
        ttl = ttl_seconds if ttl_seconds is not None else self.default_ttl_seconds
        if ttl is not None and ttl <= 0:
            raise ValueError("TTL must be positive")
        expires_at = self._time() + ttl if ttl is not None else None
        self._entries[key] = (value, expires_at)

    def delete(self, key: str) -> bool:
        return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        count = len(self._entries)
        self._entries.clear()
        logger.debug(f"Cleared {count} entries from {self.name} cache")

    def __contains__(self, key: str) -> bool:
        return self.get(key, _MISSING) is not _MISSING

    def __len__(self) -> int:
        now = self._time()
        return sum(
            1 for _, expires_at in self._entries.values()
            if expires_at is None or now < expires_at
        )

    def __repr__(self) -> str:
        return f"MemoryLocalCache(name={self.name!r})"


_MISSING = object()
