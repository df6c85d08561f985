"""Authentication infrastructure repositories."""

from .memory_local_cache import MemoryLocalCache

__all__ = [
    "MemoryLocalCache",
]
