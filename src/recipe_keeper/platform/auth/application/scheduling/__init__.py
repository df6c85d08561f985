"""Background session refresh scheduling."""

from .refresh_scheduler import DEFAULT_REFRESH_INTERVAL, RefreshScheduler, ScheduleHandle

__all__ = [
    "DEFAULT_REFRESH_INTERVAL",
    "RefreshScheduler",
    "ScheduleHandle",
]
