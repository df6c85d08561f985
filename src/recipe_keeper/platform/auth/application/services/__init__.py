"""Authentication application services."""

from .session_manager import SessionManager

__all__ = [
    "SessionManager",
]
