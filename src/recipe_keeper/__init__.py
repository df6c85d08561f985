"""Recipe Keeper - session lifecycle management for the Recipe Keeper app.

The package keeps an authenticated session against a remote identity
provider alive: bounded retries for transient failures, periodic background
refresh, and reconciliation of provider push events into local state.

Usage:
    from recipe_keeper import create_session_manager

    async with create_session_manager() as manager:
        await manager.initialize()
        await manager.sign_in("cook@example.com", "s3cret-pass")
"""

from .__version__ import __version__
from .config import AuthSettings, get_settings, setup_logging
from .core.exceptions import RecipeKeeperError
from .platform.auth import (
    AuthState,
    AuthStatus,
    Session,
    SessionError,
    SessionManager,
    create_session_manager,
)

__all__ = [
    "__version__",
    "AuthSettings",
    "get_settings",
    "setup_logging",
    "RecipeKeeperError",
    "AuthState",
    "AuthStatus",
    "Session",
    "SessionError",
    "SessionManager",
    "create_session_manager",
]
