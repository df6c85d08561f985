"""Authentication core protocols.

Contract definitions for the collaborators the session manager depends on.
"""

from .identity_provider import AuthSubscription, IdentityProvider
from .clock import Clock
from .local_cache import LocalCache

__all__ = [
    "AuthSubscription",
    "IdentityProvider",
    "Clock",
    "LocalCache",
]
