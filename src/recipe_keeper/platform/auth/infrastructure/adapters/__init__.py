"""Authentication infrastructure adapters."""

from .keycloak_identity_adapter import KeycloakIdentityAdapter
from .system_clock import SystemClock

__all__ = [
    "KeycloakIdentityAdapter",
    "SystemClock",
]
