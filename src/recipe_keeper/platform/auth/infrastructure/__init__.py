"""Authentication infrastructure: Keycloak adapter, clock, caches and wiring."""

from .adapters import KeycloakIdentityAdapter, SystemClock
from .repositories import MemoryLocalCache
from .factories import KeycloakClientFactory, create_keycloak_provider, create_session_manager

__all__ = [
    "KeycloakIdentityAdapter",
    "SystemClock",
    "MemoryLocalCache",
    "KeycloakClientFactory",
    "create_keycloak_provider",
    "create_session_manager",
]
