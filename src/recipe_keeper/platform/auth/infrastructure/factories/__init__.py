"""Authentication infrastructure factories."""

from .keycloak_client_factory import KeycloakClientFactory
from .session_manager_factory import create_keycloak_provider, create_session_manager

__all__ = [
    "KeycloakClientFactory",
    "create_keycloak_provider",
    "create_session_manager",
]
