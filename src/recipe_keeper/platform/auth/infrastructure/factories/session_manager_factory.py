"""Wiring for a production SessionManager."""

import logging
from typing import Iterable, Optional

from .....config import AuthSettings, get_settings
from ...application import RetryPolicy, SessionManager
from ...core.protocols import Clock, IdentityProvider, LocalCache
from ..adapters import KeycloakIdentityAdapter, SystemClock
from .keycloak_client_factory import KeycloakClientFactory

logger = logging.getLogger(__name__)


def create_keycloak_provider(settings: AuthSettings) -> KeycloakIdentityAdapter:
    """Build a KeycloakIdentityAdapter from settings."""
    factory = KeycloakClientFactory(settings)
    return KeycloakIdentityAdapter(
        openid_client=factory.create_openid_client(),
        admin_client=factory.create_admin_client(),
        expiry_margin_seconds=settings.session_expiry_margin,
    )


def create_session_manager(
    settings: Optional[AuthSettings] = None,
    provider: Optional[IdentityProvider] = None,
    clock: Optional[Clock] = None,
    local_caches: Iterable[LocalCache] = (),
) -> SessionManager:
    """
    Create a SessionManager wired from settings.

    Args:
        settings: Auth settings; defaults to ``get_settings()``
        provider: Identity provider; defaults to Keycloak built from settings
        clock: Clock; defaults to SystemClock
        local_caches: Caches cleared on sign-out

    Returns:
        A SessionManager subscribed to the provider's push events
    """
    settings = settings or get_settings()
    if provider is None:
        provider = create_keycloak_provider(settings)

    retry_policy = RetryPolicy(
        max_attempts=settings.auth_max_attempts,
        base_delay=settings.auth_retry_base_delay,
    )
    logger.debug(
        f"Creating session manager: max_attempts={retry_policy.max_attempts}, "
        f"refresh_interval={settings.session_refresh_interval:.0f}s"
    )
    return SessionManager(
        provider=provider,
        clock=clock or SystemClock(),
        retry_policy=retry_policy,
        local_caches=local_caches,
        refresh_interval=settings.session_refresh_interval,
        app_url=settings.app_url,
    )
