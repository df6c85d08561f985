"""Keycloak client factory for the session manager."""

import logging
from typing import Optional

from keycloak import KeycloakAdmin, KeycloakOpenID

from .....config import AuthSettings

logger = logging.getLogger(__name__)


class KeycloakClientFactory:
    """Keycloak client factory.

    Handles ONLY Keycloak client instantiation from AuthSettings.
    """

    ADMIN_CLIENT_ID = "admin-cli"

    def __init__(self, settings: AuthSettings):
        if not settings:
            raise ValueError("Keycloak settings are required")
        self.settings = settings
        self._validate_config()

    def _validate_config(self) -> None:
        """Validate Keycloak configuration.

        Raises:
            ValueError: If configuration is invalid
        """
        if not self.settings.keycloak_server_url.startswith(("http://", "https://")):
            raise ValueError("Invalid Keycloak server URL format")
        if not self.settings.keycloak_realm or not self.settings.keycloak_client_id:
            raise ValueError("Keycloak realm and client id are required")

        logger.debug("Keycloak configuration validated successfully")

    @property
    def server_url(self) -> str:
        """Server URL normalized for Keycloak v18+ (no ``/auth`` suffix)."""
        server_url = self.settings.keycloak_server_url.rstrip("/")
        if server_url.endswith("/auth"):
            server_url = server_url[:-5]
            logger.debug(f"Removed /auth suffix for Keycloak v18+ compatibility: {server_url}")
        return server_url

    def create_openid_client(self) -> KeycloakOpenID:
        """Create the OpenID Connect client for the application realm."""
        secret = self.settings.keycloak_client_secret
        logger.debug(f"Creating Keycloak OpenID client for realm: {self.settings.keycloak_realm}")
        return KeycloakOpenID(
            server_url=self.server_url,
            client_id=self.settings.keycloak_client_id,
            realm_name=self.settings.keycloak_realm,
            client_secret_key=secret.get_secret_value() if secret else None,
            verify=self.settings.verify_ssl,
        )

    def create_admin_client(self) -> Optional[KeycloakAdmin]:
        """Create the Admin API client, or None without admin credentials."""
        if not self.settings.has_admin_credentials:
            logger.info("No Keycloak admin credentials; sign-up and password management disabled")
            return None

        logger.debug(f"Creating Keycloak Admin client for realm: {self.settings.keycloak_realm}")
        return KeycloakAdmin(
            server_url=self.server_url,
            username=self.settings.keycloak_admin_username,
            password=self.settings.keycloak_admin_password.get_secret_value(),
            realm_name=self.settings.keycloak_realm,
            user_realm_name=self.settings.keycloak_admin_realm,
            client_id=self.ADMIN_CLIENT_ID,
            verify=self.settings.verify_ssl,
        )
