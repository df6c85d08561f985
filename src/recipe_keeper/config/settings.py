"""
Authentication settings for the Recipe Keeper session manager.

Values come from the environment (prefix ``RECIPE_KEEPER_``) or a local
``.env`` file. Only the identity provider location and client id are
required; everything else has a working default.
"""
from functools import lru_cache
from typing import Optional

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AuthSettings(BaseSettings):
    """Settings for the identity provider, retries and session refresh."""

    model_config = SettingsConfigDict(
        env_prefix="RECIPE_KEEPER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Identity provider (Keycloak)
    keycloak_server_url: str
    keycloak_client_id: str
    keycloak_realm: str = "recipe-keeper"
    keycloak_client_secret: Optional[SecretStr] = None
    keycloak_admin_username: Optional[str] = None
    keycloak_admin_password: Optional[SecretStr] = None
    keycloak_admin_realm: str = "master"
    verify_ssl: bool = True

    # Where confirmation and recovery links send the user back to
    app_url: str = "http://localhost:5173"

    # Retry and refresh tuning
    auth_max_attempts: int = Field(default=5, ge=1)
    auth_retry_base_delay: float = Field(default=1.0, ge=0)
    session_refresh_interval: float = Field(default=600.0, gt=0)  # 10 minutes
    session_expiry_margin: float = Field(default=60.0, ge=0)  # 1 minute

    @field_validator("keycloak_server_url", "app_url")
    @classmethod
    def _require_http_url(cls, value: str) -> str:
        if not value.startswith(("http://", "https://")):
            raise ValueError("must be an http:// or https:// URL")
        return value.rstrip("/")

    @field_validator("keycloak_client_id", "keycloak_realm")
    @classmethod
    def _require_non_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value.strip()

    @property
    def has_admin_credentials(self) -> bool:
        """Sign-up and password management need an admin client."""
        return bool(self.keycloak_admin_username and self.keycloak_admin_password)


@lru_cache()
def get_settings() -> AuthSettings:
    """Get cached settings instance."""
    return AuthSettings()
