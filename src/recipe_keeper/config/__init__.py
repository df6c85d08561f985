"""Configuration for recipe-keeper: environment-driven settings and logging."""

from .settings import AuthSettings, get_settings
from .logging_config import (
    LogFormat,
    LoggingConfig,
    LogVerbosity,
    setup_logging,
)

__all__ = [
    "AuthSettings",
    "get_settings",
    "LogFormat",
    "LoggingConfig",
    "LogVerbosity",
    "setup_logging",
]
