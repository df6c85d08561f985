"""Base exceptions for recipe-keeper.

All exceptions raised by the package inherit from RecipeKeeperError and carry
an error code and structured details so callers can log or display them
without parsing messages.
"""

from typing import Any, Dict, Optional


class RecipeKeeperError(Exception):
    """Base exception for all recipe-keeper errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Standardized error payload for the UI layer."""
        return {
            "code": self.error_code,
            "message": self.message,
            "details": self.details,
            "type": self.__class__.__name__,
        }
