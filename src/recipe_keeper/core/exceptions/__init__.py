"""Base exception hierarchy for recipe-keeper."""

from .base import RecipeKeeperError

__all__ = [
    "RecipeKeeperError",
]
