"""Authentication value objects."""

from .credentials import Credentials, SignUpOptions

__all__ = [
    "Credentials",
    "SignUpOptions",
]
