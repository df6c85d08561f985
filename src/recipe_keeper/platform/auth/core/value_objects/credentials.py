"""Credential value objects with validation."""

import re
from dataclasses import dataclass, field
from typing import ClassVar, Dict, Optional

from ..exceptions import SessionValidationError

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


@dataclass(frozen=True)
class Credentials:
    """Email/password pair supplied by the user.

    Handles ONLY input validation. Invalid input raises
    SessionValidationError before any provider call is made.
    """

    email: str
    password: str = field(repr=False)

    MIN_PASSWORD_LENGTH: ClassVar[int] = 6
    MAX_EMAIL_LENGTH: ClassVar[int] = 254

    def __post_init__(self) -> None:
        object.__setattr__(self, "email", self.validate_email(self.email))
        self.validate_password(self.password)

    @classmethod
    def validate_email(cls, email: str) -> str:
        """Normalize and validate an email address."""
        if not isinstance(email, str) or not email.strip():
            raise SessionValidationError("Email is required", field="email")

        email = email.strip().lower()
        if len(email) > cls.MAX_EMAIL_LENGTH or not EMAIL_PATTERN.match(email):
            raise SessionValidationError("Please enter a valid email address", field="email")
        return email

    @classmethod
    def validate_password(cls, password: str) -> str:
        if not isinstance(password, str) or not password:
            raise SessionValidationError("Password is required", field="password")
        if len(password) < cls.MIN_PASSWORD_LENGTH:
            raise SessionValidationError(
                f"Password must be at least {cls.MIN_PASSWORD_LENGTH} characters long",
                field="password",
            )
        return password


@dataclass(frozen=True)
class SignUpOptions:
    """Extra sign-up parameters forwarded to the identity provider."""

    email_redirect_to: Optional[str] = None
    data: Dict[str, str] = field(default_factory=dict, hash=False)
