"""Authentication state change events pushed by the identity provider."""

from enum import Enum
from typing import Callable, Optional

from ..entities import Session


class AuthChangeEvent(str, Enum):
    """Kinds of push notifications an identity provider emits."""

    INITIAL_SESSION = "INITIAL_SESSION"
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
    TOKEN_REFRESHED = "TOKEN_REFRESHED"
    USER_UPDATED = "USER_UPDATED"
    PASSWORD_RECOVERY = "PASSWORD_RECOVERY"


AuthStateListener = Callable[[AuthChangeEvent, Optional[Session]], None]
