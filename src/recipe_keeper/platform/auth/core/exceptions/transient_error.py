"""Transient (retryable) session failure."""

from .session_error import ErrorKind, SessionError


class TransientSessionError(SessionError):
    """Raised when the identity provider could not be reached.

    Network blips, timeouts and provider-side 5xx responses land here.
    These are the only failures the retry policy retries.
    """

    kind = ErrorKind.TRANSIENT
