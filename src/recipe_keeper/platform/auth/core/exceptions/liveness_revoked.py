"""Signal raised at a checkpoint reached after teardown."""

from .....core.exceptions import RecipeKeeperError


class LivenessRevoked(RecipeKeeperError):
    """In-flight work found its session manager torn down.

    Used only to unwind suspended operations. Public SessionManager
    operations convert it to a ``None`` return, so callers never see it.
    """

    def __init__(self, message: str = "Session manager has been torn down") -> None:
        super().__init__(message)
