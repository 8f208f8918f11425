"""Error types raised by model infrastructure."""

from app_weaver.core.errors import AppWeaverError


class ModelInvocationError(AppWeaverError):
    """Raised when the model cannot be invoked or returns an unusable response."""

    def __init__(self, reason: str, retriable: bool = False) -> None:
        super().__init__(f"Failed to invoke model: {reason}", retriable=retriable)
