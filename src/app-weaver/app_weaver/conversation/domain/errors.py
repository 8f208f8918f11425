"""Error types raised by the conversation domain."""

from app_weaver.core.errors import AppWeaverError


class ConversationInvariantError(AppWeaverError):
    """Raised when the conversation history would be rejected by the model API.

    This signals a programming bug, never a recoverable runtime condition.
    """

    def __init__(self, turn_idx: int, reason: str) -> None:
        self.turn_idx = turn_idx
        super().__init__(
            f"Failed to validate conversation history: turn {turn_idx} {reason}"
        )
