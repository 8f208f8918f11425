"""Error types for batch-level tool execution failures."""

from app_weaver.core.errors import AppWeaverError


class ToolBatchError(AppWeaverError):
    """Raised when a batch cannot be executed at all.

    Individual tool failures are never raised; they become error outcomes.
    """

    def __init__(self, reason: str) -> None:
        super().__init__(f"Failed to execute tool batch: {reason}")
