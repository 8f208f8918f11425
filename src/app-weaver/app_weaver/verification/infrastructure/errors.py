"""Error types raised by verification infrastructure."""

from pathlib import Path

from app_weaver.core.errors import AppWeaverError


class VerificationError(AppWeaverError):
    """Raised when verification cannot run at all."""

    def __init__(self, workspace: Path, reason: str) -> None:
        super().__init__(f"Failed to verify workspace {workspace}: {reason}")
