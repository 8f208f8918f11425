"""Error types raised by tool infrastructure."""

from app_weaver.core.errors import AppWeaverError


class WorkspacePathError(AppWeaverError):
    """Raised when a tool path resolves outside of the workspace root."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Failed to resolve path: '{path}' is outside the workspace")
