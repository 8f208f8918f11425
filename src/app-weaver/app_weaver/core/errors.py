"""Base exception class for all app-weaver-specific errors."""


class AppWeaverError(Exception):
    """Base class for all app-weaver errors."""

    def __init__(self, message: str, retriable: bool = False) -> None:
        super().__init__(message)
        self.retriable = retriable
