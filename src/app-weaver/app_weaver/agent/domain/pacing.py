"""Pacing policies for the artificial delays used while replaying streamed text."""

import re
from collections.abc import Iterator
from typing import Literal, Protocol

from app_weaver.config.domain.streaming import StreamingConfig

type PauseKind = Literal[
    "thinking_settle", "replay_chunk", "code_writing", "file_operation"
]

_TOKEN_PATTERN = re.compile(r"\S+\s*|\s+")


class PacingPolicy(Protocol):
    """Decides how long the orchestrator suspends at each pacing point."""

    @property
    def chunk_size(self) -> int: ...

    def delay_seconds(self, kind: PauseKind) -> float: ...


class RealTimePacing:
    """Delays taken from StreamingConfig."""

    def __init__(self, config: StreamingConfig) -> None:
        self._config = config

    @property
    def chunk_size(self) -> int:
        return self._config.reasoning_chunk_size

    def delay_seconds(self, kind: PauseKind) -> float:
        match kind:
            case "thinking_settle":
                ms = self._config.thinking_settle_ms
            case "replay_chunk":
                ms = self._config.reasoning_delay_ms
            case "code_writing":
                ms = self._config.code_writing_delay_ms
            case "file_operation":
                ms = self._config.file_operation_delay_ms
        return ms / 1000


class NoPacing:
    """Never suspends. Used by tests and non-interactive runs."""

    def __init__(self, chunk_size: int = 2) -> None:
        self._chunk_size = chunk_size

    @property
    def chunk_size(self) -> int:
        return self._chunk_size

    def delay_seconds(self, kind: PauseKind) -> float:
        return 0.0


def iter_chunks(text: str, chunk_size: int) -> Iterator[str]:
    """Split text into chunks of chunk_size whitespace-delimited tokens.

    Concatenating the chunks reproduces text exactly.
    """
    tokens = _TOKEN_PATTERN.findall(text)
    for start in range(0, len(tokens), chunk_size):
        yield "".join(tokens[start : start + chunk_size])
