"""RunState — per-request mutable state of the turn loop."""

import enum
from dataclasses import dataclass, field
from typing import Literal

type FileOperationKind = Literal["create", "edit"]


class BufferMode(enum.Enum):
    """Where streamed text goes during the current model call."""

    NONE = "none"
    THINKING = "thinking"
    SUMMARY = "summary"


@dataclass
class RunState:
    """Created at the start of one request and discarded at its end."""

    iteration: int = 0
    input_tokens: int = 0
    output_tokens: int = 0
    changed_files: set[str] = field(default_factory=set)
    # First classification wins for the lifetime of the request.
    file_operations: dict[str, FileOperationKind] = field(default_factory=dict)
    has_executed_tools: bool = False
    executed_tools_last_iteration: bool = False
    code_writing_emitted: bool = False
    buffer_mode: BufferMode = BufferMode.NONE
    thinking_emitted: bool = False
    thinking_started_at: float | None = None
    thinking_buffer: list[str] = field(default_factory=list)
    summary_buffer: list[str] = field(default_factory=list)
    final_response: str = ""

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens

    def begin_iteration(self) -> None:
        self.iteration += 1
        self.thinking_emitted = False
        self.thinking_started_at = None
        self.thinking_buffer = []
        self.summary_buffer = []
        self.buffer_mode = (
            BufferMode.SUMMARY
            if self.executed_tools_last_iteration
            else BufferMode.THINKING
        )

    def classify(self, path: str, creates: bool) -> FileOperationKind:
        """Return the operation for path, recording it on first sight."""
        if path in self.file_operations:
            return "edit"
        kind: FileOperationKind = "create" if creates else "edit"
        self.file_operations[path] = kind
        return kind
