"""StreamingCallbacks port — the progress surface exposed to callers of the orchestrator."""

from typing import Literal, Protocol

from app_weaver.model.domain.response import TokenUsage

type Phase = Literal["thinking", "reasoning", "code-writing", "building", "completed"]
type FileOperationState = Literal["creating", "created", "editing", "edited"]


class StreamingCallbacks(Protocol):
    """Receives streamed text and progress events. Return values are ignored."""

    def on_delta(self, text: str) -> None: ...

    def on_reasoning(self, text: str) -> None: ...

    def on_phase(self, phase: Phase) -> None: ...

    def on_thinking_complete(self, duration_seconds: float) -> None: ...

    def on_file_operation(self, state: FileOperationState, path: str) -> None: ...

    def on_tool_start(self, tool: str, tool_use_id: str) -> None: ...

    def on_tool_end(self, tool: str, tool_use_id: str, is_error: bool) -> None: ...

    def on_complete(self, usage: TokenUsage) -> None: ...


class NullStreamingCallbacks:
    """Ignores every event. Subclass and override only the events you need."""

    def on_delta(self, text: str) -> None:
        pass

    def on_reasoning(self, text: str) -> None:
        pass

    def on_phase(self, phase: Phase) -> None:
        pass

    def on_thinking_complete(self, duration_seconds: float) -> None:
        pass

    def on_file_operation(self, state: FileOperationState, path: str) -> None:
        pass

    def on_tool_start(self, tool: str, tool_use_id: str) -> None:
        pass

    def on_tool_end(self, tool: str, tool_use_id: str, is_error: bool) -> None:
        pass

    def on_complete(self, usage: TokenUsage) -> None:
        pass
