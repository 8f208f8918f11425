"""ToolObserver port — per-invocation execution metrics."""

from typing import Protocol


class ToolObserver(Protocol):
    def tool_executed(
        self,
        tool: str,
        tool_use_id: str,
        latency_ms: int,
        input_size: int,
        output_size: int,
        success: bool,
        error: str | None,
    ) -> None: ...
