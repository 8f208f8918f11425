"""Structlog implementation of the ToolObserver port."""

import structlog


class StructlogToolObserver:
    """Delegates tool execution metrics to structlog.

    Satisfies the ToolObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def tool_executed(
        self,
        tool: str,
        tool_use_id: str,
        latency_ms: int,
        input_size: int,
        output_size: int,
        success: bool,
        error: str | None,
    ) -> None:
        if success:
            self._log.info(
                "tool.executed",
                tool=tool,
                tool_use_id=tool_use_id,
                latency_ms=latency_ms,
                input_size=input_size,
                output_size=output_size,
            )
            return

        self._log.error(
            "tool.failed",
            tool=tool,
            tool_use_id=tool_use_id,
            latency_ms=latency_ms,
            input_size=input_size,
            output_size=output_size,
            error=error,
        )
