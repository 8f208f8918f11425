"""ToolExecutorPool Protocol — structural interface for batch tool execution."""

from typing import Protocol

from app_weaver.tools.domain.invocation import ToolInvocation
from app_weaver.tools.domain.outcome import ToolOutcome


class ToolExecutorPool(Protocol):
    """Executes a batch of invocations and returns one outcome per invocation.

    Outcomes are returned in the same order as the invocations. Per-invocation
    failures are reported as outcomes with is_error=True; only batch-level
    failures raise. Same-path mutations are serialized by the pool.
    """

    async def execute_tools(
        self, invocations: list[ToolInvocation]
    ) -> list[ToolOutcome]: ...
