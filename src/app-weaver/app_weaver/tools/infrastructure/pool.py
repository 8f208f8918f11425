"""WorkspaceToolPool — executes tool batches against a Workspace."""

import asyncio
import json
import time

from app_weaver.tools.domain.errors import ToolBatchError
from app_weaver.tools.domain.invocation import (
    GenericInvocation,
    ReplaceLinesInvocation,
    SearchFilesInvocation,
    ToolInvocation,
    ViewFileInvocation,
    WriteFileInvocation,
    invocation_payload,
    is_mutating,
    target_path,
)
from app_weaver.tools.domain.observer import ToolObserver
from app_weaver.tools.domain.outcome import OutcomeMetadata, ToolOutcome
from app_weaver.tools.infrastructure.errors import WorkspacePathError
from app_weaver.tools.infrastructure.workspace import ToolFailure, Workspace

_NO_PATH = "__no_path__"


class WorkspaceToolPool:
    """Runs reads in parallel and serializes mutations per target path.

    Mutation groups for different paths run in parallel with each other.
    Concurrency across reads and across groups is bounded by max_concurrent.
    Satisfies the ToolExecutorPool protocol structurally.
    """

    def __init__(
        self,
        workspace: Workspace,
        observer: ToolObserver,
        max_concurrent: int = 4,
    ) -> None:
        self._workspace = workspace
        self._observer = observer
        self._max_concurrent = max_concurrent

    async def execute_tools(
        self, invocations: list[ToolInvocation]
    ) -> list[ToolOutcome]:
        """Execute invocations and return outcomes in input order.

        Raises:
            ToolBatchError: if invocation ids are not unique within the batch.
        """
        ids = [inv.id for inv in invocations]
        if len(set(ids)) != len(ids):
            raise ToolBatchError(reason="duplicate tool_use ids in batch")

        if not invocations:
            return []

        sem = asyncio.Semaphore(self._max_concurrent)
        reads: list[ToolInvocation] = []
        writes_by_path: dict[str, list[ToolInvocation]] = {}
        for invocation in invocations:
            if is_mutating(invocation):
                path = target_path(invocation) or _NO_PATH
                writes_by_path.setdefault(path, []).append(invocation)
            else:
                reads.append(invocation)

        outcomes: dict[str, ToolOutcome] = {}

        async def run_read(invocation: ToolInvocation) -> None:
            async with sem:
                outcomes[invocation.id] = await self._execute_one(invocation)

        async def run_group(group: list[ToolInvocation]) -> None:
            async with sem:
                for invocation in group:
                    outcomes[invocation.id] = await self._execute_one(invocation)

        async with asyncio.TaskGroup() as tg:
            for invocation in reads:
                tg.create_task(run_read(invocation))
            for group in writes_by_path.values():
                tg.create_task(run_group(group))

        return [outcomes[inv.id] for inv in invocations]

    async def _execute_one(self, invocation: ToolInvocation) -> ToolOutcome:
        started = time.monotonic()
        input_size = len(json.dumps(invocation_payload(invocation)))

        try:
            content, metadata = await asyncio.to_thread(self._dispatch, invocation)
            outcome = ToolOutcome(
                tool_use_id=invocation.id, content=content, metadata=metadata
            )
        except (ToolFailure, WorkspacePathError) as exc:
            outcome = _error(invocation=invocation, message=f"Error: {exc}")
        except Exception as exc:  # noqa: BLE001
            outcome = _error(invocation=invocation, message=f"Execution error: {exc}")

        self._observer.tool_executed(
            tool=invocation.name,
            tool_use_id=invocation.id,
            latency_ms=int((time.monotonic() - started) * 1000),
            input_size=input_size,
            output_size=len(outcome.content),
            success=not outcome.is_error,
            error=outcome.content if outcome.is_error else None,
        )
        return outcome

    def _dispatch(self, invocation: ToolInvocation) -> tuple[str, OutcomeMetadata]:
        match invocation:
            case ViewFileInvocation():
                return self._workspace.view(invocation.input)
            case SearchFilesInvocation():
                return self._workspace.search(invocation.input)
            case WriteFileInvocation():
                return self._workspace.write(invocation.input)
            case ReplaceLinesInvocation():
                return self._workspace.replace_lines(invocation.input)
            case GenericInvocation(validation_error=str() as reason):
                raise ToolFailure(f"Invalid input for '{invocation.name}': {reason}")
            case GenericInvocation():
                raise ToolFailure(f"Unknown tool '{invocation.name}'")


def _error(invocation: ToolInvocation, message: str) -> ToolOutcome:
    path = target_path(invocation)
    return ToolOutcome(
        tool_use_id=invocation.id,
        content=message,
        is_error=True,
        metadata=OutcomeMetadata(path=path) if path is not None else None,
    )
