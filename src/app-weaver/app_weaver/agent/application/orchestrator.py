"""TurnLoopOrchestrator — drives one user request through the bounded agent loop."""

import asyncio
import json
import time
from collections.abc import Callable

from app_weaver.agent.domain.callbacks import NullStreamingCallbacks, StreamingCallbacks
from app_weaver.agent.domain.observer import AgentObserver
from app_weaver.agent.domain.pacing import PacingPolicy, PauseKind, iter_chunks
from app_weaver.agent.domain.prompt import DEFAULT_SYSTEM_PROMPT
from app_weaver.agent.domain.read_before_write import (
    enforce_read_before_write,
    new_enforcer_id,
)
from app_weaver.agent.domain.references import (
    find_dangling_references,
    format_dangling_warning,
)
from app_weaver.agent.domain.run_state import BufferMode, FileOperationKind, RunState
from app_weaver.agent.domain.transcript import (
    NullTranscriptRecorder,
    TranscriptRecorder,
)
from app_weaver.config.domain.agent import AgentConfig
from app_weaver.config.domain.web_search import WebSearchConfig
from app_weaver.conversation.domain.blocks import ContentBlock, TextBlock, text_of
from app_weaver.conversation.domain.observer import ConversationObserver
from app_weaver.conversation.domain.store import ConversationStore
from app_weaver.conversation.domain.turn import Turn
from app_weaver.conversation.domain.validator import validate_conversation_history
from app_weaver.model.domain.client import ModelClient
from app_weaver.model.domain.response import TextDelta, TokenUsage
from app_weaver.tools.domain.catalog import get_tool_definitions
from app_weaver.tools.domain.errors import ToolBatchError
from app_weaver.tools.domain.invocation import (
    ToolInvocation,
    WriteFileInvocation,
    invocation_payload,
    is_mutating,
    target_path,
)
from app_weaver.tools.domain.outcome import ToolOutcome
from app_weaver.tools.domain.pool import ToolExecutorPool
from app_weaver.verification.domain.runner import VerificationRunner
from app_weaver.verification.domain.summary import (
    format_change_summary,
    format_summary,
)

CONFIRMATION_MESSAGE = "Changes applied. Review the updated files in your workspace."
PLACEHOLDER_TEXT = "..."


class TurnLoopOrchestrator:
    """Runs the model/tool loop for one conversation.

    One instance owns one ConversationStore. Every process_request() call
    gets a fresh RunState, but calls must not overlap on the same instance;
    use one orchestrator per concurrent conversation.

    Expected conditions (token budget exhausted, tool failures, dangling file
    references) end up in the returned text or in the conversation. Errors
    raised by the model client, the tool pool or the verification runner
    propagate unchanged.
    """

    def __init__(
        self,
        model_client: ModelClient,
        tool_pool: ToolExecutorPool,
        verification_runner: VerificationRunner,
        config: AgentConfig,
        pacing: PacingPolicy,
        observer: AgentObserver,
        conversation_observer: ConversationObserver,
        system_prompt: str = DEFAULT_SYSTEM_PROMPT,
        model_name: str = "",
        web_search: WebSearchConfig | None = None,
        store: ConversationStore | None = None,
        transcripts: TranscriptRecorder | None = None,
        id_factory: Callable[[], str] = new_enforcer_id,
    ) -> None:
        self._model_client = model_client
        self._tool_pool = tool_pool
        self._verification_runner = verification_runner
        self._config = config
        self._pacing = pacing
        self._observer = observer
        self._conversation_observer = conversation_observer
        self._system_prompt = system_prompt
        self._model_name = model_name
        self._web_search = web_search
        self._store = store if store is not None else ConversationStore()
        self._transcripts = (
            transcripts if transcripts is not None else NullTranscriptRecorder()
        )
        self._id_factory = id_factory
        self._tools = get_tool_definitions()

    @property
    def store(self) -> ConversationStore:
        return self._store

    async def process_request(
        self,
        user_message: str,
        callbacks: StreamingCallbacks | None = None,
        system_prefix: str | None = None,
    ) -> str:
        """Handle one user message and return the final response text.

        system_prefix is prepended to the system prompt for this request only.
        The `completed` phase and on_complete are emitted exactly once, after
        the loop has finished.

        Raises:
            ConversationInvariantError: if the stored history is malformed.
        """
        callbacks = callbacks if callbacks is not None else NullStreamingCallbacks()
        state = RunState()
        system_prompt = (
            f"{system_prefix}\n\n{self._system_prompt}"
            if system_prefix
            else self._system_prompt
        )

        self._observer.agent_request_started(
            history_turns=len(self._store), dry_run=self._config.dry_run
        )
        self._transcripts.start(user_message=user_message)
        self._store.append(Turn(role="user", content=[TextBlock(text=user_message)]))

        final_response = await self._run_loop(
            state=state, callbacks=callbacks, system_prompt=system_prompt
        )

        self._transcripts.finish(final_response=final_response)
        self._observer.agent_request_completed(
            iterations=state.iteration,
            input_tokens=state.input_tokens,
            output_tokens=state.output_tokens,
            changed_files=sorted(state.changed_files),
        )
        callbacks.on_phase("completed")
        callbacks.on_complete(
            TokenUsage(
                input_tokens=state.input_tokens, output_tokens=state.output_tokens
            )
        )
        return final_response

    async def _run_loop(
        self, state: RunState, callbacks: StreamingCallbacks, system_prompt: str
    ) -> str:
        while state.iteration < self._config.max_agent_turns:
            state.begin_iteration()
            self._observer.agent_iteration_started(iteration=state.iteration)

            validate_conversation_history(
                turns=self._store.history(),
                observer=self._conversation_observer,
                strict_server_tool_pairing=self._config.strict_server_tool_pairing,
            )

            response = await self._model_client.send_message(
                history=list(self._store.history()),
                system_prompt=system_prompt,
                tools=self._tools,
                on_delta=lambda delta: self._route_delta(
                    delta=delta, state=state, callbacks=callbacks
                ),
                web_search=self._web_search,
            )
            self._transcripts.record_response(model=self._model_name, response=response)

            state.input_tokens += response.usage.input_tokens
            state.output_tokens += response.usage.output_tokens
            if state.total_tokens > self._config.max_tokens_per_request:
                return self._stop_for_token_limit(state=state)

            enforced = enforce_read_before_write(
                blocks=response.content,
                enabled=self._config.force_read_before_write,
                id_factory=self._id_factory,
            )
            await self._resolve_phase(
                state=state, callbacks=callbacks, has_tools=bool(enforced.invocations)
            )

            blocks = enforced.blocks
            if not blocks:
                self._observer.agent_empty_response(iteration=state.iteration)
                blocks = [TextBlock(text=PLACEHOLDER_TEXT)]
            self._store.append(Turn(role="assistant", content=blocks))

            state.final_response = text_of(response.content)
            if not enforced.invocations:
                if state.has_executed_tools and not self._config.dry_run:
                    state.final_response += await self._verification_summary(state)
                return state.final_response

            outcomes = await self._execute_batch(
                state=state, callbacks=callbacks, invocations=enforced.invocations
            )
            result_blocks: list[ContentBlock] = [o.to_block() for o in outcomes]
            self._store.append(Turn(role="user", content=result_blocks))
            self._transcripts.record_tool_results(blocks=result_blocks)
            state.executed_tools_last_iteration = True

            # Mutations are applied as one batch; the model never chains edits.
            if any(is_mutating(inv) for inv in enforced.invocations):
                return CONFIRMATION_MESSAGE

        self._observer.agent_turn_limit_reached(max_turns=self._config.max_agent_turns)
        return state.final_response

    def _stop_for_token_limit(self, state: RunState) -> str:
        limit = self._config.max_tokens_per_request
        self._observer.agent_token_limit_exceeded(
            input_tokens=state.input_tokens,
            output_tokens=state.output_tokens,
            limit=limit,
        )
        message = (
            f"Token limit exceeded: {state.total_tokens} tokens used"
            f" (input: {state.input_tokens}, output: {state.output_tokens})"
            f" exceeds the per-request budget of {limit}."
        )
        self._store.append(Turn(role="assistant", content=[TextBlock(text=message)]))
        return message

    # ------------------------------------------------------------------
    # Phase streaming
    # ------------------------------------------------------------------

    def _route_delta(
        self, delta: TextDelta, state: RunState, callbacks: StreamingCallbacks
    ) -> None:
        match state.buffer_mode:
            case BufferMode.THINKING:
                if not state.thinking_emitted:
                    state.thinking_emitted = True
                    state.thinking_started_at = time.monotonic()
                    callbacks.on_phase("thinking")
                state.thinking_buffer.append(delta.content)
            case BufferMode.SUMMARY:
                state.summary_buffer.append(delta.content)
            case BufferMode.NONE:
                callbacks.on_delta(delta.content)

    async def _resolve_phase(
        self, state: RunState, callbacks: StreamingCallbacks, has_tools: bool
    ) -> None:
        """Release text buffered during the model call once its shape is known."""
        mode = state.buffer_mode
        state.buffer_mode = BufferMode.NONE

        match mode:
            case BufferMode.THINKING:
                thinking = "".join(state.thinking_buffer)
                if not thinking:
                    return
                if not has_tools:
                    callbacks.on_delta(thinking)
                    return
                started = state.thinking_started_at or time.monotonic()
                callbacks.on_thinking_complete(time.monotonic() - started)
                await self._pause("thinking_settle")
                callbacks.on_phase("reasoning")
                await self._replay(text=thinking, emit=callbacks.on_reasoning)
            case BufferMode.SUMMARY:
                summary = "".join(state.summary_buffer)
                if has_tools:
                    if summary:
                        callbacks.on_phase("reasoning")
                        await self._replay(text=summary, emit=callbacks.on_reasoning)
                    return
                callbacks.on_phase("building")
                await self._replay(text=summary, emit=callbacks.on_delta)
            case BufferMode.NONE:
                pass

    async def _replay(self, text: str, emit: Callable[[str], None]) -> None:
        for chunk in iter_chunks(text, self._pacing.chunk_size):
            emit(chunk)
            await self._pause("replay_chunk")

    async def _pause(self, kind: PauseKind) -> None:
        delay = self._pacing.delay_seconds(kind)
        if delay > 0:
            await asyncio.sleep(delay)

    # ------------------------------------------------------------------
    # Tool execution
    # ------------------------------------------------------------------

    async def _execute_batch(
        self,
        state: RunState,
        callbacks: StreamingCallbacks,
        invocations: list[ToolInvocation],
    ) -> list[ToolOutcome]:
        """Execute one batch, emitting all start events before and all end events after.

        Raises:
            ToolBatchError: if the pool does not return one outcome per invocation.
        """
        dry_run = self._config.dry_run
        self._observer.agent_tools_dispatched(
            iteration=state.iteration,
            tools=[inv.name for inv in invocations],
            dry_run=dry_run,
        )

        if not state.code_writing_emitted and any(is_mutating(i) for i in invocations):
            await self._pause("code_writing")
            callbacks.on_phase("code-writing")
            state.code_writing_emitted = True

        file_operations: dict[str, FileOperationKind] = {}
        for invocation in invocations:
            path = target_path(invocation)
            if not is_mutating(invocation) or path is None:
                callbacks.on_tool_start(invocation.name, invocation.id)
                continue
            if path in file_operations:
                continue
            kind = state.classify(
                path, creates=isinstance(invocation, WriteFileInvocation)
            )
            file_operations[path] = kind
            callbacks.on_file_operation(
                "creating" if kind == "create" else "editing", path
            )
        if file_operations:
            await self._pause("file_operation")

        if dry_run:
            outcomes = [_dry_run_outcome(inv) for inv in invocations]
        else:
            outcomes = await self._tool_pool.execute_tools(invocations)
            state.has_executed_tools = True
        if len(outcomes) != len(invocations):
            raise ToolBatchError(
                reason=f"expected {len(invocations)} outcomes, got {len(outcomes)}"
            )

        for invocation, outcome in zip(invocations, outcomes, strict=True):
            if not is_mutating(invocation) or target_path(invocation) is None:
                callbacks.on_tool_end(invocation.name, invocation.id, outcome.is_error)
        for path, kind in file_operations.items():
            callbacks.on_file_operation(
                "created" if kind == "create" else "edited", path
            )
        if file_operations:
            await self._pause("file_operation")

        if dry_run:
            return outcomes
        return self._check_references(
            state=state, invocations=invocations, outcomes=outcomes
        )

    def _check_references(
        self,
        state: RunState,
        invocations: list[ToolInvocation],
        outcomes: list[ToolOutcome],
    ) -> list[ToolOutcome]:
        created_this_iteration: set[str] = set()
        for outcome in outcomes:
            path = outcome.touched_path()
            if path is not None:
                state.changed_files.add(path)
                created_this_iteration.add(path)

        dangling = find_dangling_references(
            invocations=invocations,
            created_paths=created_this_iteration,
            outcomes=outcomes,
            source_root=self._config.source_root,
        )
        if not dangling or not outcomes:
            return outcomes

        self._observer.agent_dangling_references(
            iteration=state.iteration,
            references=[
                f"{ref.source_file} -> {ref.target_path} ({ref.reference_kind})"
                for ref in dangling
            ],
        )
        last = outcomes[-1]
        annotated = last.model_copy(
            update={"content": last.content + format_dangling_warning(dangling)}
        )
        return [*outcomes[:-1], annotated]

    async def _verification_summary(self, state: RunState) -> str:
        result = await self._verification_runner.run()
        change_summary = format_change_summary(state.changed_files)
        return f"\n\n---\n{change_summary}{format_summary(result)}"


def _dry_run_outcome(invocation: ToolInvocation) -> ToolOutcome:
    payload = json.dumps(invocation_payload(invocation), indent=2)
    return ToolOutcome(
        tool_use_id=invocation.id,
        content=f"[DRY RUN] Would execute: {invocation.name} with input: {payload}",
    )
