"""LiteLLMModelClient — model client implementation using LiteLLM streaming completions."""

import json
import time
from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from typing import Any

import litellm

from app_weaver.config.domain.model import ModelConfig
from app_weaver.config.domain.web_search import WebSearchConfig
from app_weaver.conversation.domain.blocks import ContentBlock, TextBlock, ToolUseBlock
from app_weaver.conversation.domain.turn import Turn
from app_weaver.model.domain.client import DeltaHandler
from app_weaver.model.domain.observer import ModelObserver
from app_weaver.model.domain.response import (
    ModelResponse,
    StopReason,
    TextDelta,
    TokenUsage,
)
from app_weaver.model.infrastructure.errors import ModelInvocationError
from app_weaver.model.infrastructure.messages import to_chat_messages, to_chat_tools
from app_weaver.tools.domain.catalog import ToolDefinition

_FINISH_REASONS: dict[str, StopReason] = {
    "stop": "end_turn",
    "tool_calls": "tool_use",
    "function_call": "tool_use",
    "length": "max_tokens",
}


@dataclass
class _PendingToolCall:
    """Accumulates one tool call whose id, name and arguments arrive in fragments."""

    id: str = ""
    name: str = ""
    arguments: list[str] = field(default_factory=list)


class LiteLLMModelClient:
    """Model client that streams chat completions through LiteLLM.

    Satisfies the ModelClient protocol structurally. Holds no conversation
    state; every call renders the full history it is given.
    """

    def __init__(self, config: ModelConfig, observer: ModelObserver) -> None:
        self._config = config
        self._observer = observer
        litellm.suppress_debug_info = True

    async def send_message(
        self,
        history: list[Turn],
        system_prompt: str,
        tools: list[ToolDefinition],
        on_delta: DeltaHandler,
        web_search: WebSearchConfig | None = None,
    ) -> ModelResponse:
        """Stream one completion and return the assembled response.

        Raises:
            ModelInvocationError: if the LLM call fails or a streamed tool call
                carries arguments that are not a JSON object.
        """
        self._observer.model_call_started(
            model=self._config.model, num_turns=len(history)
        )

        request: dict[str, Any] = {
            "model": self._config.model,
            "messages": to_chat_messages(history=history, system_prompt=system_prompt),
            "max_tokens": self._config.max_tokens,
            "temperature": self._config.temperature,
            "stream": True,
            "stream_options": {"include_usage": True},
        }
        if tools:
            request["tools"] = to_chat_tools(tools)
        if self._config.api_base is not None:
            request["api_base"] = self._config.api_base
        if web_search is not None and web_search.enabled:
            request["web_search_options"] = {"search_context_size": "medium"}

        start = time.monotonic()
        try:
            response = await self._collect(request=request, on_delta=on_delta)
        except ModelInvocationError as exc:
            self._observer.model_call_failed(
                model=self._config.model,
                reason=str(exc).removeprefix("Failed to invoke model: "),
            )
            raise

        self._observer.model_call_completed(
            model=self._config.model,
            duration_ms=int((time.monotonic() - start) * 1000),
            input_tokens=response.usage.input_tokens,
            output_tokens=response.usage.output_tokens,
            stop_reason=response.stop_reason,
        )
        return response

    async def _collect(
        self, request: dict[str, Any], on_delta: DeltaHandler
    ) -> ModelResponse:
        text_parts: list[str] = []
        pending: dict[int, _PendingToolCall] = {}
        finish_reason: str | None = None
        usage = TokenUsage()

        async for chunk in _stream_chunks(request):
            chunk_usage = getattr(chunk, "usage", None)
            if chunk_usage is not None:
                usage = TokenUsage(
                    input_tokens=chunk_usage.prompt_tokens or 0,
                    output_tokens=chunk_usage.completion_tokens or 0,
                )

            if not chunk.choices:
                continue
            choice = chunk.choices[0]
            if choice.finish_reason is not None:
                finish_reason = choice.finish_reason

            delta = choice.delta
            if delta.content:
                text_parts.append(delta.content)
                on_delta(TextDelta(content=delta.content))

            for fragment in delta.tool_calls or []:
                call = pending.setdefault(fragment.index or 0, _PendingToolCall())
                if fragment.id:
                    call.id = fragment.id
                if fragment.function is not None:
                    if fragment.function.name:
                        call.name = fragment.function.name
                    if fragment.function.arguments:
                        call.arguments.append(fragment.function.arguments)

        content: list[ContentBlock] = []
        text = "".join(text_parts)
        if text:
            content.append(TextBlock(text=text))
        for index in sorted(pending):
            content.append(_tool_use_block(index=index, call=pending[index]))

        stop_reason = _FINISH_REASONS.get(finish_reason or "")
        if stop_reason is None and finish_reason is not None:
            stop_reason = "stop_sequence"
        return ModelResponse(content=content, usage=usage, stop_reason=stop_reason)


async def _stream_chunks(request: dict[str, Any]) -> AsyncIterator[Any]:
    """Yield completion chunks, wrapping provider failures as ModelInvocationError."""
    try:
        stream = await litellm.acompletion(**request)
        iterator = aiter(stream)
    except Exception as exc:
        raise ModelInvocationError(reason=str(exc), retriable=True) from exc

    while True:
        try:
            chunk = await anext(iterator)
        except StopAsyncIteration:
            return
        except Exception as exc:
            raise ModelInvocationError(reason=str(exc), retriable=True) from exc
        yield chunk


def _tool_use_block(index: int, call: _PendingToolCall) -> ToolUseBlock:
    if not call.name:
        raise ModelInvocationError(reason=f"tool call at index {index} has no name")
    raw_arguments = "".join(call.arguments) or "{}"
    try:
        arguments = json.loads(raw_arguments)
    except json.JSONDecodeError as exc:
        raise ModelInvocationError(
            reason=f"tool call '{call.name}' has malformed arguments: {exc}"
        ) from exc
    if not isinstance(arguments, dict):
        raise ModelInvocationError(
            reason=f"tool call '{call.name}' arguments must be a JSON object"
        )
    # Some providers omit ids on streamed tool calls.
    return ToolUseBlock(id=call.id or f"call_{index}", name=call.name, input=arguments)
