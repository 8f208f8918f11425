"""ModelClient Protocol — structural interface for the language model."""

from collections.abc import Callable
from typing import Protocol

from app_weaver.config.domain.web_search import WebSearchConfig
from app_weaver.conversation.domain.turn import Turn
from app_weaver.model.domain.response import ModelResponse, TextDelta
from app_weaver.tools.domain.catalog import ToolDefinition

type DeltaHandler = Callable[[TextDelta], None]


class ModelClient(Protocol):
    """Sends the conversation to the model and returns its completed turn.

    on_delta is invoked zero or more times with text fragments before the call
    resolves.
    """

    async def send_message(
        self,
        history: list[Turn],
        system_prompt: str,
        tools: list[ToolDefinition],
        on_delta: DeltaHandler,
        web_search: WebSearchConfig | None = None,
    ) -> ModelResponse: ...
