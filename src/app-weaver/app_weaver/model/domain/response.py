"""ModelResponse value objects — one completed model turn and its streamed deltas."""

from typing import Literal

from pydantic import BaseModel, Field

from app_weaver.conversation.domain.blocks import ContentBlock

type StopReason = Literal["end_turn", "tool_use", "max_tokens", "stop_sequence"]


class TokenUsage(BaseModel, frozen=True):
    input_tokens: int = Field(default=0, ge=0)
    output_tokens: int = Field(default=0, ge=0)


class TextDelta(BaseModel, frozen=True):
    """An incremental text fragment streamed before the response completes."""

    type: Literal["text"] = "text"
    content: str


class ModelResponse(BaseModel, frozen=True):
    content: list[ContentBlock]
    usage: TokenUsage
    stop_reason: StopReason | None = None
