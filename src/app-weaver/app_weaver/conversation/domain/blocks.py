"""ContentBlock value objects — the typed units of turn content."""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field


class TextBlock(BaseModel, frozen=True):
    type: Literal["text"] = "text"
    text: str


class ToolUseBlock(BaseModel, frozen=True):
    """A client-side tool invocation requested by the model."""

    type: Literal["tool_use"] = "tool_use"
    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    input: dict[str, Any] = {}


class ToolResultBlock(BaseModel, frozen=True):
    """The outcome of one tool invocation, carried back on a user-role turn.

    metadata is kept for local bookkeeping only and is never sent to the model.
    """

    type: Literal["tool_result"] = "tool_result"
    tool_use_id: str = Field(min_length=1)
    content: str
    is_error: bool = False
    metadata: dict[str, Any] | None = None


class ServerToolUseBlock(BaseModel, frozen=True):
    """A tool the model provider executed server-side (e.g. web search)."""

    type: Literal["server_tool_use"] = "server_tool_use"
    id: str = Field(min_length=1)
    name: str
    input: dict[str, Any] = {}


class ServerToolResultBlock(BaseModel, frozen=True):
    type: Literal["web_search_tool_result"] = "web_search_tool_result"
    tool_use_id: str = Field(min_length=1)
    content: Any = None


type ContentBlock = Annotated[
    TextBlock
    | ToolUseBlock
    | ToolResultBlock
    | ServerToolUseBlock
    | ServerToolResultBlock,
    Field(discriminator="type"),
]


def text_of(blocks: list[ContentBlock]) -> str:
    """Join the text of every TextBlock in blocks with newlines."""
    return "\n".join(block.text for block in blocks if isinstance(block, TextBlock))
