"""Conversion between conversation turns and chat-completion messages."""

import json
from typing import Any

from app_weaver.conversation.domain.blocks import (
    TextBlock,
    ToolResultBlock,
    ToolUseBlock,
)
from app_weaver.conversation.domain.turn import Turn
from app_weaver.tools.domain.catalog import ToolDefinition


def to_chat_messages(history: list[Turn], system_prompt: str) -> list[dict[str, Any]]:
    """Render the conversation as chat-completion messages.

    Tool results become `tool` role messages placed before any text of the same
    turn. Server-executed tool blocks are not replayed; the provider already
    holds their results.
    """
    messages: list[dict[str, Any]] = [{"role": "system", "content": system_prompt}]
    for turn in history:
        if turn.role == "assistant":
            messages.append(_assistant_message(turn))
        else:
            messages.extend(_user_messages(turn))
    return messages


def _assistant_message(turn: Turn) -> dict[str, Any]:
    text = "\n".join(b.text for b in turn.content if isinstance(b, TextBlock))
    tool_calls = [
        {
            "id": block.id,
            "type": "function",
            "function": {"name": block.name, "arguments": json.dumps(block.input)},
        }
        for block in turn.content
        if isinstance(block, ToolUseBlock)
    ]
    message: dict[str, Any] = {"role": "assistant", "content": text or None}
    if tool_calls:
        message["tool_calls"] = tool_calls
    return message


def _user_messages(turn: Turn) -> list[dict[str, Any]]:
    messages: list[dict[str, Any]] = [
        {
            "role": "tool",
            "tool_call_id": block.tool_use_id,
            "content": (
                f"Error: {block.content}"
                if _needs_error_prefix(block)
                else block.content
            ),
        }
        for block in turn.content
        if isinstance(block, ToolResultBlock)
    ]
    text = "\n".join(b.text for b in turn.content if isinstance(b, TextBlock))
    if text:
        messages.append({"role": "user", "content": text})
    return messages


def _needs_error_prefix(block: ToolResultBlock) -> bool:
    # Chat-completion tool messages have no error flag.
    return block.is_error and not block.content.startswith(("Error", "Execution error"))


def to_chat_tools(tools: list[ToolDefinition]) -> list[dict[str, Any]]:
    return [
        {
            "type": "function",
            "function": {
                "name": tool.name,
                "description": tool.description,
                "parameters": tool.input_schema,
            },
        }
        for tool in tools
    ]
