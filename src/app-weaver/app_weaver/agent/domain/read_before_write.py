"""Read-before-write enforcement over the content blocks of one assistant turn."""

import uuid
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from app_weaver.conversation.domain.blocks import ContentBlock, ToolUseBlock
from app_weaver.tools.domain.invocation import (
    REPLACE_LINES,
    VIEW_FILE,
    ToolInvocation,
    invocation_from_block,
)

ENFORCER_WARNING_FIELD = "_enforcer_warning"
_ENFORCER_WARNING = "No `needle` provided; injected a read to reduce risk."


@dataclass(frozen=True)
class EnforcedTurn:
    """Blocks to store and the invocations to execute, in stored order."""

    blocks: list[ContentBlock]
    invocations: list[ToolInvocation]


def new_enforcer_id() -> str:
    return f"enforcer-view-{uuid.uuid4().hex[:12]}"


def enforce_read_before_write(
    blocks: list[ContentBlock],
    enabled: bool,
    id_factory: Callable[[], str] = new_enforcer_id,
) -> EnforcedTurn:
    """Guarantee every edit in the turn is preceded by a read of the same path.

    When enabled, a synthetic view_file call is inserted directly before any
    replace_lines call whose path was not read earlier in the same turn, and an
    edit without a needle is annotated with a soft warning field. Creation and
    every other block pass through unchanged. The transform keeps no state
    between turns.
    """
    out: list[ContentBlock] = []
    read_paths: set[str] = set()

    for block in blocks:
        if not isinstance(block, ToolUseBlock):
            out.append(block)
            continue

        path = _path_of(block.input)
        if block.name == VIEW_FILE:
            if path is not None:
                read_paths.add(path)
        elif block.name == REPLACE_LINES and enabled:
            if path is not None and path not in read_paths:
                out.append(
                    ToolUseBlock(id=id_factory(), name=VIEW_FILE, input={"path": path})
                )
                read_paths.add(path)
            if not _has_needle(block.input):
                warned = {**block.input, ENFORCER_WARNING_FIELD: _ENFORCER_WARNING}
                block = block.model_copy(update={"input": warned})
        out.append(block)

    invocations = [
        invocation_from_block(block) for block in out if isinstance(block, ToolUseBlock)
    ]
    return EnforcedTurn(blocks=out, invocations=invocations)


def _path_of(tool_input: dict[str, Any]) -> str | None:
    path = tool_input.get("path")
    if isinstance(path, str) and path:
        return path
    return None


def _has_needle(tool_input: dict[str, Any]) -> bool:
    locator = tool_input.get("locator")
    return isinstance(locator, dict) and bool(locator.get("needle"))
