"""Structural invariant checks run over the full history before every model call."""

from collections.abc import Sequence

from app_weaver.conversation.domain.blocks import (
    ServerToolResultBlock,
    ServerToolUseBlock,
)
from app_weaver.conversation.domain.errors import ConversationInvariantError
from app_weaver.conversation.domain.observer import ConversationObserver
from app_weaver.conversation.domain.turn import Turn


def validate_conversation_history(
    turns: Sequence[Turn],
    observer: ConversationObserver,
    strict_server_tool_pairing: bool = False,
) -> None:
    """Fail fast on any turn the model API would reject.

    Checks, in order, for every turn:
    - content must be a list of blocks;
    - content must be non-empty, except on the final turn when it is an
      assistant turn (a response still being finalized);
    - every server_tool_use in an assistant turn should have a matching result
      in the same turn. Mismatches are reported to the observer and only raise
      when strict_server_tool_pairing is set.

    Raises:
        ConversationInvariantError: on the first violation found.
    """
    last_idx = len(turns) - 1

    for idx, turn in enumerate(turns):
        if not isinstance(turn.content, list):
            raise ConversationInvariantError(
                turn_idx=idx,
                reason=(
                    f"(role: {turn.role}) has invalid content format: expected a list"
                    f" of content blocks, got {type(turn.content).__name__}"
                ),
            )

        if not turn.content:
            is_final_assistant = idx == last_idx and turn.role == "assistant"
            if not is_final_assistant:
                raise ConversationInvariantError(
                    turn_idx=idx,
                    reason=(
                        f"(role: {turn.role}) has an empty content list; only the"
                        " final assistant turn may be empty"
                    ),
                )

        if turn.role == "assistant":
            _check_server_tool_pairing(
                idx=idx,
                turn=turn,
                observer=observer,
                strict=strict_server_tool_pairing,
            )


def _check_server_tool_pairing(
    idx: int, turn: Turn, observer: ConversationObserver, strict: bool
) -> None:
    result_ids = {
        block.tool_use_id
        for block in turn.content
        if isinstance(block, ServerToolResultBlock)
    }
    for block in turn.content:
        if not isinstance(block, ServerToolUseBlock) or block.id in result_ids:
            continue

        observer.server_tool_result_missing(
            turn_idx=idx,
            tool_use_id=block.id,
            tool_name=block.name,
            block_types=[b.type for b in turn.content],
        )
        if strict:
            raise ConversationInvariantError(
                turn_idx=idx,
                reason=(
                    f"has server_tool_use '{block.name}' ({block.id}) without a"
                    " corresponding server tool result"
                ),
            )
