"""Structlog implementation of the ConversationObserver port."""

import structlog


class StructlogConversationObserver:
    """Delegates conversation domain events to structlog.

    Satisfies the ConversationObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def server_tool_result_missing(
        self,
        turn_idx: int,
        tool_use_id: str,
        tool_name: str,
        block_types: list[str],
    ) -> None:
        self._log.warning(
            "conversation.server_tool_result_missing",
            turn_idx=turn_idx,
            tool_use_id=tool_use_id,
            tool_name=tool_name,
            block_types=block_types,
        )
