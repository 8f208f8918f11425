"""ConversationObserver port — events emitted while checking history invariants."""

from typing import Protocol


class ConversationObserver(Protocol):
    def server_tool_result_missing(
        self,
        turn_idx: int,
        tool_use_id: str,
        tool_name: str,
        block_types: list[str],
    ) -> None: ...
