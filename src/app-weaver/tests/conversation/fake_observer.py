"""FakeConversationObserver — records conversation domain events for assertion in tests."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ServerToolResultMissingEvent:
    turn_idx: int
    tool_use_id: str
    tool_name: str
    block_types: list[str]


class FakeConversationObserver:
    def __init__(self) -> None:
        self.missing_results: list[ServerToolResultMissingEvent] = []

    def server_tool_result_missing(
        self,
        turn_idx: int,
        tool_use_id: str,
        tool_name: str,
        block_types: list[str],
    ) -> None:
        self.missing_results.append(
            ServerToolResultMissingEvent(
                turn_idx=turn_idx,
                tool_use_id=tool_use_id,
                tool_name=tool_name,
                block_types=block_types,
            )
        )
