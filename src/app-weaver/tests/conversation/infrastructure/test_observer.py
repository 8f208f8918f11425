"""Tests for StructlogConversationObserver."""

from structlog.testing import capture_logs

from app_weaver.conversation.infrastructure.observer import (
    StructlogConversationObserver,
)


def test_server_tool_result_missing_logs_warning() -> None:
    observer = StructlogConversationObserver()

    with capture_logs() as logs:
        observer.server_tool_result_missing(
            turn_idx=3,
            tool_use_id="srv_1",
            tool_name="web_search",
            block_types=["server_tool_use"],
        )

    assert logs == [
        {
            "event": "conversation.server_tool_result_missing",
            "log_level": "warning",
            "turn_idx": 3,
            "tool_use_id": "srv_1",
            "tool_name": "web_search",
            "block_types": ["server_tool_use"],
        }
    ]
