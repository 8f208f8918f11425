"""Tests for validate_conversation_history."""

import pytest

from app_weaver.conversation.domain.blocks import (
    ServerToolResultBlock,
    ServerToolUseBlock,
    TextBlock,
)
from app_weaver.conversation.domain.errors import ConversationInvariantError
from app_weaver.conversation.domain.turn import Turn
from app_weaver.conversation.domain.validator import validate_conversation_history
from tests.conversation.fake_observer import FakeConversationObserver


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _user(text: str = "hi") -> Turn:
    return Turn(role="user", content=[TextBlock(text=text)])


def _assistant(text: str = "hello") -> Turn:
    return Turn(role="assistant", content=[TextBlock(text=text)])


# ---------------------------------------------------------------------------
# Empty content
# ---------------------------------------------------------------------------


class TestEmptyContent:
    """Only a trailing assistant turn may be empty."""

    def test_well_formed_history_passes(self) -> None:
        observer = FakeConversationObserver()
        validate_conversation_history([_user(), _assistant(), _user()], observer)

    def test_empty_user_turn_in_middle_raises(self) -> None:
        turns = [_user(), _assistant(), Turn(role="user", content=[]), _assistant()]

        with pytest.raises(ConversationInvariantError) as exc_info:
            validate_conversation_history(turns, FakeConversationObserver())

        assert exc_info.value.turn_idx == 2
        assert "empty content" in str(exc_info.value)

    def test_empty_final_user_turn_raises(self) -> None:
        turns = [_user(), _assistant(), Turn(role="user", content=[])]

        with pytest.raises(ConversationInvariantError) as exc_info:
            validate_conversation_history(turns, FakeConversationObserver())

        assert exc_info.value.turn_idx == 2

    def test_empty_final_assistant_turn_passes(self) -> None:
        turns = [_user(), _assistant(), Turn(role="assistant", content=[])]

        validate_conversation_history(turns, FakeConversationObserver())

    def test_empty_assistant_turn_not_final_raises(self) -> None:
        turns = [_user(), Turn(role="assistant", content=[]), _user()]

        with pytest.raises(ConversationInvariantError) as exc_info:
            validate_conversation_history(turns, FakeConversationObserver())

        assert exc_info.value.turn_idx == 1

    def test_error_message_is_prefixed(self) -> None:
        with pytest.raises(ConversationInvariantError) as exc_info:
            validate_conversation_history(
                [Turn(role="user", content=[]), _assistant()],
                FakeConversationObserver(),
            )

        assert str(exc_info.value).startswith(
            "Failed to validate conversation history: turn 0"
        )

    def test_empty_history_passes(self) -> None:
        validate_conversation_history([], FakeConversationObserver())


# ---------------------------------------------------------------------------
# Server tool pairing
# ---------------------------------------------------------------------------


class TestServerToolPairing:
    """server_tool_use without a matching result is reported, and fatal only when strict."""

    def _unpaired(self) -> list[Turn]:
        return [
            _user(),
            Turn(
                role="assistant",
                content=[
                    TextBlock(text="searching"),
                    ServerToolUseBlock(id="srv_1", name="web_search"),
                ],
            ),
        ]

    def test_paired_blocks_emit_nothing(self) -> None:
        observer = FakeConversationObserver()
        turns = [
            _user(),
            Turn(
                role="assistant",
                content=[
                    ServerToolUseBlock(id="srv_1", name="web_search"),
                    ServerToolResultBlock(tool_use_id="srv_1", content=[]),
                    TextBlock(text="found it"),
                ],
            ),
        ]

        validate_conversation_history(turns, observer, strict_server_tool_pairing=True)

        assert observer.missing_results == []

    def test_unpaired_is_reported_but_not_raised_by_default(self) -> None:
        observer = FakeConversationObserver()

        validate_conversation_history(self._unpaired(), observer)

        assert len(observer.missing_results) == 1
        event = observer.missing_results[0]
        assert event.turn_idx == 1
        assert event.tool_use_id == "srv_1"
        assert event.tool_name == "web_search"
        assert event.block_types == ["text", "server_tool_use"]

    def test_unpaired_raises_when_strict(self) -> None:
        observer = FakeConversationObserver()

        with pytest.raises(ConversationInvariantError) as exc_info:
            validate_conversation_history(
                self._unpaired(), observer, strict_server_tool_pairing=True
            )

        assert "web_search" in str(exc_info.value)
        assert len(observer.missing_results) == 1

    def test_result_in_another_turn_does_not_pair(self) -> None:
        observer = FakeConversationObserver()
        turns = [
            *self._unpaired(),
            _user(),
            Turn(
                role="assistant",
                content=[ServerToolResultBlock(tool_use_id="srv_1", content=[])],
            ),
        ]

        validate_conversation_history(turns, observer)

        assert [e.turn_idx for e in observer.missing_results] == [1]
