"""Tests for ConversationStore."""

from app_weaver.conversation.domain.blocks import TextBlock
from app_weaver.conversation.domain.store import ConversationStore
from app_weaver.conversation.domain.turn import Turn


def _turn(role: str, text: str) -> Turn:
    return Turn.model_validate({"role": role, "content": [{"type": "text", "text": text}]})


class TestConversationStore:
    def test_starts_empty(self) -> None:
        store = ConversationStore()

        assert len(store) == 0
        assert store.history() == ()

    def test_append_preserves_order(self) -> None:
        store = ConversationStore()
        store.append(_turn("user", "a"))
        store.append(_turn("assistant", "b"))

        assert [t.role for t in store.history()] == ["user", "assistant"]

    def test_history_is_a_snapshot(self) -> None:
        store = ConversationStore()
        store.append(_turn("user", "a"))
        snapshot = store.history()

        store.append(_turn("assistant", "b"))

        assert len(snapshot) == 1
        assert len(store) == 2

    def test_load_replaces_history(self) -> None:
        store = ConversationStore([_turn("user", "old")])

        store.load([_turn("user", "new"), _turn("assistant", "reply")])

        assert len(store) == 2
        first = store.history()[0].content[0]
        assert isinstance(first, TextBlock)
        assert first.text == "new"

    def test_reset_clears_history(self) -> None:
        store = ConversationStore([_turn("user", "a")])

        store.reset()

        assert len(store) == 0
