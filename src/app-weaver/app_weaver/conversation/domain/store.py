"""ConversationStore — the ordered, append-only sequence of turns."""

from collections.abc import Iterable

from app_weaver.conversation.domain.turn import Turn


class ConversationStore:
    """Owns the conversation history of one orchestrator instance.

    Turns are appended only; history() returns an immutable snapshot.
    """

    def __init__(self, turns: Iterable[Turn] = ()) -> None:
        self._turns: list[Turn] = list(turns)

    def append(self, turn: Turn) -> None:
        self._turns.append(turn)

    def load(self, turns: Iterable[Turn]) -> None:
        """Replace the history with a previously saved one."""
        self._turns = list(turns)

    def reset(self) -> None:
        self._turns = []

    def history(self) -> tuple[Turn, ...]:
        return tuple(self._turns)

    def __len__(self) -> int:
        return len(self._turns)
