"""ModelObserver port — domain events emitted around model calls."""

from typing import Protocol


class ModelObserver(Protocol):
    def model_call_started(self, model: str, num_turns: int) -> None: ...

    def model_call_completed(
        self,
        model: str,
        duration_ms: int,
        input_tokens: int,
        output_tokens: int,
        stop_reason: str | None,
    ) -> None: ...

    def model_call_failed(self, model: str, reason: str) -> None: ...
