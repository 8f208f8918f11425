"""Structlog implementation of the ModelObserver port."""

import structlog


class StructlogModelObserver:
    """Delegates model domain events to structlog.

    Satisfies the ModelObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def model_call_started(self, model: str, num_turns: int) -> None:
        self._log.debug("model.call_started", model=model, num_turns=num_turns)

    def model_call_completed(
        self,
        model: str,
        duration_ms: int,
        input_tokens: int,
        output_tokens: int,
        stop_reason: str | None,
    ) -> None:
        self._log.info(
            "model.call_completed",
            model=model,
            duration_ms=duration_ms,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            stop_reason=stop_reason,
        )

    def model_call_failed(self, model: str, reason: str) -> None:
        self._log.error("model.call_failed", model=model, reason=reason)
