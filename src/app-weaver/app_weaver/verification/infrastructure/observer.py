"""Structlog implementation of the VerificationObserver port."""

import structlog


class StructlogVerificationObserver:
    """Delegates verification domain events to structlog.

    Satisfies the VerificationObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def verification_step_completed(
        self, name: str, ok: bool, duration_ms: int
    ) -> None:
        if ok:
            self._log.info(
                "verification.step_completed", name=name, duration_ms=duration_ms
            )
        else:
            self._log.warning(
                "verification.step_failed", name=name, duration_ms=duration_ms
            )

    def verification_completed(
        self, passed: bool, num_steps: int, duration_ms: int
    ) -> None:
        self._log.info(
            "verification.completed",
            passed=passed,
            num_steps=num_steps,
            duration_ms=duration_ms,
        )
