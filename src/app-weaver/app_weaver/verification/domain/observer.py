"""VerificationObserver port — domain events emitted while verifying a workspace."""

from typing import Protocol


class VerificationObserver(Protocol):
    def verification_step_completed(
        self, name: str, ok: bool, duration_ms: int
    ) -> None: ...

    def verification_completed(
        self, passed: bool, num_steps: int, duration_ms: int
    ) -> None: ...
