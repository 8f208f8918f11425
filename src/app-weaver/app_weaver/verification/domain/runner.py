"""VerificationRunner Protocol — structural interface for project-level checks."""

from typing import Protocol

from app_weaver.verification.domain.result import VerifyResult


class VerificationRunner(Protocol):
    async def run(self) -> VerifyResult: ...
