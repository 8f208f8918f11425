"""VerifyResult value objects — the outcome of project-level checks."""

from pydantic import BaseModel, Field


class VerifyStep(BaseModel, frozen=True):
    name: str
    ok: bool
    output: str | None = None
    duration_ms: int | None = Field(default=None, ge=0)


class VerifyResult(BaseModel, frozen=True):
    steps: list[VerifyStep]
    passed: bool
    total_duration_ms: int = Field(ge=0)
