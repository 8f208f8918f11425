"""Streaming pacing configuration model."""

from pydantic import BaseModel, Field


class StreamingConfig(BaseModel, frozen=True):
    reasoning_chunk_size: int = Field(default=2, ge=1)
    reasoning_delay_ms: int = Field(default=16, ge=0)
    thinking_settle_ms: int = Field(default=300, ge=0)
    code_writing_delay_ms: int = Field(default=200, ge=0)
    file_operation_delay_ms: int = Field(default=100, ge=0)
