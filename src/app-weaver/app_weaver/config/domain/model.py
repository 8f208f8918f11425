"""Model configuration model."""

from pydantic import BaseModel, Field


class ModelConfig(BaseModel, frozen=True):
    model: str = Field(min_length=1)
    max_tokens: int = Field(default=8192, ge=1)
    temperature: float = Field(default=0.2, ge=0.0, le=1.0)
    api_base: str | None = None
