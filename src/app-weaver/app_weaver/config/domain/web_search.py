"""Web search configuration model."""

from pydantic import BaseModel, Field


class WebSearchConfig(BaseModel, frozen=True):
    enabled: bool = False
    max_uses: int | None = Field(default=None, ge=1)
    allowed_domains: list[str] = []
    blocked_domains: list[str] = []
