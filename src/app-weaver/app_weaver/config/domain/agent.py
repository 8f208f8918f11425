"""Agent loop configuration model."""

from pydantic import BaseModel, Field


class AgentConfig(BaseModel, frozen=True):
    max_agent_turns: int = Field(default=20, ge=1)
    max_tokens_per_request: int = Field(default=200_000, ge=1)
    force_read_before_write: bool = False
    dry_run: bool = False
    source_root: str = "src"
    strict_server_tool_pairing: bool = False
