"""ToolOutcome value object — the result of executing one tool invocation."""

from typing import Literal

from pydantic import BaseModel, Field

from app_weaver.conversation.domain.blocks import ToolResultBlock

type FileOperation = Literal["create", "edit", "read"]


class OutcomeMetadata(BaseModel, frozen=True):
    """Structured metadata attached by file tools."""

    path: str | None = None
    operation: FileOperation | None = None
    sha256: str | None = None
    line_count: int | None = None


class ToolOutcome(BaseModel, frozen=True):
    tool_use_id: str = Field(min_length=1)
    content: str
    is_error: bool = False
    metadata: OutcomeMetadata | None = None

    def touched_path(self) -> str | None:
        """Path written by a successful create/edit, else None."""
        if self.is_error or self.metadata is None:
            return None
        if self.metadata.operation == "read":
            return None
        return self.metadata.path

    def to_block(self) -> ToolResultBlock:
        return ToolResultBlock(
            tool_use_id=self.tool_use_id,
            content=self.content,
            is_error=self.is_error,
            metadata=(
                self.metadata.model_dump(exclude_none=True)
                if self.metadata is not None
                else None
            ),
        )
