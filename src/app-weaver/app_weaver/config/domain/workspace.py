"""Workspace configuration model."""

from pathlib import Path

from pydantic import BaseModel, Field


class WorkspaceConfig(BaseModel, frozen=True):
    path: Path
    max_concurrent_tools: int = Field(default=4, ge=1)
    max_file_size: int = Field(default=1_048_576, ge=1)
