"""Tool catalog — the tool schema declared to the model."""

from typing import Any

from pydantic import BaseModel

from app_weaver.tools.domain.invocation import (
    REPLACE_LINES,
    SEARCH_FILES,
    VIEW_FILE,
    WRITE_FILE,
    ReplaceLinesInput,
    SearchFilesInput,
    ViewFileInput,
    WriteFileInput,
)


class ToolDefinition(BaseModel, frozen=True):
    name: str
    description: str
    input_schema: dict[str, Any]


def _definition(name: str, description: str, model: type[BaseModel]) -> ToolDefinition:
    schema = model.model_json_schema()
    schema.pop("title", None)
    schema["additionalProperties"] = False
    return ToolDefinition(name=name, description=description, input_schema=schema)


def get_tool_definitions() -> list[ToolDefinition]:
    """Return the definitions of every tool the workspace pool can execute."""
    return [
        _definition(
            name=VIEW_FILE,
            description=(
                "Read a file to understand current code before changing it."
                " Lines are returned numbered."
            ),
            model=ViewFileInput,
        ),
        _definition(
            name=SEARCH_FILES,
            description="Search code for patterns to understand usage and dependencies.",
            model=SearchFilesInput,
        ),
        _definition(
            name=WRITE_FILE,
            description=(
                "Create a NEW file with the provided content. Fails if the file"
                " exists unless overwrite=true."
            ),
            model=WriteFileInput,
        ),
        _definition(
            name=REPLACE_LINES,
            description=(
                "Targeted edits in EXISTING files. Replaces the lines between"
                " start_line and end_line. Prefer this over rewriting whole files."
            ),
            model=ReplaceLinesInput,
        ),
    ]
