"""ToolInvocation tagged union — one variant per known tool, discriminated by name."""

from typing import Any, Literal

from pydantic import BaseModel, Field, ValidationError

from app_weaver.conversation.domain.blocks import ToolUseBlock

VIEW_FILE = "view_file"
SEARCH_FILES = "search_files"
WRITE_FILE = "write_file"
REPLACE_LINES = "replace_lines"


class ViewFileInput(BaseModel, frozen=True):
    path: str = Field(min_length=1, description="Relative path to a file.")
    max_bytes: int | None = Field(
        default=None,
        ge=1,
        le=1_048_576,
        description="Maximum bytes to read (default: 1MB)",
    )
    encoding: str = Field(default="utf-8", description="File encoding")


class SearchFilesInput(BaseModel, frozen=True):
    query: str = Field(min_length=1, description="Search pattern or text to find")
    glob: str = Field(default="**/*", description="File pattern to search in")
    max_results: int = Field(
        default=100, ge=1, le=1000, description="Maximum number of results"
    )
    regex: bool = Field(default=False, description="Treat query as a regex pattern")
    context_lines: int = Field(
        default=0, ge=0, description="Lines of context before/after each match"
    )


class WriteFileInput(BaseModel, frozen=True):
    path: str = Field(min_length=1, description="Relative path for the new file")
    content: str = Field(description="Complete content of the file")
    overwrite: bool = Field(default=False, description="Allow overwriting a file")
    create_dirs: bool = Field(
        default=True, description="Create parent directories if needed"
    )


class LineLocator(BaseModel, frozen=True):
    start_line: int = Field(ge=1, description="Starting line number (1-indexed)")
    end_line: int = Field(ge=1, description="Ending line number (inclusive)")
    needle: str | None = Field(
        default=None,
        description="Optional exact text to verify you are editing the intended block",
    )


class ReplaceLinesInput(BaseModel, frozen=True):
    path: str = Field(min_length=1, description="Path to the file to edit")
    locator: LineLocator
    replacement: str = Field(description="New content for the specified lines")
    verify_after: bool = Field(
        default=True, description="Verify the edit was applied correctly"
    )


class ViewFileInvocation(BaseModel, frozen=True):
    id: str
    name: Literal["view_file"] = VIEW_FILE
    input: ViewFileInput


class SearchFilesInvocation(BaseModel, frozen=True):
    id: str
    name: Literal["search_files"] = SEARCH_FILES
    input: SearchFilesInput


class WriteFileInvocation(BaseModel, frozen=True):
    id: str
    name: Literal["write_file"] = WRITE_FILE
    input: WriteFileInput


class ReplaceLinesInvocation(BaseModel, frozen=True):
    id: str
    name: Literal["replace_lines"] = REPLACE_LINES
    input: ReplaceLinesInput


class GenericInvocation(BaseModel, frozen=True):
    """An invocation of an unknown tool, or of a known tool with invalid input.

    validation_error is set in the latter case so the pool can report it.
    """

    id: str
    name: str
    input: dict[str, Any]
    validation_error: str | None = None


type ToolInvocation = (
    ViewFileInvocation
    | SearchFilesInvocation
    | WriteFileInvocation
    | ReplaceLinesInvocation
    | GenericInvocation
)

type MutatingInvocation = WriteFileInvocation | ReplaceLinesInvocation

_KNOWN: dict[str, type[BaseModel]] = {
    VIEW_FILE: ViewFileInvocation,
    SEARCH_FILES: SearchFilesInvocation,
    WRITE_FILE: WriteFileInvocation,
    REPLACE_LINES: ReplaceLinesInvocation,
}


def invocation_from_block(block: ToolUseBlock) -> ToolInvocation:
    """Parse a tool_use block into its typed invocation variant."""
    model = _KNOWN.get(block.name)
    if model is None:
        return GenericInvocation(id=block.id, name=block.name, input=dict(block.input))

    try:
        invocation: ToolInvocation = model.model_validate(  # type: ignore[assignment]
            {"id": block.id, "name": block.name, "input": block.input}
        )
    except ValidationError as exc:
        return GenericInvocation(
            id=block.id,
            name=block.name,
            input=dict(block.input),
            validation_error=_summarize(exc),
        )
    return invocation


def invocation_payload(invocation: ToolInvocation) -> dict[str, Any]:
    """Return the invocation input as a plain dict."""
    if isinstance(invocation, GenericInvocation):
        return dict(invocation.input)
    return invocation.input.model_dump(exclude_none=True)


def is_mutating(invocation: ToolInvocation) -> bool:
    return isinstance(invocation, WriteFileInvocation | ReplaceLinesInvocation)


def target_path(invocation: ToolInvocation) -> str | None:
    """Return the file path a file tool operates on, or None."""
    match invocation:
        case ViewFileInvocation() | WriteFileInvocation() | ReplaceLinesInvocation():
            return invocation.input.path
        case _:
            return None


def _summarize(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(p) for p in error["loc"] if p != "input")
        parts.append(f"{location}: {error['msg']}" if location else error["msg"])
    return ", ".join(parts)
