"""Tests for parsing tool_use blocks into typed invocations."""

from app_weaver.conversation.domain.blocks import ToolUseBlock
from app_weaver.tools.domain.invocation import (
    GenericInvocation,
    ReplaceLinesInvocation,
    SearchFilesInvocation,
    ViewFileInvocation,
    WriteFileInvocation,
    invocation_from_block,
    invocation_payload,
    is_mutating,
    target_path,
)


def _block(name: str, **tool_input: object) -> ToolUseBlock:
    return ToolUseBlock(id="t1", name=name, input=dict(tool_input))


class TestInvocationFromBlock:
    """Known tools parse into their own variant; everything else is generic."""

    def test_view_file(self) -> None:
        invocation = invocation_from_block(_block("view_file", path="index.html"))

        assert isinstance(invocation, ViewFileInvocation)
        assert invocation.input.path == "index.html"
        assert invocation.input.encoding == "utf-8"

    def test_search_files_defaults(self) -> None:
        invocation = invocation_from_block(_block("search_files", query="TODO"))

        assert isinstance(invocation, SearchFilesInvocation)
        assert invocation.input.glob == "**/*"
        assert invocation.input.max_results == 100

    def test_write_file(self) -> None:
        invocation = invocation_from_block(
            _block("write_file", path="app.js", content="console.log(1)")
        )

        assert isinstance(invocation, WriteFileInvocation)
        assert invocation.input.overwrite is False

    def test_replace_lines_with_locator(self) -> None:
        invocation = invocation_from_block(
            _block(
                "replace_lines",
                path="app.js",
                locator={"start_line": 2, "end_line": 3, "needle": "foo"},
                replacement="bar",
            )
        )

        assert isinstance(invocation, ReplaceLinesInvocation)
        assert invocation.input.locator.needle == "foo"

    def test_extra_input_fields_are_ignored(self) -> None:
        invocation = invocation_from_block(
            _block(
                "replace_lines",
                path="app.js",
                locator={"start_line": 1, "end_line": 1},
                replacement="x",
                _enforcer_warning="no needle",
            )
        )

        assert isinstance(invocation, ReplaceLinesInvocation)

    def test_unknown_tool_is_generic_without_error(self) -> None:
        invocation = invocation_from_block(_block("deploy", target="prod"))

        assert isinstance(invocation, GenericInvocation)
        assert invocation.validation_error is None
        assert invocation.input == {"target": "prod"}

    def test_invalid_input_is_generic_with_error(self) -> None:
        invocation = invocation_from_block(_block("write_file", path="app.js"))

        assert isinstance(invocation, GenericInvocation)
        assert invocation.name == "write_file"
        assert invocation.validation_error is not None
        assert "content" in invocation.validation_error

    def test_invalid_locator_reports_nested_location(self) -> None:
        invocation = invocation_from_block(
            _block(
                "replace_lines",
                path="a.ts",
                locator={"start_line": 0, "end_line": 1},
                replacement="",
            )
        )

        assert isinstance(invocation, GenericInvocation)
        assert invocation.validation_error is not None
        assert "locator.start_line" in invocation.validation_error


class TestInvocationHelpers:
    def test_mutating_tools(self) -> None:
        write = invocation_from_block(_block("write_file", path="a", content=""))
        read = invocation_from_block(_block("view_file", path="a"))

        assert is_mutating(write) is True
        assert is_mutating(read) is False

    def test_generic_write_is_not_mutating(self) -> None:
        broken = invocation_from_block(_block("write_file", path="a"))

        assert is_mutating(broken) is False

    def test_target_path(self) -> None:
        assert target_path(invocation_from_block(_block("view_file", path="a"))) == "a"
        assert target_path(invocation_from_block(_block("search_files", query="q"))) is None

    def test_payload_drops_unset_optionals(self) -> None:
        invocation = invocation_from_block(_block("view_file", path="a"))

        assert invocation_payload(invocation) == {"path": "a", "encoding": "utf-8"}

    def test_payload_of_generic_is_raw_input(self) -> None:
        invocation = invocation_from_block(_block("deploy", target="prod"))

        assert invocation_payload(invocation) == {"target": "prod"}
