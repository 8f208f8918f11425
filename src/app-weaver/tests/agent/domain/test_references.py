"""Tests for dangling-reference detection."""

from app_weaver.agent.domain.references import (
    DanglingReference,
    find_dangling_references,
    format_dangling_warning,
)
from app_weaver.conversation.domain.blocks import ToolUseBlock
from app_weaver.tools.domain.invocation import ToolInvocation, invocation_from_block
from app_weaver.tools.domain.outcome import ToolOutcome


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _write(tool_use_id: str, path: str, content: str) -> ToolInvocation:
    return invocation_from_block(
        ToolUseBlock(
            id=tool_use_id,
            name="write_file",
            input={"path": path, "content": content},
        )
    )


def _edit(tool_use_id: str, path: str, replacement: str) -> ToolInvocation:
    return invocation_from_block(
        ToolUseBlock(
            id=tool_use_id,
            name="replace_lines",
            input={
                "path": path,
                "locator": {"start_line": 1, "end_line": 1},
                "replacement": replacement,
            },
        )
    )


def _ok(*ids: str) -> list[ToolOutcome]:
    return [ToolOutcome(tool_use_id=i, content="ok") for i in ids]


def _find(
    invocations: list[ToolInvocation],
    created: set[str],
    outcomes: list[ToolOutcome] | None = None,
) -> list[DanglingReference]:
    return find_dangling_references(
        invocations=invocations,
        created_paths=created,
        outcomes=outcomes if outcomes is not None else _ok(*(i.id for i in invocations)),
    )


_HTML = """<!DOCTYPE html>
<html>
<head>
  <link rel="stylesheet" href="styles.css">
  <link rel="icon" href="favicon.ico">
  <script src="https://cdn.example.com/lib.js"></script>
</head>
<body><script type="module" src="./app.js"></script></body>
</html>
"""


# ---------------------------------------------------------------------------
# Markup
# ---------------------------------------------------------------------------


class TestMarkupReferences:
    def test_missing_script_and_stylesheet(self) -> None:
        refs = _find([_write("t1", "index.html", _HTML)], created={"index.html"})

        assert refs == [
            DanglingReference("index.html", "script", "./app.js"),
            DanglingReference("index.html", "link", "styles.css"),
        ]

    def test_created_in_same_batch_resolves(self) -> None:
        invocations = [
            _write("t1", "index.html", _HTML),
            _write("t2", "app.js", ""),
            _write("t3", "styles.css", ""),
        ]

        refs = _find(invocations, created={"index.html", "app.js", "styles.css"})

        assert refs == []

    def test_non_stylesheet_links_are_ignored(self) -> None:
        html = '<link rel="icon" href="favicon.ico">'

        assert _find([_write("t1", "index.html", html)], created=set()) == []

    def test_external_targets_are_ignored(self) -> None:
        html = (
            '<script src="https://cdn.example.com/a.js"></script>'
            '<script src="//cdn.example.com/b.js"></script>'
        )

        assert _find([_write("t1", "index.html", html)], created=set()) == []

    def test_leading_slash_matches(self) -> None:
        html = '<script src="/main.js"></script>'

        refs = _find([_write("t1", "index.html", html)], created={"main.js"})

        assert refs == []


# ---------------------------------------------------------------------------
# Modules
# ---------------------------------------------------------------------------


class TestModuleReferences:
    def test_relative_import_without_extension(self) -> None:
        code = "import { Button } from './components/Button';\n"

        refs = _find(
            [_write("t1", "src/App.tsx", code)],
            created={"src/App.tsx", "src/components/Button.tsx"},
        )

        assert refs == []

    def test_missing_import_reported_once(self) -> None:
        code = (
            "import a from './util';\n"
            "export { b } from './util';\n"
            "import React from 'react';\n"
        )

        refs = _find([_write("t1", "src/main.ts", code)], created={"src/main.ts"})

        assert refs == [DanglingReference("src/main.ts", "import", "./util")]

    def test_index_file_resolves_directory_import(self) -> None:
        code = "import routes from './routes';"

        refs = _find(
            [_write("t1", "src/main.js", code)],
            created={"src/main.js", "src/routes/index.js"},
        )

        assert refs == []

    def test_dynamic_import_and_require(self) -> None:
        code = "const a = require('./a');\nconst b = await import('./b');\n"

        refs = _find([_write("t1", "main.js", code)], created={"main.js"})

        assert [ref.target_path for ref in refs] == ["./a", "./b"]

    def test_side_effect_import(self) -> None:
        code = "import './styles.css';\n"

        refs = _find([_write("t1", "src/main.js", code)], created={"src/main.js"})

        assert [ref.target_path for ref in refs] == ["./styles.css"]

    def test_replace_lines_scans_replacement(self) -> None:
        refs = _find(
            [_edit("t1", "src/App.jsx", "import Nav from './Nav';")],
            created=set(),
        )

        assert refs == [DanglingReference("src/App.jsx", "import", "./Nav")]

    def test_parent_directory_import(self) -> None:
        code = "import { api } from '../lib/api';"

        refs = _find(
            [_write("t1", "src/pages/Home.tsx", code)],
            created={"src/lib/api.ts"},
        )

        assert refs == []


class TestBatchExamples:
    def test_script_missing_next_to_stylesheet(self) -> None:
        html = '<script src="./app.js"></script>'
        invocations = [
            _write("t1", "index.html", html),
            _write("t2", "styles.css", "body {}"),
        ]

        refs = _find(invocations, created={"index.html", "styles.css"})

        assert refs == [DanglingReference("index.html", "script", "./app.js")]

    def test_script_written_in_same_batch(self) -> None:
        html = '<script src="./app.js"></script>'
        invocations = [
            _write("t1", "index.html", html),
            _write("t2", "styles.css", "body {}"),
            _write("t3", "app.js", ""),
        ]

        refs = _find(invocations, created={"index.html", "styles.css", "app.js"})

        assert refs == []

    def test_import_resolves_through_source_root(self) -> None:
        code = "import Button from './Button';\nimport M from './Missing';\n"

        refs = _find(
            [_write("t1", "App.tsx", code), _write("t2", "src/Button.tsx", "")],
            created={"App.tsx", "src/Button.tsx"},
        )

        assert refs == [DanglingReference("App.tsx", "import", "./Missing")]


# ---------------------------------------------------------------------------
# Outcomes
# ---------------------------------------------------------------------------


class TestOutcomeFiltering:
    def test_failed_writes_are_not_scanned(self) -> None:
        failed = [ToolOutcome(tool_use_id="t1", content="Error: x", is_error=True)]

        refs = _find(
            [_write("t1", "index.html", _HTML)], created=set(), outcomes=failed
        )

        assert refs == []


class TestFormatWarning:
    def test_renders_every_reference(self) -> None:
        warning = format_dangling_warning(
            [
                DanglingReference("index.html", "script", "app.js"),
                DanglingReference("index.html", "link", "styles.css"),
                DanglingReference("src/main.ts", "import", "./util"),
            ]
        )

        assert warning.startswith("\n\n⚠️ WARNING: Missing file references detected:\n")
        assert (
            '  - index.html references <script src="app.js">'
            " but app.js was not created"
        ) in warning
        assert '<link href="styles.css">' in warning
        assert 'import "./util"' in warning
        assert warning.endswith(
            "You MUST create these files in your next response to make the app"
            " functional."
        )
