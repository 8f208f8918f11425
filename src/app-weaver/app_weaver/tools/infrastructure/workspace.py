"""Workspace — file tool semantics against a directory on disk."""

import hashlib
import re
from pathlib import Path

from app_weaver.tools.domain.invocation import (
    ReplaceLinesInput,
    SearchFilesInput,
    ViewFileInput,
    WriteFileInput,
)
from app_weaver.tools.domain.outcome import OutcomeMetadata
from app_weaver.tools.infrastructure.errors import WorkspacePathError

_DEFAULT_MAX_BYTES = 1_048_576

# Never searched: dependency, VCS and build output trees plus bundled artifacts.
SEARCH_IGNORED_DIRS = frozenset({"node_modules", ".git", "dist", "build"})
SEARCH_IGNORED_SUFFIXES = (".min.js", ".map")


class ToolFailure(Exception):
    """An expected tool failure, reported back to the model as an error outcome."""


class Workspace:
    """Executes file tools inside root. Every path is resolved relative to root.

    Methods return (content, metadata) on success and raise ToolFailure for
    conditions the model should see and react to.
    """

    def __init__(self, root: Path, max_file_size: int = _DEFAULT_MAX_BYTES) -> None:
        self._root = root.resolve()
        self._max_file_size = max_file_size

    @property
    def root(self) -> Path:
        return self._root

    def resolve(self, path: str) -> Path:
        """Resolve a workspace-relative path.

        Raises:
            WorkspacePathError: if the path escapes the workspace root.
        """
        candidate = (self._root / path.lstrip("/")).resolve()
        if candidate != self._root and self._root not in candidate.parents:
            raise WorkspacePathError(path=path)
        return candidate

    def view(self, params: ViewFileInput) -> tuple[str, OutcomeMetadata]:
        target = self.resolve(params.path)
        if not target.is_file():
            raise ToolFailure(f"File not found: {params.path}")

        max_bytes = params.max_bytes or _DEFAULT_MAX_BYTES
        raw = target.read_bytes()
        truncated = len(raw) > max_bytes
        try:
            text = raw[:max_bytes].decode(params.encoding, errors="replace")
        except LookupError as exc:
            raise ToolFailure(f"Unknown encoding '{params.encoding}'") from exc
        lines = text.splitlines()

        numbered = "\n".join(f"{i:>6}\t{line}" for i, line in enumerate(lines, start=1))
        if truncated:
            numbered += f"\n... (truncated at {max_bytes} bytes)"

        return numbered, OutcomeMetadata(
            path=params.path,
            operation="read",
            sha256=_sha256(raw),
            line_count=len(lines),
        )

    def write(self, params: WriteFileInput) -> tuple[str, OutcomeMetadata]:
        target = self.resolve(params.path)
        encoded = params.content.encode("utf-8")
        if len(encoded) > self._max_file_size:
            raise ToolFailure(
                f"Content for {params.path} is {len(encoded)} bytes,"
                f" exceeding the limit of {self._max_file_size} bytes"
            )

        existed = target.exists()
        if existed and not params.overwrite:
            raise ToolFailure(
                f"File already exists: {params.path}. Use replace_lines to edit it,"
                " or set overwrite=true to replace it."
            )
        if not target.parent.exists():
            if not params.create_dirs:
                raise ToolFailure(f"Parent directory does not exist for {params.path}")
            target.parent.mkdir(parents=True, exist_ok=True)

        target.write_bytes(encoded)
        line_count = len(params.content.splitlines())
        verb = "Overwrote" if existed else "Created"
        return f"{verb} {params.path} ({line_count} lines)", OutcomeMetadata(
            path=params.path,
            operation="edit" if existed else "create",
            sha256=_sha256(encoded),
            line_count=line_count,
        )

    def replace_lines(self, params: ReplaceLinesInput) -> tuple[str, OutcomeMetadata]:
        target = self.resolve(params.path)
        if not target.is_file():
            raise ToolFailure(f"File not found: {params.path}")

        locator = params.locator
        if locator.end_line < locator.start_line:
            raise ToolFailure(
                f"Invalid locator: end_line {locator.end_line} is before"
                f" start_line {locator.start_line}"
            )

        try:
            lines = target.read_text(encoding="utf-8").splitlines()
        except UnicodeDecodeError as exc:
            raise ToolFailure(
                f"Cannot edit {params.path}: file is not valid UTF-8 text"
            ) from exc
        if locator.end_line > len(lines):
            raise ToolFailure(
                f"Invalid locator: end_line {locator.end_line} is beyond the end of"
                f" {params.path} ({len(lines)} lines)"
            )

        start, end = locator.start_line - 1, locator.end_line
        selected = "\n".join(lines[start:end])
        if locator.needle is not None and locator.needle not in selected:
            raise ToolFailure(
                f"Needle not found in lines {locator.start_line}-{locator.end_line}"
                f" of {params.path}. Read the file again and retry."
            )

        replacement = params.replacement.splitlines()
        updated = lines[:start] + replacement + lines[end:]
        content = "\n".join(updated) + "\n"
        target.write_text(content, encoding="utf-8")

        if params.verify_after:
            written = target.read_text(encoding="utf-8").splitlines()
            if written[start : start + len(replacement)] != replacement:
                raise ToolFailure(f"Verification failed after editing {params.path}")

        return (
            f"Replaced lines {locator.start_line}-{locator.end_line} of {params.path}"
            f" with {len(replacement)} lines",
            OutcomeMetadata(
                path=params.path,
                operation="edit",
                sha256=_sha256(content.encode("utf-8")),
                line_count=len(updated),
            ),
        )

    def search(self, params: SearchFilesInput) -> tuple[str, OutcomeMetadata]:
        try:
            source = params.query if params.regex else re.escape(params.query)
            pattern = re.compile(source)
        except re.error as exc:
            raise ToolFailure(f"Invalid regex '{params.query}': {exc}") from exc

        matches: list[str] = []
        for path in self._search_candidates(params.glob):
            try:
                lines = path.read_text(encoding="utf-8").splitlines()
            except UnicodeDecodeError:
                continue

            relative = path.relative_to(self._root).as_posix()
            for idx, line in enumerate(lines):
                if not pattern.search(line):
                    continue
                lo = max(0, idx - params.context_lines)
                hi = min(len(lines), idx + params.context_lines + 1)
                for ctx in range(lo, hi):
                    marker = ":" if ctx == idx else "-"
                    matches.append(f"{relative}{marker}{ctx + 1}{marker} {lines[ctx]}")
                if len(matches) >= params.max_results:
                    break
            if len(matches) >= params.max_results:
                break

        if not matches:
            return f"No matches for '{params.query}'", OutcomeMetadata()
        return "\n".join(matches[: params.max_results]), OutcomeMetadata()

    def _search_candidates(self, pattern: str) -> list[Path]:
        """Files under root matching pattern, minus ignored trees and artifacts.

        Raises:
            ToolFailure: if the pattern is empty, absolute or climbs out of root.
        """
        segments = pattern.replace("\\", "/").split("/")
        if not pattern or pattern.startswith(("/", "\\")) or ".." in segments:
            raise ToolFailure(
                f"Invalid glob '{pattern}': must be a relative pattern inside the"
                " workspace"
            )
        try:
            found = sorted(self._root.glob(pattern))
        except (ValueError, NotImplementedError) as exc:
            raise ToolFailure(f"Invalid glob '{pattern}': {exc}") from exc

        candidates = []
        for path in found:
            if not path.is_file():
                continue
            resolved = path.resolve()
            if self._root not in resolved.parents:
                continue
            relative = path.relative_to(self._root)
            if SEARCH_IGNORED_DIRS.intersection(relative.parts[:-1]):
                continue
            if relative.name.endswith(SEARCH_IGNORED_SUFFIXES):
                continue
            if path.stat().st_size > self._max_file_size:
                continue
            candidates.append(path)
        return candidates


def _sha256(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()
