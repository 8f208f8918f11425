"""Dangling-reference detection for files written in one tool batch."""

import posixpath
import re
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Literal

from app_weaver.tools.domain.invocation import (
    ReplaceLinesInvocation,
    ToolInvocation,
    WriteFileInvocation,
)
from app_weaver.tools.domain.outcome import ToolOutcome

type ReferenceKind = Literal["script", "link", "import"]

MODULE_EXTENSIONS: tuple[str, ...] = (".ts", ".tsx", ".js", ".jsx", ".mjs")

_SCRIPT_SRC = re.compile(r"""<script[^>]+src=["']([^"']+)["']""", re.IGNORECASE)
_LINK_HREF = re.compile(r"""<link[^>]+href=["']([^"']+)["'][^>]*>""", re.IGNORECASE)
_IMPORT_SPECIFIERS = (
    re.compile(r"""\b(?:import|export)\s[^'"]*?\bfrom\s*["']([^"']+)["']"""),
    re.compile(r"""\bimport\s*["']([^"']+)["']"""),
    re.compile(r"""\bimport\(\s*["']([^"']+)["']\s*\)"""),
    re.compile(r"""\brequire\(\s*["']([^"']+)["']\s*\)"""),
)
_LEADING_DOT_SLASH = re.compile(r"^\.?/")
_EXTERNAL = re.compile(r"^(?:[a-z][a-z0-9+.-]*:|//)", re.IGNORECASE)


@dataclass(frozen=True)
class DanglingReference:
    source_file: str
    reference_kind: ReferenceKind
    target_path: str


def find_dangling_references(
    invocations: list[ToolInvocation],
    created_paths: set[str],
    outcomes: list[ToolOutcome],
    source_root: str = "src",
) -> list[DanglingReference]:
    """Scan successful writes of this batch for references to files not created in it.

    Markup files are only scanned when written in full. Module sources are
    scanned for relative imports in both full writes and line replacements.
    """
    succeeded = {outcome.tool_use_id for outcome in outcomes if not outcome.is_error}
    created = _with_slash_variants(created_paths)
    dangling: list[DanglingReference] = []

    for invocation in invocations:
        if invocation.id not in succeeded:
            continue
        match invocation:
            case WriteFileInvocation() if _is_markup(invocation.input.path):
                dangling.extend(
                    _markup_references(
                        source=invocation.input.path,
                        html=invocation.input.content,
                        created=created,
                    )
                )
            case WriteFileInvocation() if _is_module(invocation.input.path):
                dangling.extend(
                    _module_references(
                        source=invocation.input.path,
                        code=invocation.input.content,
                        created=created,
                        source_root=source_root,
                    )
                )
            case ReplaceLinesInvocation() if _is_module(invocation.input.path):
                dangling.extend(
                    _module_references(
                        source=invocation.input.path,
                        code=invocation.input.replacement,
                        created=created,
                        source_root=source_root,
                    )
                )
    return dangling


def format_dangling_warning(references: list[DanglingReference]) -> str:
    """Render the advisory appended to the last tool outcome of the batch."""
    lines = []
    for ref in references:
        match ref.reference_kind:
            case "script":
                tag = f'<script src="{ref.target_path}">'
            case "link":
                tag = f'<link href="{ref.target_path}">'
            case "import":
                tag = f'import "{ref.target_path}"'
        lines.append(
            f"  - {ref.source_file} references {tag} but {ref.target_path}"
            " was not created"
        )
    return (
        "\n\n⚠️ WARNING: Missing file references detected:\n"
        + "\n".join(lines)
        + "\n\nYou MUST create these files in your next response to make the app"
        " functional."
    )


def _markup_references(
    source: str, html: str, created: set[str]
) -> list[DanglingReference]:
    dangling = []
    for match in _SCRIPT_SRC.finditer(html):
        target = match.group(1)
        if not _markup_target_exists(target, created):
            dangling.append(DanglingReference(source, "script", target))

    for match in _LINK_HREF.finditer(html):
        if "stylesheet" not in match.group(0):
            continue
        target = match.group(1)
        if not _markup_target_exists(target, created):
            dangling.append(DanglingReference(source, "link", target))
    return dangling


def _markup_target_exists(target: str, created: set[str]) -> bool:
    if _EXTERNAL.match(target):
        return True
    return _LEADING_DOT_SLASH.sub("", target, count=1) in created or target in created


def _module_references(
    source: str, code: str, created: set[str], source_root: str
) -> list[DanglingReference]:
    dangling = []
    seen: set[str] = set()
    for specifier in _relative_specifiers(code):
        if specifier in seen:
            continue
        seen.add(specifier)
        candidates = _module_candidates(
            specifier=specifier, source=source, source_root=source_root
        )
        if created.isdisjoint(candidates):
            dangling.append(DanglingReference(source, "import", specifier))
    return dangling


def _relative_specifiers(code: str) -> Iterable[str]:
    found: list[tuple[int, str]] = []
    for pattern in _IMPORT_SPECIFIERS:
        found.extend((m.start(1), m.group(1)) for m in pattern.finditer(code))
    for _, specifier in sorted(found):
        if specifier.startswith("."):
            yield specifier


def _module_candidates(specifier: str, source: str, source_root: str) -> set[str]:
    normalized = _LEADING_DOT_SLASH.sub("", specifier, count=1)
    beside_source = posixpath.normpath(
        posixpath.join(posixpath.dirname(source), specifier)
    )

    bases = {normalized, beside_source}
    if source_root:
        bases |= {posixpath.join(source_root, base) for base in list(bases)}

    candidates: set[str] = set()
    for base in bases:
        candidates.add(base)
        for ext in MODULE_EXTENSIONS:
            candidates.add(f"{base}{ext}")
            candidates.add(f"{base}/index{ext}")
    return _with_slash_variants(candidates)


def _with_slash_variants(paths: Iterable[str]) -> set[str]:
    variants: set[str] = set()
    for path in paths:
        bare = path.lstrip("/")
        variants.add(bare)
        variants.add(f"/{bare}")
    return variants


def _is_markup(path: str) -> bool:
    return path.lower().endswith(".html")


def _is_module(path: str) -> bool:
    return path.endswith(MODULE_EXTENSIONS)
