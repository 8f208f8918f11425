"""Human-readable rendering of verification results and changed files."""

from collections.abc import Iterable

from app_weaver.verification.domain.result import VerifyResult

_MAX_ERROR_LINES = 5


def format_summary(result: VerifyResult) -> str:
    """Render a Markdown summary; failed steps include their first output lines."""
    if not result.steps:
        return "✓ No verification steps configured"

    lines = ["\n**Verification Results:**"]
    for step in result.steps:
        icon = "✓" if step.ok else "✗"
        timing = f" ({step.duration_ms}ms)" if step.duration_ms else ""
        lines.append(f"  {icon} {step.name}{timing}")

        if not step.ok and step.output:
            for line in step.output.split("\n")[:_MAX_ERROR_LINES]:
                if line.strip():
                    lines.append(f"    {line.strip()}")

    verdict = "All checks passed ✓" if result.passed else "Some checks failed ✗"
    lines.append(f"\n{verdict} ({result.total_duration_ms}ms total)")
    return "\n".join(lines)


def format_change_summary(changed_files: Iterable[str]) -> str:
    """Render the sorted list of changed files, or "" when nothing changed."""
    files = sorted(changed_files)
    if not files:
        return ""
    if len(files) == 1:
        return f"**Changed:** {files[0]}\n"
    listing = "\n".join(f"  - {path}" for path in files)
    return f"**Changed ({len(files)} files):**\n{listing}\n"
