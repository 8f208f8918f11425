"""WorkspaceVerificationRunner — runs project checks inside a workspace directory."""

import asyncio
import json
import os
import time
from dataclasses import dataclass
from pathlib import Path

from app_weaver.verification.domain.observer import VerificationObserver
from app_weaver.verification.domain.result import VerifyResult, VerifyStep
from app_weaver.verification.infrastructure.errors import VerificationError

_SCRIPT_CHECKS: tuple[tuple[str, str], ...] = (
    ("typecheck", "Type Check"),
    ("lint", "Lint"),
    ("test", "Test"),
    ("build", "Build"),
)
_CRITICAL_SCRIPTS = frozenset({"typecheck", "test"})
_OUTPUT_LIMIT = 5000
_STATIC_STEP = "Static Validation"


@dataclass(frozen=True)
class _CommandResult:
    ok: bool
    output: str


class WorkspaceVerificationRunner:
    """Verifies a Node project through its npm scripts, or a static site by index.html.

    Satisfies the VerificationRunner protocol structurally.
    """

    def __init__(
        self,
        workspace: Path,
        observer: VerificationObserver,
        timeout_seconds: float = 60.0,
    ) -> None:
        self._workspace = workspace
        self._observer = observer
        self._timeout_seconds = timeout_seconds

    async def run(self) -> VerifyResult:
        """Run every available check and return the collected steps.

        Stops after a failing typecheck or test step.

        Raises:
            VerificationError: if the workspace directory does not exist or its
                package.json cannot be parsed.
        """
        if not self._workspace.is_dir():
            raise VerificationError(workspace=self._workspace, reason="not a directory")

        started = time.monotonic()
        scripts = self._read_scripts()
        steps: list[VerifyStep] = []

        if scripts is None:
            steps.append(self._static_check())
        else:
            for script, name in _SCRIPT_CHECKS:
                if script not in scripts:
                    continue
                step_started = time.monotonic()
                result = await self._run_command("npm", "run", script)
                step = VerifyStep(
                    name=name,
                    ok=result.ok,
                    output=result.output,
                    duration_ms=int((time.monotonic() - step_started) * 1000),
                )
                steps.append(step)
                self._observer.verification_step_completed(
                    name=step.name, ok=step.ok, duration_ms=step.duration_ms or 0
                )
                if not result.ok and script in _CRITICAL_SCRIPTS:
                    break

        total_duration_ms = int((time.monotonic() - started) * 1000)
        passed = all(step.ok for step in steps)
        self._observer.verification_completed(
            passed=passed, num_steps=len(steps), duration_ms=total_duration_ms
        )
        return VerifyResult(
            steps=steps, passed=passed, total_duration_ms=total_duration_ms
        )

    def _read_scripts(self) -> dict[str, str] | None:
        """Return package.json scripts, or None when there is no package.json."""
        package_json = self._workspace / "package.json"
        if not package_json.is_file():
            return None
        try:
            data = json.loads(package_json.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise VerificationError(
                workspace=self._workspace, reason=f"invalid package.json: {exc}"
            ) from exc
        scripts = data.get("scripts") if isinstance(data, dict) else None
        return scripts if isinstance(scripts, dict) else {}

    def _static_check(self) -> VerifyStep:
        index = self._workspace / "index.html"
        if not index.is_file():
            return VerifyStep(
                name=_STATIC_STEP,
                ok=True,
                output="No index.html found - skipping validation",
                duration_ms=0,
            )

        content = index.read_text(encoding="utf-8", errors="replace")
        has_doctype = content.strip().lower().startswith("<!doctype html")
        if has_doctype and "</html>" in content:
            return VerifyStep(
                name=_STATIC_STEP,
                ok=True,
                output="index.html appears well-formed",
                duration_ms=0,
            )
        return VerifyStep(
            name=_STATIC_STEP,
            ok=False,
            output="index.html may be malformed (missing doctype or closing tag)",
            duration_ms=0,
        )

    async def _run_command(self, *cmd: str) -> _CommandResult:
        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                cwd=self._workspace,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
                env={**os.environ, "CI": "true", "NODE_ENV": "test"},
            )
        except OSError as exc:
            return _CommandResult(ok=False, output=f"Failed to execute command: {exc}")

        try:
            stdout, _ = await asyncio.wait_for(
                proc.communicate(), timeout=self._timeout_seconds
            )
        except TimeoutError:
            proc.kill()
            await proc.wait()
            return _CommandResult(
                ok=False,
                output=f"Command timed out after {self._timeout_seconds:g} seconds",
            )

        output = stdout.decode("utf-8", errors="replace")
        if len(output) >= _OUTPUT_LIMIT:
            output = output[:_OUTPUT_LIMIT] + "\n... (output truncated)"
        return _CommandResult(ok=proc.returncode == 0, output=output.strip())
