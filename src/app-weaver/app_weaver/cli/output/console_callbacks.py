"""RichStreamingCallbacks — renders orchestrator progress to a terminal with Rich."""

from rich.console import Console
from rich.markup import escape

from app_weaver.agent.domain.callbacks import FileOperationState, Phase
from app_weaver.model.domain.response import TokenUsage

_PHASE_LABELS: dict[str, str] = {
    "thinking": "Thinking",
    "reasoning": "Reasoning",
    "code-writing": "Writing code",
    "building": "Building",
}

_FILE_STYLES: dict[str, tuple[str, str]] = {
    "creating": ("yellow", "+"),
    "editing": ("yellow", "~"),
    "created": ("green", "✓"),
    "edited": ("green", "✓"),
}


class RichStreamingCallbacks:
    """Prints streamed text as it arrives and progress events as dim status lines.

    Satisfies the StreamingCallbacks protocol structurally.
    """

    def __init__(self, console: Console | None = None) -> None:
        self._console = console if console is not None else Console(highlight=False)
        self._mid_line = False

    def on_delta(self, text: str) -> None:
        self._write(text, style=None)

    def on_reasoning(self, text: str) -> None:
        self._write(text, style="dim italic")

    def on_phase(self, phase: Phase) -> None:
        if phase == "completed":
            return
        self._status(f"[bold cyan]● {_PHASE_LABELS[phase]}[/]")

    def on_thinking_complete(self, duration_seconds: float) -> None:
        self._status(f"[dim]Thought for {duration_seconds:.1f}s[/]")

    def on_file_operation(self, state: FileOperationState, path: str) -> None:
        color, marker = _FILE_STYLES[state]
        self._status(f"[{color}]{marker} {state} {escape(path)}[/]")

    def on_tool_start(self, tool: str, tool_use_id: str) -> None:
        self._status(f"[dim]→ {tool}[/]")

    def on_tool_end(self, tool: str, tool_use_id: str, is_error: bool) -> None:
        if is_error:
            self._status(f"[red]✗ {tool} failed[/]")
        else:
            self._status(f"[dim]✓ {tool}[/]")

    def on_complete(self, usage: TokenUsage) -> None:
        self._status(
            f"[dim]Tokens: {usage.input_tokens} in, {usage.output_tokens} out[/]"
        )

    def _write(self, text: str, style: str | None) -> None:
        self._console.print(text, style=style, end="", markup=False, soft_wrap=True)
        self._mid_line = not text.endswith("\n")

    def _status(self, markup: str) -> None:
        if self._mid_line:
            self._console.print()
            self._mid_line = False
        self._console.print(markup)
