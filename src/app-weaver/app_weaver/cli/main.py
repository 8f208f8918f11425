"""CLI entrypoint for app-weaver — typer app with `run`, `chat` and `tools` commands."""

import asyncio
import json
import logging
import sys
from pathlib import Path

import structlog
import typer
from rich.console import Console

from app_weaver.agent.application.orchestrator import TurnLoopOrchestrator
from app_weaver.agent.infrastructure.factory import create_orchestrator
from app_weaver.cli.output.console_callbacks import RichStreamingCallbacks
from app_weaver.config.domain.config import AppWeaverConfig
from app_weaver.config.infrastructure.observer import StructlogConfigObserver
from app_weaver.config.infrastructure.yaml_loader import YamlConfigLoader
from app_weaver.core.errors import AppWeaverError
from app_weaver.tools.domain.catalog import get_tool_definitions

app = typer.Typer(add_completion=False)

_EXIT_COMMANDS = frozenset({"exit", "quit"})


def _configure_structlog(log_format: str, verbose: bool) -> None:
    """Configure structlog based on the requested format."""
    if log_format == "console":
        renderer: structlog.types.Processor = structlog.dev.ConsoleRenderer()
    elif log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        typer.echo(f"Invalid log format: {log_format!r}. Must be 'console' or 'json'.")
        raise typer.Exit(code=1)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.INFO if verbose else logging.WARNING
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


def _load_config(config_path: Path, dry_run: bool) -> AppWeaverConfig:
    loader = YamlConfigLoader(observer=StructlogConfigObserver())
    config = loader.load(path=config_path)
    if dry_run and not config.agent.dry_run:
        config = config.model_copy(
            update={"agent": config.agent.model_copy(update={"dry_run": True})}
        )
    return config


async def _run_once(
    orchestrator: TurnLoopOrchestrator,
    prompt: str,
    console: Console,
    prefix: str | None,
) -> None:
    final = await orchestrator.process_request(
        user_message=prompt,
        callbacks=RichStreamingCallbacks(console=console),
        system_prefix=prefix,
    )
    console.rule()
    console.print(final, markup=False)


async def _chat(orchestrator: TurnLoopOrchestrator, console: Console) -> None:
    while True:
        prompt = console.input("[bold green]you>[/] ").strip()
        if not prompt:
            continue
        if prompt in _EXIT_COMMANDS:
            return
        if prompt == "/reset":
            orchestrator.store.reset()
            console.print("[dim]Conversation cleared.[/]")
            continue
        await _run_once(
            orchestrator=orchestrator, prompt=prompt, console=console, prefix=None
        )


@app.command()
def run(
    prompt: str = typer.Argument(..., help="What the agent should build or change"),
    config_path: Path = typer.Option(
        ..., "--config", "-c", help="Path to app-weaver config YAML"
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Describe tool calls instead of executing them"
    ),
    prefix: str | None = typer.Option(
        None, "--prefix", help="Extra system prompt text for this request"
    ),
    log_format: str = typer.Option(
        "console",
        "--log-format",
        help="Log format: 'console' or 'json'",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log info events"),
) -> None:
    """Run a single request against the configured workspace."""
    _configure_structlog(log_format=log_format, verbose=verbose)
    try:
        config = _load_config(config_path=config_path, dry_run=dry_run)
        console = Console(highlight=False)
        orchestrator = create_orchestrator(
            config=config, paced=console.is_terminal
        )
        asyncio.run(
            _run_once(
                orchestrator=orchestrator, prompt=prompt, console=console, prefix=prefix
            )
        )
    except KeyboardInterrupt:
        typer.echo("Request interrupted.")
        sys.exit(1)
    except AppWeaverError as exc:
        typer.echo(str(exc))
        sys.exit(1)
    except Exception as exc:  # noqa: BLE001
        typer.echo(f"Unexpected error: {exc}\nPlease report this bug.")
        sys.exit(1)


@app.command()
def chat(
    config_path: Path = typer.Option(
        ..., "--config", "-c", help="Path to app-weaver config YAML"
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Describe tool calls instead of executing them"
    ),
    log_format: str = typer.Option(
        "console",
        "--log-format",
        help="Log format: 'console' or 'json'",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log info events"),
) -> None:
    """Start an interactive session that keeps one conversation across requests.

    Type `/reset` to clear the conversation and `exit` to quit.
    """
    _configure_structlog(log_format=log_format, verbose=verbose)
    try:
        config = _load_config(config_path=config_path, dry_run=dry_run)
        console = Console(highlight=False)
        orchestrator = create_orchestrator(config=config, paced=True)
        asyncio.run(_chat(orchestrator=orchestrator, console=console))
    except (KeyboardInterrupt, EOFError):
        typer.echo("")
    except AppWeaverError as exc:
        typer.echo(str(exc))
        sys.exit(1)
    except Exception as exc:  # noqa: BLE001
        typer.echo(f"Unexpected error: {exc}\nPlease report this bug.")
        sys.exit(1)


@app.command()
def tools() -> None:
    """Print the tool schema declared to the model as JSON."""
    definitions = [definition.model_dump() for definition in get_tool_definitions()]
    typer.echo(json.dumps(definitions, indent=2))


if __name__ == "__main__":
    app()
