"""
Root Typer application for the tasksmith CLI.

    tasksmith run FILE TASK [--json] [--log-level LEVEL]
    tasksmith list FILE
    tasksmith --version

Exit codes: 0 task completed, 1 task failed, 2 tasks file or task name
could not be loaded.
"""

from __future__ import annotations

import json

import typer
from typer import Typer

from tasksmith.cli.utils import build_task, console, err_console, load_tasks, print_task_table, select_task
from tasksmith.core.errors import TaskLoadError
from tasksmith.core.logging import configure_logging
from tasksmith.core.settings import get_settings
from tasksmith.execution.events import TaskEvent
from tasksmith.execution.runner import run_task
from tasksmith.observability.sinks import ConsoleSink

app = Typer(
    name="tasksmith",
    help="tasksmith — compose and run cancellable task trees.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

EXIT_FAILED = 1
EXIT_LOAD_ERROR = 2


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        from tasksmith import __version__

        typer.echo(f"tasksmith {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """tasksmith CLI — run tasks defined in a Python tasks file."""


# ── Commands ─────────────────────────────────────────────────────────────


def _json_sink(event: TaskEvent) -> None:
    typer.echo(json.dumps(event.to_dict()))


@app.command("run")
def run_command(
    path: str = typer.Argument(..., help="Python file defining a 'tasks' mapping."),
    task: str = typer.Argument(..., help="Name of the task to run."),
    json_out: bool = typer.Option(False, "--json", help="Print events as JSON lines."),
    log_level: str | None = typer.Option(None, "--log-level", help="Log level (default from settings)."),  # noqa: UP007
) -> None:
    """Run TASK from the tasks file at PATH."""
    settings = get_settings()
    configure_logging(level=log_level or settings.log_level, json_format=settings.json_logs)

    try:
        root = build_task(select_task(load_tasks(path), task), task)
    except TaskLoadError as e:
        err_console.print(f"[bold red]Error[/bold red] ({e.category.value}): {e.message}")
        raise typer.Exit(code=EXIT_LOAD_ERROR) from e

    sink = _json_sink if json_out else ConsoleSink(console)
    outcome = run_task(root, sink)

    if json_out:
        typer.echo(json.dumps(outcome.to_dict()))
    elif outcome.ok:
        console.print(f"[green]✓[/green] {outcome.name} completed")
    else:
        err_console.print(f"[bold red]✗[/bold red] {outcome.name} failed: {outcome.message}")
    if not outcome.ok:
        raise typer.Exit(code=EXIT_FAILED)


@app.command("list")
def list_command(
    path: str = typer.Argument(..., help="Python file defining a 'tasks' mapping."),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """List the tasks defined in the tasks file at PATH."""
    try:
        tasks = load_tasks(path)
    except TaskLoadError as e:
        err_console.print(f"[bold red]Error[/bold red] ({e.category.value}): {e.message}")
        raise typer.Exit(code=EXIT_LOAD_ERROR) from e

    if json_out:
        typer.echo(json.dumps(sorted(tasks)))
        return
    if not tasks:
        console.print("[dim]No tasks.[/dim]")
        return
    print_task_table(tasks, title=str(path))
