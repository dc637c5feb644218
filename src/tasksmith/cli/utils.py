"""
CLI utility helpers — consoles and tasks-file loading.
"""

from __future__ import annotations

import importlib.util
from collections.abc import Mapping
from pathlib import Path

from rich.console import Console
from rich.table import Table

from tasksmith.core.errors import TaskLoadError
from tasksmith.execution.task import Task
from tasksmith.orchestration.params import TaskFactory

console = Console()
err_console = Console(stderr=True)


# ── Tasks file loading ───────────────────────────────────────────────────


def load_tasks(path: str | Path) -> dict[str, TaskFactory]:
    """Import the Python file at ``path`` and return its ``tasks`` mapping.

    The file must define ``tasks``: a mapping of names to zero-argument
    callables returning a Task.

    Raises:
        TaskLoadError: if the file is missing, fails to import, or does not
            define a usable ``tasks`` mapping.
    """
    file = Path(path)
    if not file.is_file():
        raise TaskLoadError(f"tasks file not found: {file}")

    spec = importlib.util.spec_from_file_location(f"_tasksmith_tasks_{file.stem}", file)
    if spec is None or spec.loader is None:
        raise TaskLoadError(f"cannot import tasks file: {file}")
    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except Exception as exc:
        raise TaskLoadError(f"error while importing {file}: {exc}", cause=exc) from exc

    tasks = getattr(module, "tasks", None)
    if not isinstance(tasks, Mapping):
        raise TaskLoadError(f"{file} does not define a 'tasks' mapping")
    for key, factory in tasks.items():
        if not isinstance(key, str) or not callable(factory):
            raise TaskLoadError(f"{file}: tasks[{key!r}] must map a name to a task factory")
    return dict(tasks)


def select_task(tasks: Mapping[str, TaskFactory], name: str) -> TaskFactory:
    """Return the factory registered as ``name``."""
    try:
        return tasks[name]
    except KeyError:
        available = ", ".join(sorted(tasks)) or "none"
        raise TaskLoadError(f"unknown task {name!r} (available: {available})") from None


def build_task(factory: TaskFactory, name: str) -> Task:
    """Call ``factory`` and check that it returns a Task."""
    try:
        root = factory()
    except Exception as exc:
        raise TaskLoadError(f"task {name!r} could not be built: {exc}", cause=exc) from exc
    if not isinstance(root, Task):
        raise TaskLoadError(f"task {name!r} factory returned {type(root).__name__}, expected Task")
    return root


# ── Output helpers ───────────────────────────────────────────────────────


def print_task_table(tasks: Mapping[str, TaskFactory], *, title: str = "") -> None:
    """Render task names and their factories' docstrings as a Rich table."""
    table = Table(title=title or None, show_lines=False, pad_edge=False)
    table.add_column("task", style="bold cyan")
    table.add_column("description", overflow="fold")
    for name, factory in tasks.items():
        doc = (getattr(factory, "__doc__", None) or "").strip().splitlines()
        table.add_row(name, doc[0] if doc else "")
    console.print(table)
