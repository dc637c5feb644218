"""cli — pick a task by name from command-line arguments.

``argv`` is the argument list without the program name, e.g.
``sys.argv[1:]``.  The first argument selects a factory from ``options``;
with no argument, or an unknown one, the available names are logged and
the task resolves ok.

Example::

    tasks = {"build": build, "test": test}
    run_task(cli(sys.argv[1:], tasks), ConsoleSink())
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from tasksmith.execution.scope import ExecutionScope
from tasksmith.execution.task import Task, TaskContext, on_settled
from tasksmith.orchestration.params import CliParams, TaskFactory, validate_params


def cli(argv: Sequence[str], options: Mapping[str, TaskFactory], *, name: str = "core/cli") -> Task:
    """Dispatch ``argv[0]`` to the matching factory in ``options``."""
    params = validate_params("cli", CliParams, argv=list(argv), options=dict(options))

    def executor(context: TaskContext) -> None:
        scope = ExecutionScope().bind(context)
        selected = params.argv[0] if params.argv else None
        if selected is None or selected not in params.options:
            context.log("cli options:")
            for key in params.options:
                context.log(f" - {key}")
            context.ok()
            return
        if scope.cancelled:
            return

        context.log(f"running task: {selected}")
        task = scope.track(params.options[selected]())
        on_settled(context.run(task), context.ok, context.fail)

    return Task(name, executor)


__all__ = ["cli"]
