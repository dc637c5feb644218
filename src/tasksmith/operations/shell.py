"""shell — run a command through the system shell as a task.

Output is streamed line by line as ``log`` events, stdout and stderr merged
in arrival order.  The task resolves ok when the process exits with the
expected code and fails with ``unexpected exitcode. expected X got Y``
otherwise.  Cancelling the task kills the process.

Example::

    lint = shell("ruff check src")
    expect_missing = shell("test -e dist", exitcode=1)
"""

from __future__ import annotations

import asyncio

from tasksmith.core.errors import TaskFailed
from tasksmith.core.logging import get_logger
from tasksmith.core.settings import get_settings
from tasksmith.execution.task import Task, TaskContext
from tasksmith.orchestration.params import ShellParams, validate_params
from tasksmith.orchestration.primitives import script

logger = get_logger(__name__)

READ_CHUNK_BYTES = 64 * 1024
MAX_LINE_BYTES = 1024 * 1024


def shell(command: str, exitcode: int = 0, *, name: str = "core/shell") -> Task:
    """Run ``command`` and expect it to exit with ``exitcode``."""
    params = validate_params("shell", ShellParams, command=command, exitcode=exitcode)

    async def _run(context: TaskContext) -> None:
        code = await run_process(context, params.command)
        if code != params.exitcode:
            raise TaskFailed(f"unexpected exitcode. expected {params.exitcode} got {code}")

    return script(name, _run)


async def run_process(context: TaskContext, command: str) -> int:
    """Run ``command``, logging each output line through ``context``.

    Returns the process exit code.  Output is read in chunks, so lines of
    any length are accepted; a line longer than ``MAX_LINE_BYTES`` is
    logged in pieces.  Whichever way the coroutine exits, a process that
    is still running is killed and reaped.
    """
    executable = get_settings().shell
    process = await asyncio.create_subprocess_shell(
        command,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.STDOUT,
        executable=executable,
    )
    logger.debug("process_started", task_id=context.task_id, pid=process.pid, command=command)
    try:
        if process.stdout is not None:
            await _log_output(context, process.stdout)
        code = await process.wait()
    finally:
        if process.returncode is None:
            process.kill()
            await process.wait()
            logger.debug("process_killed", task_id=context.task_id, pid=process.pid)
    logger.debug("process_exited", task_id=context.task_id, pid=process.pid, exitcode=code)
    return code


async def _log_output(context: TaskContext, stream: asyncio.StreamReader) -> None:
    pending = b""
    while chunk := await stream.read(READ_CHUNK_BYTES):
        pending += chunk
        *lines, pending = pending.split(b"\n")
        for line in lines:
            _log_line(context, line)
        while len(pending) > MAX_LINE_BYTES:
            _log_line(context, pending[:MAX_LINE_BYTES])
            pending = pending[MAX_LINE_BYTES:]
    if pending:
        _log_line(context, pending)


def _log_line(context: TaskContext, line: bytes) -> None:
    context.log(line.decode(errors="replace").rstrip("\r"))


__all__ = ["shell", "run_process"]
