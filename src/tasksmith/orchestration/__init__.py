"""tasksmith orchestration — combinators that build task trees.

Every factory here validates its parameters immediately and returns an
unstarted :class:`~tasksmith.execution.task.Task`.  Nothing runs until the
root of the tree is run.

    composition  ─ series, parallel, each, trycatch
    loops        ─ retry, repeat, dowhile
    timing       ─ delay, timeout
    branching    ─ ifelse, ifthen
    primitives   ─ ok, fail, noop, create, script
    conditions   ─ from_callback, constant
"""

from tasksmith.orchestration.branching import ifelse, ifthen
from tasksmith.orchestration.composition import each, parallel, series, trycatch
from tasksmith.orchestration.conditions import constant, from_callback
from tasksmith.orchestration.loops import dowhile, repeat, retry
from tasksmith.orchestration.params import Condition, IterationFactory, TaskFactory
from tasksmith.orchestration.primitives import create, fail, noop, ok, script
from tasksmith.orchestration.timing import delay, timeout

__all__ = [
    "series",
    "parallel",
    "each",
    "trycatch",
    "retry",
    "repeat",
    "dowhile",
    "delay",
    "timeout",
    "ifelse",
    "ifthen",
    "ok",
    "fail",
    "noop",
    "create",
    "script",
    "constant",
    "from_callback",
    "Condition",
    "IterationFactory",
    "TaskFactory",
]
