"""Leaf operations: tasks that perform one external effect."""

from tasksmith.operations.cli import cli
from tasksmith.operations.shell import run_process, shell

__all__ = ["cli", "shell", "run_process"]
