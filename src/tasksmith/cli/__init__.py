"""
CLI layer for tasksmith.

Provides a Typer application that loads a tasks file and runs one of its
tasks.  All engine logic lives in ``tasksmith.execution`` and
``tasksmith.orchestration``; this package handles only terminal transport.

Entry point::

    tasksmith --help
"""

from tasksmith.cli.app import app

__all__ = ["app"]
