"""Fixed-width event formatting for terminals and log files.

``tabulate`` turns a list of :class:`Column` definitions into a renderer
that lays a record out as fixed-width cells.  Cells that do not fit are
truncated, or wrapped onto extra lines when the column allows it; shorter
cells are padded with blanks so the columns line up.

``format_event`` is the renderer used for task events::

    12:04:33   started    core/shell
    12:04:33   log        core/shell       ruff check src
    12:04:34   completed  core/shell
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from tasksmith.core.settings import get_settings
from tasksmith.execution.events import TaskEvent


def _to_text(value: Any) -> str:
    if value is None:
        return ""
    if hasattr(value, "value"):
        return str(value.value)
    return str(value)


@dataclass(frozen=True)
class Column:
    """Layout of one column.

    ``width`` includes ``pad`` trailing blanks.  ``map`` converts the raw
    field value to text.
    """

    key: str
    width: int = 8
    pad: int = 0
    wrap: bool = False
    map: Callable[[Any], str] = _to_text

    @property
    def inner(self) -> int:
        return max(self.width - self.pad, 1)

    def cell(self, value: Any) -> list[str]:
        text = self.map(value).replace("\r", "").replace("\t", "  ")
        lines: list[str] = []
        for line in text.split("\n"):
            if self.wrap:
                while len(line) > self.inner:
                    lines.append(line[: self.inner].ljust(self.width))
                    line = line[self.inner :]
                lines.append(line.ljust(self.width))
            else:
                lines.append(line[: self.inner].ljust(self.width))
        return lines


Renderer = Callable[[Mapping[str, Any]], str]


def tabulate(columns: Sequence[Column]) -> Renderer:
    """Build a renderer laying records out in ``columns``."""

    def render(record: Mapping[str, Any]) -> str:
        cells = [column.cell(record.get(column.key)) for column in columns]
        height = max(len(cell) for cell in cells)
        rows = []
        for index in range(height):
            row = "".join(
                cell[index] if index < len(cell) else " " * column.width
                for column, cell in zip(columns, cells)
            )
            rows.append(row)
        return "\n".join(rows)

    return render


def _clock(value: Any) -> str:
    return value.astimezone().strftime("%H:%M:%S") if value is not None else ""


def event_columns(data_width: int | None = None) -> list[Column]:
    """The column layout used by :func:`format_event`."""
    width = data_width if data_width is not None else get_settings().event_data_width
    return [
        Column("time", width=10, pad=1, map=_clock),
        Column("type", width=10, pad=1),
        Column("name", width=16, pad=1),
        Column("data", width=width, wrap=True),
    ]


def format_event(event: TaskEvent, *, data_width: int | None = None) -> str:
    """Render ``event`` as one or more aligned lines without trailing blanks."""
    render = tabulate(event_columns(data_width))
    record = {"time": event.time, "type": event.type, "name": event.name, "data": event.data}
    return "\n".join(line.rstrip() for line in render(record).split("\n"))


__all__ = ["Column", "Renderer", "tabulate", "event_columns", "format_event"]
