from __future__ import annotations

import os
import sys
import traceback
from typing import IO

from rich.console import Console
from rich.panel import Panel
from rich.status import Status
from rich.table import Table
from rich.traceback import Traceback

from .errors import TactSynthError
from .logging_utils import DEBUG_ENV, get_log_path


class Spinner:
    """Rich status line shown while a sink is being fed; silent off a terminal."""

    def __init__(self, message: str, *, stream: IO[str] | None = None) -> None:
        self._message = message
        self._stream = stream or sys.stderr
        self._status: Status | None = None

    def __enter__(self) -> "Spinner":
        if self._stream.isatty():
            self._status = Console(file=self._stream).status(self._message)
            self._status.start()
        return self

    def __exit__(self, exc_type: object, exc: object, tb: object) -> None:
        if self._status is not None:
            self._status.stop()
            self._status = None


def _failure_rows(stage: str, exc: BaseException) -> list[tuple[str, str]]:
    detail = exc.detail if isinstance(exc, TactSynthError) else str(exc)
    rows = [("While", stage), ("Error", type(exc).__name__), ("Detail", detail)]
    if isinstance(exc, TactSynthError) and exc.location is not None:
        rows.append(("At", exc.location))
    rows.append(("Log", str(get_log_path())))
    return rows


def render_error(stage: str, exc: BaseException, *, stream: IO[str] | None = None) -> None:
    """Report a failed stage (e.g. ``"rendering to wav"``) and where it stopped."""
    target = stream or sys.stderr
    rows = _failure_rows(stage, exc)
    debug = bool(os.environ.get(DEBUG_ENV))
    if not target.isatty():
        target.write(" | ".join(f"{key}: {value}" for key, value in rows) + "\n")
        if debug:
            traceback.print_exception(type(exc), exc, exc.__traceback__, file=target)
        return

    grid = Table.grid(padding=(0, 2))
    grid.add_column(style="bold")
    grid.add_column()
    for key, value in rows:
        grid.add_row(key, value, style="red" if key == "Error" else None)
    console = Console(file=target)
    console.print(Panel(grid, title="tactsynth failed", border_style="red"))
    if debug:
        console.print(Traceback.from_exception(type(exc), exc, exc.__traceback__))
    else:
        console.print(f"Set {DEBUG_ENV}=1 for the full trace.", style="dim")
