"""
Progress sinks for batch runs.

The scheduler only needs three operations: start(total), advance(label)
and finish(). RichProgress draws a bar on stderr; NullProgress draws
nothing and remembers the labels (quiet mode, tests).
"""

from __future__ import annotations

from typing import List, Optional

from rich.console import Console
from rich.progress import BarColumn, Progress, TextColumn, TimeRemainingColumn

from regfetch.logs import console as log_console


class ProgressSink:
    def start(self, total: int) -> None:
        raise NotImplementedError

    def advance(self, label: str) -> None:
        raise NotImplementedError

    def finish(self) -> None:
        raise NotImplementedError


class NullProgress(ProgressSink):
    def __init__(self) -> None:
        self.total: Optional[int] = None
        self.labels: List[str] = []
        self.finished = False

    def start(self, total: int) -> None:
        self.total = total

    def advance(self, label: str) -> None:
        self.labels.append(label)

    def finish(self) -> None:
        self.finished = True


class RichProgress(ProgressSink):
    def __init__(self, console: Optional[Console] = None) -> None:
        self.progress = Progress(
            TextColumn("{task.description:<13}"),
            BarColumn(bar_width=None),
            TextColumn("{task.completed}/{task.total}"),
            TimeRemainingColumn(),
            console=console or log_console,
        )
        self.task_id = None

    def start(self, total: int) -> None:
        self.progress.start()
        self.task_id = self.progress.add_task("LOADING", total=total)

    def advance(self, label: str) -> None:
        self.progress.update(self.task_id, description=label, advance=1)

    def finish(self) -> None:
        self.progress.stop()
