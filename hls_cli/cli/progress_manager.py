"""
Manages a Rich progress bar showing how many segments have been downloaded.
"""

import asyncio
import logging

from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
    TimeRemainingColumn,
)

log = logging.getLogger("hls_cli")


class ProgressManager:
    """Displays segments completed out of the total while a download runs."""

    def __init__(self, console: Console, enabled: bool = True):
        self.console = console
        self.enabled = enabled
        self.progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(bar_width=40),
            MofNCompleteColumn(),
            "[progress.percentage]{task.percentage:>3.0f}%",
            "•",
            TimeElapsedColumn(),
            "•",
            TimeRemainingColumn(),
            console=console,
            transient=False,
        )
        self._task_id: TaskID | None = None
        self._completed = 0
        self._total = 0

    @property
    def completed(self) -> int:
        return self._completed

    @property
    def total(self) -> int:
        return self._total

    def start(self, total: int) -> None:
        self._total = total
        self._completed = 0
        if not self.enabled:
            return
        if self._task_id is None:
            self._task_id = self.progress.add_task("Downloading segments", total=total)
        else:
            self.progress.update(self._task_id, total=total, completed=0)

    def update(self, completed: int, total: int) -> None:
        self._completed = completed
        self._total = total
        if self.enabled and self._task_id is not None:
            self.progress.update(self._task_id, completed=completed, total=total)
        elif not self.enabled:
            log.info(f"Downloaded segment {completed}/{total}")

    def get_statistics(self) -> dict:
        return {"completed": self._completed, "total": self._total}

    async def __aenter__(self):
        if self.enabled:
            self.progress.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self.enabled:
            await asyncio.sleep(0.1)
            self.progress.stop()
