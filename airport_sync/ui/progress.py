"""Terminal progress helpers with Rich-based rendering."""

from __future__ import annotations

from dataclasses import dataclass
from threading import Lock

from rich.console import Console
from rich.errors import LiveError
from rich.progress import (
    BarColumn,
    Progress,
    ProgressColumn,
    SpinnerColumn,
    Task,
    TaskID,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.text import Text


@dataclass
class ProgressState:
    records: int = 0


class RateColumn(ProgressColumn):
    """Pages fetched per second."""

    def render(self, task: Task) -> Text:
        speed = task.finished_speed or task.speed
        if speed is None:
            return Text("", style="progress.percentage")
        return Text(f"{speed:.1f} page/s", style="progress.percentage")


class ProgressReporter:
    """Render per-page progress with a thread-safe record counter."""

    def __init__(self, enabled: bool = True, label: str = "airports") -> None:
        self.enabled = enabled
        self.state: ProgressState | None = None
        self._label = label
        self._console: Console | None = None
        self._progress: Progress | None = None
        self._task_id: TaskID | None = None
        self._lock = Lock()

    def start(self, total_pages: int) -> None:
        self.state = ProgressState()
        if not self.enabled:
            return
        self._console = Console()
        if not self._console.is_terminal:
            # Non-interactive output falls back to log lines only.
            self._console = None
            self.enabled = False
            return
        self._progress = Progress(
            SpinnerColumn(style="cyan"),
            TextColumn("[bold blue]{task.fields[label]:<10}", justify="left"),
            BarColumn(bar_width=None, complete_style="green", finished_style="green"),
            TaskProgressColumn(show_speed=False),
            TimeElapsedColumn(),
            RateColumn(),
            TextColumn("[green]{task.fields[records]:>6} records", justify="right"),
            TextColumn("[dim]offset {task.fields[offset]}", justify="left"),
            refresh_per_second=12,
            expand=True,
            transient=True,
            console=self._console,
        )
        try:
            self._progress.__enter__()
        except LiveError:
            self.enabled = False
            self._progress = None
            self._console = None
            return
        self._task_id = self._progress.add_task(
            "sync",
            total=total_pages,
            label=self._label,
            records=0,
            offset="-",
        )

    def advance(self, offset: int, count: int) -> None:
        if self.state is None:
            raise RuntimeError("ProgressReporter.start must be called before advance")
        with self._lock:
            self.state.records += count
            records = self.state.records
        if self._progress is not None and self._task_id is not None:
            self._progress.update(self._task_id, advance=1, records=records, offset=offset)

    def close(self) -> None:
        if self._progress is not None:
            self._progress.stop()
            self._progress.__exit__(None, None, None)
            self._progress = None
        self._task_id = None


__all__ = ["ProgressReporter", "ProgressState", "RateColumn"]
