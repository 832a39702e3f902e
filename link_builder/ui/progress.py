"""Terminal progress for the preview generator, rendered with Rich."""

from __future__ import annotations

from dataclasses import dataclass

from rich.console import Console
from rich.errors import LiveError
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)

MAX_URL_DISPLAY_LENGTH = 60
TASK_LABEL = "previews"


@dataclass
class ProgressState:
    total: int
    success: int = 0
    failed: int = 0
    skipped: int = 0
    current_url: str | None = None


def shorten_url(url: str, limit: int = MAX_URL_DISPLAY_LENGTH) -> str:
    if len(url) <= limit:
        return url
    return url[: limit - 3] + "..."


class ProgressReporter:
    """Render progress and maintain counters for CLI feedback.

    ``success`` counts fetched previews, ``skipped`` cache hits and ``failed``
    URLs that produced no preview.
    """

    def __init__(self, enabled: bool = True, console: Console | None = None) -> None:
        self.enabled = enabled
        self._console = console
        self._progress: Progress | None = None
        self._task_id: TaskID | None = None
        self.state: ProgressState | None = None

    def start(self, total: int) -> None:
        self.state = ProgressState(total=total)
        if not self.enabled:
            return
        console = self._console or Console()
        if not console.is_terminal:
            # non-interactive output: keep counters, skip rendering
            self.enabled = False
            return
        self._progress = Progress(
            SpinnerColumn(style="cyan"),
            TextColumn("[bold blue]{task.fields[label]:<10}", justify="left"),
            BarColumn(bar_width=None, complete_style="green", finished_style="green"),
            TaskProgressColumn(show_speed=False),
            TimeElapsedColumn(),
            TextColumn("[green]✓{task.fields[success]:>3}", justify="right"),
            TextColumn("[red]✗{task.fields[failed]:>3}", justify="right"),
            TextColumn("[yellow]↺{task.fields[skipped]:>3}", justify="right"),
            TextColumn("[dim]{task.fields[current_url]}", justify="left"),
            console=console,
            transient=True,
            expand=True,
        )
        try:
            self._progress.start()
        except LiveError:
            self.enabled = False
            self._progress = None
            return
        self._task_id = self._progress.add_task(
            "previews",
            total=total,
            label=TASK_LABEL,
            success=0,
            failed=0,
            skipped=0,
            current_url="",
        )

    def advance(
        self,
        success: bool = False,
        failed: bool = False,
        skipped: bool = False,
        current_url: str | None = None,
    ) -> None:
        if not self.state:
            raise RuntimeError("ProgressReporter.start must be called before advance")
        if current_url:
            self.state.current_url = current_url
        if success:
            self.state.success += 1
        if failed:
            self.state.failed += 1
        if skipped:
            self.state.skipped += 1
        if self._progress is not None and self._task_id is not None:
            self._progress.update(
                self._task_id,
                advance=1,
                success=self.state.success,
                failed=self.state.failed,
                skipped=self.state.skipped,
                current_url=shorten_url(self.state.current_url or ""),
            )

    def close(self) -> None:
        if self._progress is not None:
            self._progress.stop()
            self._progress = None
        self._task_id = None

    def summary(self) -> dict[str, int]:
        if not self.state:
            return {"success": 0, "failed": 0, "skipped": 0}
        return {
            "success": self.state.success,
            "failed": self.state.failed,
            "skipped": self.state.skipped,
        }


__all__ = ["ProgressReporter", "ProgressState", "shorten_url"]
