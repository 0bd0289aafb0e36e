"""
Terminal output: live per-job progress bars and colored outcome lines.

Everything is drawn through one shared `rich.console.Console`. `rich.progress.Progress`
is internally locked, so conversion threads update their own bars concurrently
without corrupting the display.
"""

from datetime import timedelta
from typing import Dict, Iterable, Optional

from rich.console import Console
from rich.markup import escape
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress as RichProgress,
    TaskID,
    TaskProgressColumn,
    TextColumn,
    TimeRemainingColumn,
)

from ..domain.models import Job, JobOutcome, Progress
from ..utils.format_utils import format_timedelta


class ProgressDisplay:
    """A multi-bar progress display with one bar per job."""

    def __init__(self, console: Optional[Console] = None, disable: bool = False):
        self.console = console or Console()
        self.progress = RichProgress(
            TextColumn("[bold cyan]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            MofNCompleteColumn(),
            TimeRemainingColumn(),
            console=self.console,
            disable=disable,
        )
        self._totals: Dict[TaskID, int] = {}
        self._descriptions: Dict[TaskID, str] = {}

    def __enter__(self) -> "ProgressDisplay":
        self.progress.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.progress.stop()

    def add_job(self, job: Job, frame_count: int) -> TaskID:
        description = escape(job.input_path.name)
        task_id = self.progress.add_task(description, total=frame_count)
        self._totals[task_id] = frame_count
        self._descriptions[task_id] = description
        return task_id

    def update(self, task_id: TaskID, progress: Progress):
        # The frame count is a packet count and may be off by a few frames,
        # so the end snapshot always fills the bar.
        completed = self._totals[task_id] if progress.is_end else progress.frame
        self.progress.update(task_id, completed=completed)

    def finish_job(self, task_id: TaskID, success: bool):
        if not success:
            self.progress.update(task_id, description=f"[red]{self._descriptions[task_id]} (failed)[/red]")
        self.progress.stop_task(task_id)


class OutcomeReporter:
    """
    Prints job outcomes.

    Success lines show the output path. Failure lines show the input path, and
    the full FFmpeg diagnostics only when `verbose` is set.
    """

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def header(self, codec: Optional[str]):
        if codec:
            self.console.print(f"Converting file(s) with [cyan]{escape(codec)}[/cyan]:")
        else:
            self.console.print("Converting:")

    def report(self, outcome: JobOutcome, verbose: bool = False):
        if outcome.success:
            self.console.print(f"[green]Converted[/green] {escape(str(outcome.job.output_path))}")
            return

        self.console.print(f"[red]Failed[/red] {escape(str(outcome.job.input_path))}")
        if verbose:
            self.console.print(outcome.diagnostics, markup=False, highlight=False)

    def summary(self, outcomes: Iterable[JobOutcome], elapsed: timedelta):
        outcomes = list(outcomes)
        succeeded = sum(1 for o in outcomes if o.success)
        failed = len(outcomes) - succeeded
        line = f"Successfully converted [green]{succeeded}[/green] file(s)"
        if failed:
            line += f", [red]{failed}[/red] failed"
        self.console.print(f"{line} in {format_timedelta(elapsed)}")
