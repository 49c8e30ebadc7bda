"""CLI progress display for deploys.

This module provides a Rich-based spinner that follows the build status
reported by the DeploymentPoller.
"""

from typing import Optional

from rich.progress import (
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)

from .output import OutputFormatter
from .poller import DeploymentPoller, PollResult


class DeployProgressDisplay:
    """Rich-based spinner showing the latest build status.

    Nothing is rendered in quiet or JSON mode; status updates are then
    ignored.
    """

    def __init__(
        self, out: OutputFormatter, description: str = "Building..."
    ) -> None:
        """Initialize the progress display.

        Args:
            out: Output formatter whose console is used for rendering
            description: Text shown until the first status arrives
        """
        self.out = out
        self.description = description
        self.last_status: Optional[str] = None
        self._progress: Optional[Progress] = None
        self._task: Optional[TaskID] = None

    def update_status(self, status: str) -> None:
        """Show the latest status next to the spinner."""
        self.last_status = status
        if self._progress is not None and self._task is not None:
            self._progress.update(self._task, description=f"Status: {status}...")

    def __enter__(self) -> "DeployProgressDisplay":
        """Enter context manager - start progress display."""
        if not self.out.interactive:
            return self
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("[bold blue]{task.description}"),
            TimeElapsedColumn(),
            console=self.out.console,
            transient=True,
            refresh_per_second=4,
        )
        self._progress.__enter__()
        self._task = self._progress.add_task(self.description, total=None)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit context manager - stop progress display."""
        if self._progress is not None:
            self._progress.__exit__(exc_type, exc_val, exc_tb)
            self._progress = None
            self._task = None


def run_poll_with_progress(
    poller: DeploymentPoller, out: OutputFormatter
) -> PollResult:
    """Run a poller while showing its status updates.

    Any ``on_status`` callback already set on the poller is still called.

    Args:
        poller: Configured DeploymentPoller
        out: Output formatter

    Returns:
        The poller's result
    """
    previous_callback = poller.on_status

    with DeployProgressDisplay(out) as display:

        def on_status(status: str) -> None:
            display.update_status(status)
            if previous_callback is not None:
                previous_callback(status)

        poller.on_status = on_status
        try:
            return poller.poll()
        finally:
            poller.on_status = previous_callback
