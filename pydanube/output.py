"""Output formatting for the CLI."""

import json
from collections.abc import Sequence
from typing import Any, Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text

from .utils import format_size

STATUS_STYLES = {
    "live": "green",
    "active": "green",
    "verified": "green",
    "pending": "yellow",
    "uploading": "yellow",
    "processing": "yellow",
    "deploying": "yellow",
    "failed": "red",
}


def status_color(status: str) -> Text:
    """Render a build, deployment or domain status with its color."""
    return Text(status, style=STATUS_STYLES.get(status, ""))


class OutputFormatter:
    """Prints user-facing messages, tables and JSON.

    Informational output goes to stdout, warnings and errors to stderr.
    In quiet mode only errors and requested data are printed; in JSON mode
    human-readable chatter is suppressed so stdout stays machine-readable.
    """

    def __init__(self, json_output: bool = False, quiet: bool = False):
        self.json_output = json_output
        self.quiet = quiet
        self.console = Console(highlight=False, soft_wrap=True)
        self.err_console = Console(stderr=True, highlight=False, soft_wrap=True)

    @property
    def interactive(self) -> bool:
        """Whether live displays (spinners) should be shown."""
        return not (self.quiet or self.json_output)

    def print(self, message: Any = "", style: Optional[str] = None) -> None:
        """Print data, shown even in quiet mode."""
        if isinstance(message, str):
            message = Text(message, style=style or "")
        self.console.print(message)

    def info(self, message: str) -> None:
        if self.quiet or self.json_output:
            return
        self.console.print(Text(message))

    def success(self, message: str) -> None:
        if self.quiet or self.json_output:
            return
        self.console.print(Text(message, style="green"))

    def warning(self, message: str) -> None:
        if self.quiet:
            return
        self.err_console.print(Text(message, style="yellow"))

    def error(self, message: str) -> None:
        self.err_console.print(Text(message, style="red"))

    def output_json(self, data: Any) -> None:
        self.console.print_json(json.dumps(data, default=str))

    def output_table(
        self,
        headers: Sequence[str],
        rows: Sequence[Sequence[Any]],
        title: Optional[str] = None,
    ) -> None:
        """Print rows as a table.

        Cells may be strings or rich renderables (e.g. ``status_color``).
        """
        table = Table(title=title, show_edge=False, header_style="bold")
        for header in headers:
            table.add_column(header)
        for row in rows:
            table.add_row(
                *(cell if isinstance(cell, Text) else str(cell) for cell in row)
            )
        self.console.print(table)

    def format_size(self, size_bytes: int) -> str:
        return format_size(size_bytes)
