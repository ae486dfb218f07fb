"""Rich console output for CLI commands."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.table import Table

if TYPE_CHECKING:
    from file_driver.types import FileStat


def _timestamp(value: float) -> str:
    return datetime.fromtimestamp(value).strftime("%Y-%m-%d %H:%M:%S")


class Reporter:
    """Formats driver results and failures for the terminal."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def show_stat(self, info: FileStat) -> None:
        """Display metadata as a two-column table.

        Args:
            info: Metadata returned by FileDriver.stat.
        """
        table = Table(title=info.path, show_header=False)
        table.add_column("Field", style="cyan")
        table.add_column("Value")

        table.add_row("Type", info.kind.value)
        table.add_row("Size", str(info.size))
        table.add_row("Permissions", f"{info.permissions:04o}")
        table.add_row("Owner", f"{info.uid}:{info.gid}")
        table.add_row("Inode", str(info.inode))
        table.add_row("Links", str(info.links))
        table.add_row("Accessed", _timestamp(info.accessed_at))
        table.add_row("Modified", _timestamp(info.modified_at))
        table.add_row("Changed", _timestamp(info.changed_at))

        self.console.print(table)

    def show_paths(self, paths: list[str]) -> None:
        """Print one path per line, or a notice when there are none."""
        if not paths:
            self.show_info("No entries")
            return
        for path in paths:
            self.console.print(path, highlight=False, markup=False, soft_wrap=True)

    def show_text(self, text: str) -> None:
        self.console.print(text, end="", highlight=False, markup=False, soft_wrap=True)

    def show_success(self, message: str) -> None:
        self.console.print(f"[green]✓[/green] {escape(message)}")

    def show_error(self, message: str) -> None:
        self.console.print(f"[red]✗[/red] {escape(message)}")

    def show_info(self, message: str) -> None:
        self.console.print(f"[blue]i[/blue] {escape(message)}")
