"""Console output for CLI commands, built on rich.

Usage:
    from trieve_cli.cli.console import console

    console.print("Dataset created.", style="green")
    console.print_error("Something went wrong")
    console.data_table(["ID", "Name"], rows, title="Datasets")
"""

from __future__ import annotations

from collections.abc import Sequence

from rich import box
from rich.console import Console as RichConsole
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table


class Console:
    """Thin wrapper around two rich consoles (stdout and stderr)."""

    def __init__(self) -> None:
        self._out = RichConsole(highlight=False, soft_wrap=True)
        self._err = RichConsole(stderr=True, highlight=False, soft_wrap=True)

    def print(self, message: object = "", *, style: str | None = None) -> None:
        self._out.print(message, style=style)

    def print_error(self, message: str) -> None:
        self._err.print(escape(message), style="bold red")

    def panel(self, title: str, body: str, *, style: str = "cyan") -> None:
        self._out.print(
            Panel(escape(body), title=escape(title), border_style=style, expand=False)
        )

    def table(self, rows: Sequence[tuple[str, str]]) -> None:
        """Print aligned key/value rows."""
        grid = Table.grid(padding=(0, 2))
        grid.add_column(style="bold")
        grid.add_column()
        for key, value in rows:
            grid.add_row(escape(key), escape(value))
        self._out.print(grid)

    def data_table(
        self,
        headers: Sequence[str],
        rows: Sequence[Sequence[str]],
        *,
        title: str | None = None,
    ) -> None:
        """Print a bordered table with a header row."""
        table = Table(title=title, box=box.ROUNDED, title_justify="left")
        for header in headers:
            table.add_column(header, overflow="fold")
        for row in rows:
            table.add_row(*(escape(str(cell)) for cell in row))
        self._out.print(table)


console = Console()

__all__ = ["Console", "console"]
