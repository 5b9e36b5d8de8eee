#!/usr/bin/env python
"""
Output formatting with Rich console.
"""

from __future__ import annotations

from typing import Iterable

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.theme import Theme

from hostpin.trust.models import StoreRecord


# Custom theme for hostpin CLI
custom_theme = Theme({
    "info": "cyan",
    "warning": "yellow",
    "error": "red",
    "success": "green",
})


class ConsoleOutput:
    """Console output with Rich formatting."""

    def __init__(self, console: Console = None):
        self.console = console or Console(theme=custom_theme)

    def print(self, text: str = "", **kwargs):
        """Print text to console."""
        self.console.print(text, **kwargs)

    def print_error(self, text: str):
        """Print error text (plain, not markup)."""
        self.console.print(f"[red]Error:[/red] {escape(text)}")

    def print_success(self, text: str):
        """Print success text (plain, not markup)."""
        self.console.print(f"[green]Success:[/green] {escape(text)}")

    def print_warning(self, text: str):
        """Print warning text (plain, not markup)."""
        self.console.print(f"[yellow]Warning:[/yellow] {escape(text)}")

    def print_records(self, records: Iterable[StoreRecord], title: str = ""):
        """Print known-hosts records as a table."""
        table = Table(title=escape(title) if title else None)
        table.add_column("Host", style="bold")
        table.add_column("Fingerprint")
        for record in records:
            table.add_row(escape(record.host_key), escape(record.fingerprint))
        self.console.print(table)
