"""Console helpers for Rich output."""

from __future__ import annotations

import sys
from typing import Any

from rich.console import Console
from rich.table import Table


def create_console() -> Console:
    """Create a Rich Console writing to stdout."""
    return Console(file=sys.stdout, force_terminal=None, legacy_windows=False, safe_box=True)


def print_success(message: str, console: Console | None = None) -> None:
    """Print a success message."""
    (console or create_console()).print(f"[green]OK[/green] {message}")


def print_warning(message: str, console: Console | None = None) -> None:
    """Print a warning message."""
    (console or create_console()).print(f"[yellow]Warning:[/yellow] {message}")


def print_mapping(
    title: str,
    data: dict[str, Any],
    console: Console | None = None,
) -> None:
    """Print a two column key/value table, keys sorted."""
    table = Table(title=title)
    table.add_column("Key", style="cyan")
    table.add_column("Value", style="green")
    for key in sorted(data):
        table.add_row(key, str(data[key]))
    (console or create_console()).print(table)
