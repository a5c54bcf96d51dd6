"""
CLI utility helpers — console output and error reporting.
"""

from __future__ import annotations

import json
from typing import Any, NoReturn

import typer
from rich.console import Console
from rich.table import Table

console = Console()
err_console = Console(stderr=True)


def print_json(payload: Any) -> None:
    console.print_json(json.dumps(payload, default=str))


def print_dict(data: dict[str, Any], *, title: str = "") -> None:
    """Render a flat dict as a two-column Rich table."""
    table = Table(title=title or None, show_header=False, pad_edge=False)
    table.add_column("Key", style="bold")
    table.add_column("Value", overflow="fold")
    for key, value in data.items():
        table.add_row(str(key), "" if value is None else str(value))
    console.print(table)


def print_rows(rows: list[dict[str, Any]], *, title: str = "") -> None:
    """Render a list of dicts as a Rich table; columns come from the first row."""
    if not rows:
        console.print("[dim]No items.[/dim]")
        return
    table = Table(title=title or None, pad_edge=False)
    for col in rows[0]:
        table.add_column(col, overflow="fold")
    for row in rows:
        table.add_row(*("" if row.get(col) is None else str(row.get(col)) for col in rows[0]))
    console.print(table)


def fail(message: str, *, code: str = "ERROR") -> NoReturn:
    """Print an error and exit with status 1."""
    err_console.print(f"[bold red]Error[/bold red] ({code}): {message}")
    raise typer.Exit(code=1)
