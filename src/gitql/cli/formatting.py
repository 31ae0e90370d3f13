"""Output helpers for the gitql CLI.

JSON rows go to stdout as plain text so they can be piped; tables and
errors use Rich, which degrades gracefully when stdout is not a TTY.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

if TYPE_CHECKING:
    from gitql.models.schema import TableSchema


def get_console() -> Console:
    """Create a Rich Console that auto-detects TTY for graceful pipe degradation."""
    return Console(stderr=False)


def _json_default(value: object) -> object:
    if isinstance(value, bytes):
        return value.hex()
    return str(value)


def format_rows_json(rows: Iterable[dict[str, Any]]) -> int:
    """Write one indented JSON object per row. Returns the row count."""
    count = 0
    for row in rows:
        click.echo(json.dumps(row, indent=2, default=_json_default))
        count += 1
    return count


def format_rows_table(rows: Iterable[dict[str, Any]], console: Console) -> int:
    """Collect rows into a Rich table. Returns the row count."""
    table: Table | None = None
    count = 0
    for row in rows:
        if table is None:
            table = Table(show_header=True, header_style="bold", box=None, pad_edge=False)
            for name in row:
                table.add_column(name)
        table.add_row(*("" if v is None else escape(str(v)) for v in row.values()))
        count += 1

    if table is None:
        console.print("[dim]No rows.[/dim]")
    else:
        console.print(table)
    return count


def format_schema(table_name: str, module_name: str, schema: TableSchema, console: Console) -> None:
    """Display the declared columns of one virtual table."""
    console.print(f"[bold]{escape(table_name)}[/bold] [dim]using {escape(module_name)}[/dim]")
    for column in schema.columns:
        key = "  [yellow]PRIMARY KEY[/yellow]" if column.primary_key else ""
        console.print(f"  {column.name:<16} [cyan]{column.type}[/cyan]{key}")


def format_error(message: str, console: Console) -> None:
    """Display an error message."""
    console.print(f"[red]Error:[/red] {message}", highlight=False)
