"""gitql query -- run a SQL statement against the commits and refs tables."""

from __future__ import annotations

import sys

import click

from gitql.cli.formatting import format_error, format_rows_json, format_rows_table, get_console


def _read_query(sql: str | None) -> str | None:
    """The query argument, or piped stdin when no argument was given."""
    if sql:
        return sql
    stdin = sys.stdin
    if stdin.isatty():
        return None
    text = stdin.read().strip()
    return text or None


@click.command()
@click.argument("sql", required=False)
@click.option(
    "-f", "--format", "output_format",
    default="json",
    type=click.Choice(["json", "table"], case_sensitive=False),
    help="Output format.",
)
@click.pass_context
def query(ctx: click.Context, sql: str | None, output_format: str) -> None:
    """Run SQL against the commits and refs tables.

    Reads the statement from standard input when SQL is omitted.
    """
    from gitql.cli import _gitql_session
    from gitql.host.connection import query as run_query

    statement = _read_query(sql)
    if statement is None:
        format_error("please provide a valid sql query", get_console())
        raise SystemExit(1)

    with _gitql_session(ctx) as (connection, console):
        rows = run_query(connection, statement)
        if output_format.lower() == "table":
            format_rows_table(rows, console)
        else:
            format_rows_json(rows)
