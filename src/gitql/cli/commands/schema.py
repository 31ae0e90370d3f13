"""gitql schema -- show the columns of the virtual tables."""

from __future__ import annotations

import click

from gitql.cli.formatting import format_schema, get_console
from gitql.models.schema import COMMITS_SCHEMA, REFS_SCHEMA


@click.command()
@click.pass_context
def schema(ctx: click.Context) -> None:
    """Show the columns of the commits and refs tables."""
    from gitql.cli import _get_config

    config = _get_config(ctx)
    console = get_console()
    format_schema(config.commits_table, config.commits_module, COMMITS_SCHEMA, console)
    console.print()
    format_schema(config.refs_table, config.refs_module, REFS_SCHEMA, console)
