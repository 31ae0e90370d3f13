"""gitql CLI -- run SQL against a git repository from the terminal.

This module is NEVER imported from gitql/__init__.py.
It is only loaded via the ``gitql`` entry point defined in pyproject.toml.
"""

from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from typing import TYPE_CHECKING

try:
    import click
except ImportError:
    raise ImportError(
        "CLI dependencies not installed. Install with: pip install gitql[cli]"
    ) from None

from gitql.cli.formatting import format_error, get_console
from gitql.models.config import GitqlConfig

if TYPE_CHECKING:
    from collections.abc import Iterator

    import apsw
    from rich.console import Console


@click.group()
@click.option(
    "--repo",
    default=".",
    envvar="GITQL_REPO",
    help="Path to git repository.",
)
@click.option(
    "--db",
    default=":memory:",
    envvar="GITQL_DB",
    help="SQLite database the virtual tables are created in.",
)
@click.option("-v", "--verbose", is_flag=True, help="Log planning and scan details to stderr.")
@click.pass_context
def cli(ctx: click.Context, repo: str, db: str, verbose: bool) -> None:
    """gitql: query git commits and references with SQL."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="gitql: %(name)s: %(message)s")
    ctx.ensure_object(dict)
    ctx.obj["config"] = GitqlConfig(repo_path=os.path.abspath(repo), database=db)


def _get_config(ctx: click.Context) -> GitqlConfig:
    return ctx.obj["config"]


@contextmanager
def _gitql_session(ctx: click.Context) -> Iterator[tuple[apsw.Connection, Console]]:
    """Open a connection with the repository attached, yield (connection, console).

    Ensures the connection is closed on exit and formats exceptions as CLI errors.
    """
    from gitql.host.connection import open_database

    console = get_console()
    try:
        connection = open_database(_get_config(ctx))
        try:
            yield connection, console
        finally:
            connection.close()
    except SystemExit:
        raise
    except Exception as e:
        format_error(str(e), console)
        raise SystemExit(1) from None


# Register subcommands after cli group is defined
from gitql.cli.commands.query import query  # noqa: E402
from gitql.cli.commands.schema import schema  # noqa: E402

cli.add_command(query)
cli.add_command(schema)
