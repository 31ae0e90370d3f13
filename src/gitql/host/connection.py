"""Connection helpers: open SQLite through apsw with gitql attached.

Provides connection creation with the module registry applied, virtual
table creation for a repository, and a dict-row query helper.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from typing import Any

import apsw

from gitql.host.apsw_bridge import register_modules
from gitql.models.config import GitqlConfig
from gitql.registry import (
    COMMITS_MODULE_NAME,
    REFS_MODULE_NAME,
    ModuleRegistry,
    build_registry,
)

logger = logging.getLogger(__name__)


def _quote_identifier(name: str) -> str:
    return '"' + name.replace('"', '""') + '"'


def create_connection(
    registry: ModuleRegistry | None = None,
    database: str = ":memory:",
) -> apsw.Connection:
    """Open an apsw connection with every registry module registered.

    Args:
        registry: Modules to register. Defaults to build_registry().
        database: SQLite filename, or ``":memory:"``.
    """
    if registry is None:
        registry = build_registry()
    connection = apsw.Connection(database)
    register_modules(connection, registry)
    return connection


def attach_repository(
    connection: apsw.Connection,
    repo_path: str,
    *,
    commits_table: str = "commits",
    refs_table: str = "refs",
    commits_module: str = COMMITS_MODULE_NAME,
    refs_module: str = REFS_MODULE_NAME,
) -> None:
    """Create the commit and reference virtual tables for ``repo_path``.

    Raises:
        ModuleConnectError: The repository could not be opened.
    """
    quoted_path = _quote_identifier(repo_path)
    for table, module in ((commits_table, commits_module), (refs_table, refs_module)):
        connection.execute(
            f"CREATE VIRTUAL TABLE {_quote_identifier(table)} "
            f"USING {module}({quoted_path})"
        )
        logger.debug("Created virtual table %s using %s", table, module)


def open_database(
    config: GitqlConfig,
    registry: ModuleRegistry | None = None,
) -> apsw.Connection:
    """Open a connection and attach the configured repository."""
    if registry is None:
        registry = build_registry(
            commits_module=config.commits_module,
            refs_module=config.refs_module,
        )
    connection = create_connection(registry, config.database)
    try:
        attach_repository(
            connection,
            config.repo_path,
            commits_table=config.commits_table,
            refs_table=config.refs_table,
            commits_module=config.commits_module,
            refs_module=config.refs_module,
        )
    except Exception:
        connection.close()
        raise
    return connection


def query(
    connection: apsw.Connection,
    sql: str,
    bindings: Sequence[Any] = (),
) -> Iterator[dict[str, Any]]:
    """Execute ``sql`` and yield each row as a column-name keyed dict."""
    cursor = connection.cursor()
    try:
        columns: list[str] | None = None
        for row in cursor.execute(sql, bindings):
            if columns is None:
                columns = [name for name, _ in cursor.getdescription()]
            yield dict(zip(columns, row))
    finally:
        cursor.close()
