"""Host engine integration: SQLite virtual tables through apsw."""

from gitql.host.apsw_bridge import ApswModule, register_modules
from gitql.host.connection import attach_repository, create_connection, open_database, query

__all__ = [
    "ApswModule",
    "attach_repository",
    "create_connection",
    "open_database",
    "query",
    "register_modules",
]
