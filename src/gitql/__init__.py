"""gitql: query git commits and references with SQL.

Registers SQLite virtual tables (git_log, git_ref) that push hash and
committer-time predicates down into native git traversals.
"""

from gitql._version import __version__

# Sources and registry
from gitql.registry import ModuleRegistry, build_registry
from gitql.sources import CommitsModule, RefsModule, RefType

# Session helpers
from gitql.host import attach_repository, create_connection, open_database, query

# Configuration and schemas
from gitql.models import COMMITS_SCHEMA, REFS_SCHEMA, GitqlConfig

# Exceptions
from gitql.exceptions import (
    ErrorKind,
    GitqlError,
    ModuleConnectError,
    NoRowidError,
    PlanningError,
)

__all__ = [
    "COMMITS_SCHEMA",
    "CommitsModule",
    "ErrorKind",
    "GitqlConfig",
    "GitqlError",
    "ModuleConnectError",
    "ModuleRegistry",
    "NoRowidError",
    "PlanningError",
    "REFS_SCHEMA",
    "RefType",
    "RefsModule",
    "__version__",
    "attach_repository",
    "build_registry",
    "create_connection",
    "open_database",
    "query",
]
