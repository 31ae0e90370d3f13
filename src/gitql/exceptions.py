"""gitql exception hierarchy.

All gitql-specific exceptions inherit from GitqlError and carry an
ErrorKind so callers can branch on the category without importing
every concrete class.
"""

from __future__ import annotations

import enum


class ErrorKind(str, enum.Enum):
    """Categories of failure surfaced by the virtual tables."""

    GENERAL = "general"
    CONNECTION = "connection"
    PLANNING = "planning"
    LOOKUP = "lookup"
    PARSE = "parse"
    DERIVED_DATA = "derived_data"
    CURSOR = "cursor"
    NO_ROWID = "no_rowid"

    def __str__(self) -> str:
        return self.value


class GitqlError(Exception):
    """Base exception for all gitql errors."""

    kind: ErrorKind = ErrorKind.GENERAL


# ---------------------------------------------------------------------------
# Connection errors
# ---------------------------------------------------------------------------


class ModuleConnectError(GitqlError):
    """Raised when a virtual table cannot be established."""

    kind = ErrorKind.CONNECTION


class TooManyArgumentsError(ModuleConnectError):
    """Raised when CREATE VIRTUAL TABLE passes more than the repository path."""

    def __init__(self, count: int) -> None:
        self.count = count
        super().__init__(
            f"supplied more than required number of arguments ({count} given)"
        )


class MissingPathError(ModuleConnectError):
    """Raised when CREATE VIRTUAL TABLE omits the repository path."""

    def __init__(self) -> None:
        super().__init__("missing required argument: path to git repository")


class MalformedPathError(ModuleConnectError):
    """Raised when the repository path argument is not a quoted string."""

    def __init__(self, raw: str) -> None:
        self.raw = raw
        super().__init__(f"repository path must be a quoted string, got {raw!r}")


class RepositoryOpenError(ModuleConnectError):
    """Raised when the path does not hold a readable git repository."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"cannot open git repository at {path}: {reason}")


# ---------------------------------------------------------------------------
# Planning errors
# ---------------------------------------------------------------------------


class PlanningError(GitqlError):
    """Raised when an offered predicate combination cannot be planned."""

    kind = ErrorKind.PLANNING


class ConstraintConflictError(PlanningError):
    """Raised when two predicates compete for the same native slot."""

    def __init__(self, column: str, family: str) -> None:
        self.column = column
        self.family = family
        super().__init__(
            f"cannot push down more than one {family} constraint on {column}"
        )


# ---------------------------------------------------------------------------
# Scan-time errors
# ---------------------------------------------------------------------------


class CommitLookupError(GitqlError):
    """Raised when resolving a commit hash fails for a reason other than a miss."""

    kind = ErrorKind.LOOKUP

    def __init__(self, commit_hash: str, reason: str) -> None:
        self.commit_hash = commit_hash
        self.reason = reason
        super().__init__(f"failed to look up {commit_hash}: {reason}")


class TimestampParseError(GitqlError):
    """Raised when a bound timestamp is not valid RFC 3339 text."""

    kind = ErrorKind.PARSE

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(f"cannot parse {value!r} as an RFC 3339 timestamp")


class StatsComputationError(GitqlError):
    """Raised when diff statistics for a commit cannot be computed."""

    kind = ErrorKind.DERIVED_DATA

    def __init__(self, commit_hash: str, reason: str) -> None:
        self.commit_hash = commit_hash
        self.reason = reason
        super().__init__(f"cannot compute stats for {commit_hash}: {reason}")


class ReferenceResolutionError(GitqlError):
    """Raised when a symbolic reference cannot be resolved to a hash."""

    kind = ErrorKind.DERIVED_DATA

    def __init__(self, ref_name: str, reason: str) -> None:
        self.ref_name = ref_name
        self.reason = reason
        super().__init__(f"cannot resolve reference {ref_name}: {reason}")


class CursorStateError(GitqlError):
    """Raised when a column is read from a cursor with no current row."""

    kind = ErrorKind.CURSOR


class NoRowidError(GitqlError):
    """Raised by every cursor: the tables are declared WITHOUT ROWID."""

    kind = ErrorKind.NO_ROWID

    def __init__(self, table: str) -> None:
        self.table = table
        super().__init__(f"cannot generate rowid for {table}")
