"""Row schema registry for the gitql virtual tables.

Each source declares a fixed, ordered column list. The same TableSchema
renders the CREATE TABLE statement handed to the host and resolves the
column indices the host uses in constraints and projections.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass


class ColumnType(str, enum.Enum):
    """SQL type affinities used in declarations."""

    TEXT = "TEXT"
    INTEGER = "INTEGER"
    DATETIME = "DATETIME"
    BOOL = "BOOL"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ColumnSpec:
    """One declared column."""

    name: str
    type: ColumnType
    primary_key: bool = False

    def ddl(self) -> str:
        suffix = " PRIMARY KEY" if self.primary_key else ""
        return f"{self.name} {self.type}{suffix}"


@dataclass(frozen=True)
class TableSchema:
    """Ordered column list for one virtual table."""

    name: str
    columns: tuple[ColumnSpec, ...]

    def __post_init__(self) -> None:
        keys = [c.name for c in self.columns if c.primary_key]
        if len(keys) != 1:
            raise ValueError(
                f"schema {self.name!r} needs exactly one primary key, found {keys}"
            )

    def __len__(self) -> int:
        return len(self.columns)

    @property
    def column_names(self) -> list[str]:
        return [c.name for c in self.columns]

    def index_of(self, name: str) -> int:
        """Column index for ``name``. Raises KeyError if undeclared."""
        for i, column in enumerate(self.columns):
            if column.name == name:
                return i
        raise KeyError(f"{self.name} has no column {name!r}")

    def column_name(self, index: int) -> str:
        """Column name for ``index``; -1 is the host's rowid pseudo-column."""
        if index == -1:
            return "rowid"
        return self.columns[index].name

    def declaration(self, table_name: str) -> str:
        """CREATE TABLE statement for the host's schema declaration.

        Declared WITHOUT ROWID: the primary key is the row identity.
        """
        body = ",\n".join(f"    {c.ddl()}" for c in self.columns)
        quoted = table_name.replace('"', '""')
        return f'CREATE TABLE "{quoted}"(\n{body}\n) WITHOUT ROWID'


COMMITS_SCHEMA = TableSchema(
    name="commits",
    columns=(
        ColumnSpec("hash", ColumnType.TEXT, primary_key=True),
        ColumnSpec("message", ColumnType.TEXT),
        ColumnSpec("author_name", ColumnType.TEXT),
        ColumnSpec("author_email", ColumnType.TEXT),
        ColumnSpec("author_when", ColumnType.DATETIME),
        ColumnSpec("committer_name", ColumnType.TEXT),
        ColumnSpec("committer_email", ColumnType.TEXT),
        ColumnSpec("committer_when", ColumnType.DATETIME),
        ColumnSpec("parent_id", ColumnType.TEXT),
        ColumnSpec("parent_count", ColumnType.INTEGER),
        ColumnSpec("tree_id", ColumnType.TEXT),
        ColumnSpec("addition", ColumnType.INTEGER),
        ColumnSpec("deletion", ColumnType.INTEGER),
    ),
)

REFS_SCHEMA = TableSchema(
    name="refs",
    columns=(
        ColumnSpec("name", ColumnType.TEXT, primary_key=True),
        ColumnSpec("hash", ColumnType.TEXT),
        ColumnSpec("type", ColumnType.TEXT),
        ColumnSpec("remote", ColumnType.BOOL),
    ),
)

# Column indices, in declaration order.
COL_COMMIT_HASH = COMMITS_SCHEMA.index_of("hash")
COL_COMMIT_MESSAGE = COMMITS_SCHEMA.index_of("message")
COL_COMMIT_AUTHOR_NAME = COMMITS_SCHEMA.index_of("author_name")
COL_COMMIT_AUTHOR_EMAIL = COMMITS_SCHEMA.index_of("author_email")
COL_COMMIT_AUTHOR_WHEN = COMMITS_SCHEMA.index_of("author_when")
COL_COMMIT_COMMITTER_NAME = COMMITS_SCHEMA.index_of("committer_name")
COL_COMMIT_COMMITTER_EMAIL = COMMITS_SCHEMA.index_of("committer_email")
COL_COMMIT_COMMITTER_WHEN = COMMITS_SCHEMA.index_of("committer_when")
COL_COMMIT_PARENT_ID = COMMITS_SCHEMA.index_of("parent_id")
COL_COMMIT_PARENT_COUNT = COMMITS_SCHEMA.index_of("parent_count")
COL_COMMIT_TREE_ID = COMMITS_SCHEMA.index_of("tree_id")
COL_COMMIT_ADDITION = COMMITS_SCHEMA.index_of("addition")
COL_COMMIT_DELETION = COMMITS_SCHEMA.index_of("deletion")

COL_REF_NAME = REFS_SCHEMA.index_of("name")
COL_REF_HASH = REFS_SCHEMA.index_of("hash")
COL_REF_TYPE = REFS_SCHEMA.index_of("type")
COL_REF_REMOTE = REFS_SCHEMA.index_of("remote")
