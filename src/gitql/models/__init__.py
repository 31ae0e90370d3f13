"""Data models for gitql: table schemas and configuration."""

from gitql.models.config import GitqlConfig, ModuleArguments
from gitql.models.schema import (
    COMMITS_SCHEMA,
    REFS_SCHEMA,
    ColumnSpec,
    ColumnType,
    TableSchema,
)

__all__ = [
    "COMMITS_SCHEMA",
    "ColumnSpec",
    "ColumnType",
    "GitqlConfig",
    "ModuleArguments",
    "REFS_SCHEMA",
    "TableSchema",
]
