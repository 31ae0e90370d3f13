"""The gitql data sources: commit history and references."""

from gitql.sources.commits import CommitsCursor, CommitsModule, CommitsTable
from gitql.sources.refs import RefsCursor, RefsModule, RefsTable, RefType, classify_reference

__all__ = [
    "CommitsCursor",
    "CommitsModule",
    "CommitsTable",
    "RefType",
    "RefsCursor",
    "RefsModule",
    "RefsTable",
    "classify_reference",
]
