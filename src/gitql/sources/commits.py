"""git_log: the commit-history virtual table.

CommitsModule validates the connect arguments and opens the repository,
CommitsTable plans scans, and CommitsCursor walks history one commit at a
time, projecting columns from the current commit on demand.
"""

from __future__ import annotations

import logging
from typing import Sequence

import pygit2

from gitql.engine.planner import PlanFlags, decode_commit_plan, plan_commits
from gitql.engine.stats import CommitStats, compute_commit_stats
from gitql.engine.timestamps import format_signature_time, parse_timestamp
from gitql.engine.traversal import HistoryWalk, SingleCommitTraversal, Traversal
from gitql.exceptions import CursorStateError, NoRowidError
from gitql.models.config import ModuleArguments
from gitql.models.schema import (
    COL_COMMIT_ADDITION,
    COL_COMMIT_AUTHOR_EMAIL,
    COL_COMMIT_AUTHOR_NAME,
    COL_COMMIT_AUTHOR_WHEN,
    COL_COMMIT_COMMITTER_EMAIL,
    COL_COMMIT_COMMITTER_NAME,
    COL_COMMIT_COMMITTER_WHEN,
    COL_COMMIT_DELETION,
    COL_COMMIT_HASH,
    COL_COMMIT_MESSAGE,
    COL_COMMIT_PARENT_COUNT,
    COL_COMMIT_PARENT_ID,
    COL_COMMIT_TREE_ID,
    COMMITS_SCHEMA,
)
from gitql.protocols import DeclareFn, PlanInput, PlanOutput, SQLiteValue
from gitql.repository import lookup_commit, open_repository

logger = logging.getLogger(__name__)


class CommitsModule:
    """Factory for git_log tables."""

    def connect(self, args: Sequence[str], declare: DeclareFn) -> CommitsTable:
        """Open the repository named in ``args`` and declare the commit schema.

        Raises:
            ModuleConnectError: Wrong argument count, unquoted path, or the
                repository could not be opened.
        """
        arguments = ModuleArguments.from_argv(args)
        repo = open_repository(arguments.repo_path)
        declare(COMMITS_SCHEMA.declaration(arguments.table_name))
        return CommitsTable(repo)


class CommitsTable:
    """A connected git_log relation. Owns the repository handle."""

    schema = COMMITS_SCHEMA

    def __init__(self, repo: pygit2.Repository) -> None:
        self.repo = repo

    def best_index(self, plan_input: PlanInput) -> PlanOutput:
        return plan_commits(plan_input)

    def open(self) -> CommitsCursor:
        return CommitsCursor(self.repo)

    def disconnect(self) -> None:
        pass

    destroy = disconnect


class CommitsCursor:
    """Cursor over commits.

    ``current`` is None before filter(), after exhaustion, and after a
    lookup miss. Diff stats are computed at most once per row.
    """

    def __init__(self, repo: pygit2.Repository) -> None:
        self._repo = repo
        self._traversal: Traversal[pygit2.Commit] | None = None
        self.current: pygit2.Commit | None = None
        self._stats: CommitStats | None = None

    def filter(
        self, index_number: int, index_string: str | None, values: Sequence[SQLiteValue]
    ) -> None:
        """Start a scan for the plan encoded in ``index_number``.

        Raises:
            CommitLookupError: The hash lookup failed for a reason other than a miss.
            TimestampParseError: A bound timestamp is malformed.
        """
        self.close()
        flags = decode_commit_plan(index_number)
        args = iter(values)

        if flags & PlanFlags.HASH:
            committish = next(args)
            commit = lookup_commit(self._repo, str(committish)) if committish is not None else None
            if commit is None:
                logger.debug("No commit for %r, empty result", committish)
                return
            self._traversal = SingleCommitTraversal(commit)
            self.next()
            return

        since = parse_timestamp(next(args)) if flags & PlanFlags.SINCE else None
        until = parse_timestamp(next(args)) if flags & PlanFlags.UNTIL else None
        self._traversal = HistoryWalk(
            self._repo,
            since=since,
            until=until,
            committer_time_order=bool(flags & PlanFlags.ORDER_DESC),
        )
        self.next()

    def next(self) -> None:
        self._stats = None
        if self._traversal is None:
            self.current = None
            return
        try:
            self.current = next(self._traversal)
        except StopIteration:
            self.current = None

    def eof(self) -> bool:
        return self.current is None

    def column(self, index: int) -> SQLiteValue:
        commit = self.current
        if commit is None:
            raise CursorStateError("commits cursor has no current row")

        if index == COL_COMMIT_HASH:
            return str(commit.id)
        if index == COL_COMMIT_MESSAGE:
            return commit.message
        if index == COL_COMMIT_AUTHOR_NAME:
            return commit.author.name
        if index == COL_COMMIT_AUTHOR_EMAIL:
            return commit.author.email
        if index == COL_COMMIT_AUTHOR_WHEN:
            return format_signature_time(commit.author)
        if index == COL_COMMIT_COMMITTER_NAME:
            return commit.committer.name
        if index == COL_COMMIT_COMMITTER_EMAIL:
            return commit.committer.email
        if index == COL_COMMIT_COMMITTER_WHEN:
            return format_signature_time(commit.committer)
        if index == COL_COMMIT_PARENT_ID:
            parents = commit.parent_ids
            return str(parents[0]) if parents else None
        if index == COL_COMMIT_PARENT_COUNT:
            return len(commit.parent_ids)
        if index == COL_COMMIT_TREE_ID:
            return str(commit.tree_id)
        if index == COL_COMMIT_ADDITION:
            return self.stats().additions
        if index == COL_COMMIT_DELETION:
            return self.stats().deletions
        return None

    def stats(self) -> CommitStats:
        """Diff stats of the current commit, memoized until the next advance."""
        if self.current is None:
            raise CursorStateError("commits cursor has no current row")
        if self._stats is None:
            self._stats = compute_commit_stats(self._repo, self.current)
        return self._stats

    def rowid(self) -> int:
        raise NoRowidError("commits")

    def close(self) -> None:
        if self._traversal is not None:
            self._traversal.close()
            logger.debug("Released %s traversal", self._traversal.kind)
        self._traversal = None
        self.current = None
        self._stats = None
