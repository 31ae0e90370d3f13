"""Commit stats aggregator: line additions and deletions per commit."""

from __future__ import annotations

from dataclasses import dataclass

import pygit2

from gitql.exceptions import StatsComputationError


@dataclass(frozen=True)
class CommitStats:
    """Total inserted and deleted lines across all files of a commit."""

    additions: int
    deletions: int


def compute_commit_stats(repo: pygit2.Repository, commit: pygit2.Commit) -> CommitStats:
    """Diff ``commit`` against its first parent, or the empty tree for a root.

    Raises:
        StatsComputationError: The diff could not be produced.
    """
    try:
        if commit.parent_ids:
            diff = repo.diff(commit.parents[0], commit)
        else:
            diff = commit.tree.diff_to_tree(swap=True)
        stats = diff.stats
    except (pygit2.GitError, KeyError, TypeError) as exc:
        raise StatsComputationError(str(commit.id), str(exc)) from exc
    return CommitStats(additions=stats.insertions, deletions=stats.deletions)
