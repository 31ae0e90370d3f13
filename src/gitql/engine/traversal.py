"""Native traversals backing the cursors.

Every traversal is a plain Python iterator with a ``close()`` method and a
``kind`` tag. The commit cursor picks SINGLE for a hash point lookup and
WALK for everything else; the reference cursor always uses REFERENCES.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Iterator
from datetime import datetime
from typing import Protocol, TypeVar

import pygit2
from pygit2.enums import SortMode

from gitql.repository import iter_reference_names, tip_commit_ids

logger = logging.getLogger(__name__)

REF_NAMESPACE = "refs/"

T_co = TypeVar("T_co", covariant=True)


class TraversalKind(str, enum.Enum):
    SINGLE = "single"
    WALK = "walk"
    REFERENCES = "references"

    def __str__(self) -> str:
        return self.value


class Traversal(Protocol[T_co]):
    """Iterator contract shared by all traversal variants."""

    kind: TraversalKind

    def __iter__(self) -> Iterator[T_co]: ...

    def __next__(self) -> T_co: ...

    def close(self) -> None: ...


class SingleCommitTraversal:
    """Yields one commit exactly once, then stops. Not restartable."""

    kind = TraversalKind.SINGLE

    def __init__(self, commit: pygit2.Commit) -> None:
        self._commit: pygit2.Commit | None = commit

    def __iter__(self) -> SingleCommitTraversal:
        return self

    def __next__(self) -> pygit2.Commit:
        if self._commit is None:
            raise StopIteration
        commit, self._commit = self._commit, None
        return commit

    def close(self) -> None:
        self._commit = None


class HistoryWalk:
    """Walk every commit reachable from every reference tip.

    Commits whose committer time falls outside [since, until] are skipped
    but the walk continues through them, so older matches are still found.
    """

    kind = TraversalKind.WALK

    def __init__(
        self,
        repo: pygit2.Repository,
        *,
        since: datetime | None = None,
        until: datetime | None = None,
        committer_time_order: bool = False,
    ) -> None:
        self._since = int(since.timestamp()) if since is not None else None
        self._until = int(until.timestamp()) if until is not None else None
        self._walker: pygit2.Walker | None = None

        tips = tip_commit_ids(repo)
        if tips:
            sort_mode = SortMode.TIME if committer_time_order else SortMode.NONE
            self._walker = repo.walk(tips[0], sort_mode)
            for tip in tips[1:]:
                self._walker.push(tip)
        logger.debug(
            "History walk: %d tips, since=%s until=%s time_order=%s",
            len(tips), since, until, committer_time_order,
        )

    def __iter__(self) -> HistoryWalk:
        return self

    def __next__(self) -> pygit2.Commit:
        if self._walker is None:
            raise StopIteration
        for commit in self._walker:
            if self._since is not None and commit.commit_time < self._since:
                continue
            if self._until is not None and commit.commit_time > self._until:
                continue
            return commit
        raise StopIteration

    def close(self) -> None:
        self._walker = None


class ReferenceTraversal:
    """Enumerate references lazily, keeping only names under ``refs/``.

    Drops special pointers such as HEAD or FETCH_HEAD.
    """

    kind = TraversalKind.REFERENCES

    def __init__(self, repo: pygit2.Repository) -> None:
        self._repo = repo
        self._names: Iterator[str] | None = iter_reference_names(repo)

    def __iter__(self) -> ReferenceTraversal:
        return self

    def __next__(self) -> pygit2.Reference:
        if self._names is None:
            raise StopIteration
        for name in self._names:
            if not name.startswith(REF_NAMESPACE):
                continue
            try:
                return self._repo.lookup_reference(name)
            except KeyError:
                # Deleted after enumeration started.
                logger.debug("Reference %s vanished during scan", name)
        raise StopIteration

    def close(self) -> None:
        self._names = None
