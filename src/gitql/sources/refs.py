"""git_ref: the reference-list virtual table."""

from __future__ import annotations

import enum
import logging
from typing import Sequence

import pygit2
from pygit2.enums import ReferenceType

from gitql.engine.planner import plan_refs
from gitql.engine.traversal import ReferenceTraversal
from gitql.exceptions import CursorStateError, NoRowidError, ReferenceResolutionError
from gitql.models.config import ModuleArguments
from gitql.models.schema import (
    COL_REF_HASH,
    COL_REF_NAME,
    COL_REF_REMOTE,
    COL_REF_TYPE,
    REFS_SCHEMA,
)
from gitql.protocols import DeclareFn, PlanInput, PlanOutput, SQLiteValue
from gitql.repository import open_repository

logger = logging.getLogger(__name__)

BRANCH_PREFIX = "refs/heads/"
REMOTE_PREFIX = "refs/remotes/"
NOTE_PREFIX = "refs/notes/"
TAG_PREFIX = "refs/tags/"


class RefType(str, enum.Enum):
    """Structural classification of a reference name."""

    BRANCH = "branch"
    NOTE = "note"
    TAG = "tag"
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value


def classify_reference(name: str) -> RefType:
    if name.startswith((BRANCH_PREFIX, REMOTE_PREFIX)):
        return RefType.BRANCH
    if name.startswith(NOTE_PREFIX):
        return RefType.NOTE
    if name.startswith(TAG_PREFIX):
        return RefType.TAG
    return RefType.UNKNOWN


def is_remote_reference(name: str) -> bool:
    return name.startswith(REMOTE_PREFIX)


class RefsModule:
    """Factory for git_ref tables."""

    def connect(self, args: Sequence[str], declare: DeclareFn) -> RefsTable:
        arguments = ModuleArguments.from_argv(args)
        repo = open_repository(arguments.repo_path)
        declare(REFS_SCHEMA.declaration(arguments.table_name))
        return RefsTable(repo)


class RefsTable:
    """A connected git_ref relation. Owns the repository handle."""

    schema = REFS_SCHEMA

    def __init__(self, repo: pygit2.Repository) -> None:
        self.repo = repo

    def best_index(self, plan_input: PlanInput) -> PlanOutput:
        # Branch/tag/note filtering would still visit every reference,
        # so nothing is pushed down.
        return plan_refs(plan_input)

    def open(self) -> RefsCursor:
        return RefsCursor(self.repo)

    def disconnect(self) -> None:
        pass

    destroy = disconnect


class RefsCursor:
    """Cursor over references under ``refs/``."""

    def __init__(self, repo: pygit2.Repository) -> None:
        self._repo = repo
        self._traversal: ReferenceTraversal | None = None
        self.current: pygit2.Reference | None = None

    def filter(
        self, index_number: int, index_string: str | None, values: Sequence[SQLiteValue]
    ) -> None:
        self.close()
        self._traversal = ReferenceTraversal(self._repo)
        self.next()

    def next(self) -> None:
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
        ref = self.current
        if ref is None:
            raise CursorStateError("refs cursor has no current row")

        if index == COL_REF_NAME:
            return ref.name
        if index == COL_REF_HASH:
            return self._resolved_hash(ref)
        if index == COL_REF_TYPE:
            return classify_reference(ref.name).value
        if index == COL_REF_REMOTE:
            return 1 if is_remote_reference(ref.name) else 0
        return None

    def _resolved_hash(self, ref: pygit2.Reference) -> str:
        if ref.type != ReferenceType.SYMBOLIC:
            return str(ref.target)
        try:
            resolved = ref.resolve()
        except (KeyError, pygit2.GitError) as exc:
            raise ReferenceResolutionError(ref.name, str(exc)) from exc
        return str(resolved.target)

    def rowid(self) -> int:
        raise NoRowidError("refs")

    def close(self) -> None:
        if self._traversal is not None:
            self._traversal.close()
            logger.debug("Released %s traversal", self._traversal.kind)
        self._traversal = None
        self.current = None
