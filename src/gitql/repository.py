"""Repository handle: thin capability layer over pygit2.

Opens a git working copy and exposes the primitives the cursors consume:
commit lookup by full hash, reference enumeration, and the set of commit
ids that seed a full history walk.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator

import pygit2

from gitql.exceptions import CommitLookupError, RepositoryOpenError

logger = logging.getLogger(__name__)

# SHA-1 and SHA-256 object ids.
_FULL_HASH_RE = re.compile(r"^(?:[0-9a-f]{40}|[0-9a-f]{64})$")


def open_repository(path: str) -> pygit2.Repository:
    """Open the repository at ``path``.

    Raises:
        RepositoryOpenError: No repository could be opened there.
    """
    try:
        repo = pygit2.Repository(path)
    except (pygit2.GitError, OSError) as exc:
        raise RepositoryOpenError(path, str(exc)) from exc
    logger.debug("Opened repository %s", repo.path)
    return repo


def is_full_hash(value: str) -> bool:
    return bool(_FULL_HASH_RE.match(value))


def lookup_commit(repo: pygit2.Repository, commit_hash: str) -> pygit2.Commit | None:
    """Resolve a full hex hash to a commit.

    Returns None when the text is not a full object id or names no
    commit (including trees, blobs and tag objects): a nonexistent
    committish is an empty answer, not a failure.

    Raises:
        CommitLookupError: The object database could not be read.
    """
    normalized = commit_hash.strip().lower()
    if not is_full_hash(normalized):
        logger.debug("Not a full object id: %r", commit_hash)
        return None
    try:
        obj = repo.get(normalized)
    except pygit2.GitError as exc:
        raise CommitLookupError(commit_hash, str(exc)) from exc
    if obj is None:
        logger.debug("Commit not found: %s", normalized[:12])
        return None
    if not isinstance(obj, pygit2.Commit):
        logger.debug("Object %s is a %s, not a commit", normalized[:12], obj.type_str)
        return None
    return obj


def peel_to_commit(repo: pygit2.Repository, oid: pygit2.Oid) -> pygit2.Commit | None:
    """Follow annotated tags from ``oid`` until a commit is reached.

    Returns None for trees, blobs, and dangling ids.
    """
    obj = repo.get(oid)
    while isinstance(obj, pygit2.Tag):
        obj = repo.get(obj.target)
    if isinstance(obj, pygit2.Commit):
        return obj
    return None


def iter_reference_names(repo: pygit2.Repository) -> Iterator[str]:
    """Lazily yield every reference name in the store."""
    yield from repo.references


def tip_commit_ids(repo: pygit2.Repository) -> list[pygit2.Oid]:
    """Commit ids at every direct reference tip, plus a detached HEAD.

    Symbolic references are skipped since their targets are enumerated
    on their own. Tags are peeled; refs to non-commits are skipped.
    """
    tips: dict[str, pygit2.Oid] = {}
    for name in iter_reference_names(repo):
        ref = repo.lookup_reference(name)
        if not isinstance(ref.target, pygit2.Oid):
            continue
        commit = peel_to_commit(repo, ref.target)
        if commit is None:
            logger.warning("Skipping %s: does not point at a commit", name)
            continue
        tips.setdefault(str(commit.id), commit.id)

    if not repo.head_is_unborn and repo.head_is_detached:
        head = peel_to_commit(repo, repo.head.target)
        if head is not None:
            tips.setdefault(str(head.id), head.id)

    logger.debug("Collected %d history tips", len(tips))
    return list(tips.values())
