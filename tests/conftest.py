"""Shared test fixtures for gitql.

Builds real git repositories with pygit2 (no working tree writes, fixed
signatures and timestamps) and provides tables, cursors and an apsw
connection over them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import pygit2
import pytest
from pygit2.enums import FileMode, ObjectType

from gitql.host.connection import attach_repository, create_connection
from gitql.sources.commits import CommitsTable
from gitql.sources.refs import RefsTable

# 2020-09-13T12:26:40Z
BASE_TIME = 1_600_000_000


def signature(name: str, when: int, offset: int = 0) -> pygit2.Signature:
    return pygit2.Signature(name, f"{name.lower()}@example.com", when, offset)


class RepoBuilder:
    """Write commits and references straight into the object database."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self.repo = pygit2.init_repository(str(path), initial_head="main")

    def commit(
        self,
        files: dict[str, str],
        message: str,
        when: int,
        *,
        parents: list[pygit2.Oid] | None = None,
        ref: str | None = "refs/heads/main",
        author: str = "Alice",
        committer: str = "Bob",
        offset: int = 0,
    ) -> pygit2.Oid:
        builder = self.repo.TreeBuilder()
        for name, content in sorted(files.items()):
            builder.insert(name, self.repo.create_blob(content.encode()), FileMode.BLOB)
        tree_id = builder.write()
        oid = self.repo.create_commit(
            None,
            signature(author, when, offset),
            signature(committer, when, offset),
            message,
            tree_id,
            parents or [],
        )
        if ref is not None:
            self.repo.references.create(ref, oid, force=True)
        return oid


@dataclass
class RepoFixture:
    """A built repository plus the commit ids the tests refer to by name."""

    path: Path
    repo: pygit2.Repository
    commits: dict[str, str] = field(default_factory=dict)


@pytest.fixture
def linear_repo(tmp_path: Path) -> RepoFixture:
    """Two commits on main, additions only.

    first:  a.txt (3 lines)                     -> +3 -0
    second: a.txt (+1 line), b.txt (2 lines)    -> +3 -0
    """
    builder = RepoBuilder(tmp_path / "linear")
    first = builder.commit({"a.txt": "one\ntwo\nthree\n"}, "first\n", BASE_TIME)
    second = builder.commit(
        {"a.txt": "one\ntwo\nthree\nfour\n", "b.txt": "x\ny\n"},
        "second\n",
        BASE_TIME + 3600,
        parents=[first],
        offset=120,
    )
    return RepoFixture(
        path=builder.path,
        repo=builder.repo,
        commits={"first": str(first), "second": str(second)},
    )


@pytest.fixture
def history_repo(tmp_path: Path) -> RepoFixture:
    """Branches, a merge, an orphan root, tags, a remote and a notes ref.

    root(+0s) <- fix(+100s) <------- merge(+300s)   refs/heads/main
         \\-- feature(+200s) <--/                    refs/heads/feature
    orphan(+400s)                                   refs/heads/orphan
    """
    builder = RepoBuilder(tmp_path / "history")
    repo = builder.repo
    root = builder.commit({"a.txt": "one\ntwo\nthree\n"}, "root\n", BASE_TIME)
    fix = builder.commit(
        {"a.txt": "one\nTWO\nthree\n"}, "fix\n", BASE_TIME + 100, parents=[root]
    )
    feature = builder.commit(
        {"a.txt": "one\ntwo\nthree\n", "feature.txt": "x\n"},
        "feature\n",
        BASE_TIME + 200,
        parents=[root],
        ref="refs/heads/feature",
    )
    merge = builder.commit(
        {"a.txt": "one\nTWO\nthree\n", "feature.txt": "x\n"},
        "merge feature\n",
        BASE_TIME + 300,
        parents=[fix, feature],
    )
    orphan = builder.commit(
        {"other.txt": "alone\n"},
        "orphan\n",
        BASE_TIME + 400,
        ref="refs/heads/orphan",
    )

    repo.references.create("refs/tags/v1", root)
    tag = repo.create_tag(
        "v2", fix, ObjectType.COMMIT, signature("Tagger", BASE_TIME + 150), "release v2\n"
    )
    repo.references.create("refs/remotes/origin/main", fix)
    repo.references.create("refs/remotes/origin/HEAD", "refs/remotes/origin/main")
    repo.references.create("refs/notes/review", root)
    repo.references.create("refs/custom/thing", feature)
    tree_id = repo.get(root).tree_id
    repo.references.create("refs/tags/tree-tag", tree_id)

    return RepoFixture(
        path=builder.path,
        repo=repo,
        commits={
            "root": str(root),
            "fix": str(fix),
            "feature": str(feature),
            "merge": str(merge),
            "orphan": str(orphan),
            "tag": str(tag),
            "tree": str(tree_id),
        },
    )


@pytest.fixture
def commits_table(history_repo: RepoFixture) -> CommitsTable:
    return CommitsTable(history_repo.repo)


@pytest.fixture
def refs_table(history_repo: RepoFixture) -> RefsTable:
    return RefsTable(history_repo.repo)


@pytest.fixture
def connection(history_repo: RepoFixture):
    """apsw connection with commits and refs tables over history_repo."""
    conn = create_connection()
    attach_repository(conn, str(history_repo.path))
    yield conn
    conn.close()

