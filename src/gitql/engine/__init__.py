"""Planning and traversal internals shared by the gitql sources."""

from gitql.engine.planner import PlanFlags, plan_commits, plan_refs
from gitql.engine.stats import CommitStats, compute_commit_stats
from gitql.engine.traversal import (
    HistoryWalk,
    ReferenceTraversal,
    SingleCommitTraversal,
    TraversalKind,
)

__all__ = [
    "CommitStats",
    "HistoryWalk",
    "PlanFlags",
    "ReferenceTraversal",
    "SingleCommitTraversal",
    "TraversalKind",
    "compute_commit_stats",
    "plan_commits",
    "plan_refs",
]
