"""Tests for the commit and reference constraint planners."""

from __future__ import annotations

import pytest
from hypothesis import given, settings

from gitql.engine.planner import (
    POINT_LOOKUP_COST,
    PlanFlags,
    decode_commit_plan,
    plan_commits,
    plan_refs,
)
from gitql.exceptions import ConstraintConflictError, ErrorKind, PlanningError
from gitql.models.schema import (
    COL_COMMIT_AUTHOR_WHEN,
    COL_COMMIT_COMMITTER_WHEN,
    COL_COMMIT_HASH,
    COL_COMMIT_MESSAGE,
    COL_REF_NAME,
)
from gitql.protocols import Constraint, ConstraintOp, OrderBy, PlanInput
from tests import strategies

HASH_EQ = Constraint(COL_COMMIT_HASH, ConstraintOp.EQ)
SINCE_GT = Constraint(COL_COMMIT_COMMITTER_WHEN, ConstraintOp.GT)
SINCE_GE = Constraint(COL_COMMIT_COMMITTER_WHEN, ConstraintOp.GE)
UNTIL_LT = Constraint(COL_COMMIT_COMMITTER_WHEN, ConstraintOp.LT)
UNTIL_LE = Constraint(COL_COMMIT_COMMITTER_WHEN, ConstraintOp.LE)


# ---------------------------------------------------------------------------
# Commit planner: constraint acceptance
# ---------------------------------------------------------------------------

class TestCommitConstraints:

    def test_no_constraints_is_full_scan(self):
        output = plan_commits(PlanInput())
        assert output.index_number == 0
        assert output.constraint_usage == []
        assert output.estimated_cost is None
        assert output.estimated_rows is None
        assert not output.unique
        assert not output.order_by_consumed

    def test_hash_equality_is_unique_point_lookup(self):
        output = plan_commits(PlanInput(constraints=(HASH_EQ,)))
        assert output.index_number == PlanFlags.HASH
        assert output.accepted() == {0: 1}
        assert output.estimated_cost == POINT_LOOKUP_COST
        assert output.estimated_rows == 1
        assert output.unique

    def test_lower_and_upper_bounds(self):
        output = plan_commits(PlanInput(constraints=(SINCE_GT, UNTIL_LT)))
        assert output.index_number == PlanFlags.SINCE | PlanFlags.UNTIL
        assert output.accepted() == {0: 1, 1: 2}
        assert output.estimated_cost is None
        assert not output.unique

    def test_inclusive_operators_are_bounds_too(self):
        output = plan_commits(PlanInput(constraints=(UNTIL_LE, SINCE_GE)))
        assert output.index_number == PlanFlags.SINCE | PlanFlags.UNTIL

    def test_slots_follow_hash_since_until_order(self):
        """Slot numbers do not depend on the order constraints are offered in."""
        output = plan_commits(PlanInput(constraints=(UNTIL_LE, SINCE_GT, HASH_EQ)))
        assert output.index_number == PlanFlags.HASH | PlanFlags.SINCE | PlanFlags.UNTIL
        assert output.accepted() == {2: 1, 1: 2, 0: 3}

    def test_upper_bound_alone_takes_first_slot(self):
        output = plan_commits(PlanInput(constraints=(UNTIL_LT,)))
        assert output.index_number == PlanFlags.UNTIL
        assert output.accepted() == {0: 1}

    def test_constraints_are_never_omitted(self):
        output = plan_commits(PlanInput(constraints=(HASH_EQ, SINCE_GT, UNTIL_LT)))
        assert all(usage is not None and not usage.omit for usage in output.constraint_usage)

    def test_unusable_constraints_are_skipped(self):
        output = plan_commits(
            PlanInput(constraints=(Constraint(COL_COMMIT_HASH, ConstraintOp.EQ, usable=False),))
        )
        assert output.index_number == 0
        assert output.constraint_usage == [None]

    def test_unusable_duplicate_does_not_conflict(self):
        output = plan_commits(
            PlanInput(constraints=(
                HASH_EQ,
                Constraint(COL_COMMIT_HASH, ConstraintOp.EQ, usable=False),
            ))
        )
        assert output.accepted() == {0: 1}

    @pytest.mark.parametrize("constraint", [
        Constraint(COL_COMMIT_MESSAGE, ConstraintOp.EQ),
        Constraint(COL_COMMIT_AUTHOR_WHEN, ConstraintOp.GT),
        Constraint(COL_COMMIT_HASH, ConstraintOp.GT),
        Constraint(COL_COMMIT_HASH, ConstraintOp.LIKE),
        Constraint(COL_COMMIT_COMMITTER_WHEN, ConstraintOp.EQ),
        Constraint(COL_COMMIT_COMMITTER_WHEN, ConstraintOp.NE),
    ])
    def test_other_constraints_left_to_host(self, constraint):
        output = plan_commits(PlanInput(constraints=(constraint,)))
        assert output.index_number == 0
        assert output.constraint_usage == [None]


class TestCommitConflicts:

    def test_two_hash_equalities(self):
        with pytest.raises(ConstraintConflictError) as exc_info:
            plan_commits(PlanInput(constraints=(HASH_EQ, HASH_EQ)))
        assert exc_info.value.column == "hash"
        assert exc_info.value.kind is ErrorKind.PLANNING

    def test_two_lower_bounds(self):
        with pytest.raises(ConstraintConflictError, match="lower bound"):
            plan_commits(PlanInput(constraints=(SINCE_GT, SINCE_GE)))

    def test_two_upper_bounds(self):
        with pytest.raises(ConstraintConflictError, match="upper bound"):
            plan_commits(PlanInput(constraints=(UNTIL_LT, UNTIL_LE)))

    def test_conflict_is_a_planning_error(self):
        with pytest.raises(PlanningError):
            plan_commits(PlanInput(constraints=(UNTIL_LT, UNTIL_LT)))


# ---------------------------------------------------------------------------
# Commit planner: ordering
# ---------------------------------------------------------------------------

class TestCommitOrdering:

    def test_descending_committer_time_is_consumed(self):
        output = plan_commits(PlanInput(order_by=(OrderBy(COL_COMMIT_COMMITTER_WHEN, desc=True),)))
        assert output.index_number == PlanFlags.ORDER_DESC
        assert output.order_by_consumed

    def test_ascending_order_not_consumed(self):
        output = plan_commits(PlanInput(order_by=(OrderBy(COL_COMMIT_COMMITTER_WHEN),)))
        assert output.index_number == 0
        assert not output.order_by_consumed

    def test_descending_on_other_column_not_consumed(self):
        output = plan_commits(PlanInput(order_by=(OrderBy(COL_COMMIT_MESSAGE, desc=True),)))
        assert output.index_number == 0
        assert not output.order_by_consumed

    def test_multiple_order_terms_not_consumed(self):
        output = plan_commits(PlanInput(order_by=(
            OrderBy(COL_COMMIT_COMMITTER_WHEN, desc=True),
            OrderBy(COL_COMMIT_HASH, desc=True),
        )))
        assert not output.order_by_consumed

    def test_order_combines_with_bounds(self):
        output = plan_commits(PlanInput(
            constraints=(SINCE_GE,),
            order_by=(OrderBy(COL_COMMIT_COMMITTER_WHEN, desc=True),),
        ))
        assert decode_commit_plan(output.index_number) == PlanFlags.SINCE | PlanFlags.ORDER_DESC


# ---------------------------------------------------------------------------
# Reference planner
# ---------------------------------------------------------------------------

class TestRefsPlanner:

    def test_accepts_nothing(self):
        output = plan_refs(PlanInput(
            constraints=(Constraint(COL_REF_NAME, ConstraintOp.EQ),),
            order_by=(OrderBy(COL_REF_NAME, desc=True),),
        ))
        assert output.index_number == 0
        assert output.constraint_usage == [None]
        assert not output.order_by_consumed
        assert output.estimated_cost is None


# ---------------------------------------------------------------------------
# Properties over arbitrary predicate sets
# ---------------------------------------------------------------------------

def _usable(plan_input, column, ops):
    return [
        i for i, c in enumerate(plan_input.constraints)
        if c.usable and c.column == column and c.op in ops
    ]


class TestPlannerProperties:
    """Slot and conflict rules hold for any offered constraints and ordering."""

    @given(plan_input=strategies.plan_input)
    @settings(max_examples=300)
    def test_slots_and_conflicts(self, plan_input) -> None:
        hashes = _usable(plan_input, COL_COMMIT_HASH, {ConstraintOp.EQ})
        lower = _usable(plan_input, COL_COMMIT_COMMITTER_WHEN, {ConstraintOp.GT, ConstraintOp.GE})
        upper = _usable(plan_input, COL_COMMIT_COMMITTER_WHEN, {ConstraintOp.LT, ConstraintOp.LE})

        if len(hashes) > 1 or len(lower) > 1 or len(upper) > 1:
            with pytest.raises(ConstraintConflictError):
                plan_commits(plan_input)
            return

        output = plan_commits(plan_input)
        flags = decode_commit_plan(output.index_number)

        expected_slots = [positions[0] for positions in (hashes, lower, upper) if positions]
        assert output.accepted() == {pos: n for n, pos in enumerate(expected_slots, start=1)}
        assert len(output.constraint_usage) == len(plan_input.constraints)
        assert not any(usage.omit for usage in output.constraint_usage if usage is not None)

        assert bool(flags & PlanFlags.HASH) == bool(hashes)
        assert bool(flags & PlanFlags.SINCE) == bool(lower)
        assert bool(flags & PlanFlags.UNTIL) == bool(upper)
        assert output.unique == bool(hashes)
        if hashes:
            assert output.estimated_cost == POINT_LOOKUP_COST
            assert output.estimated_rows == 1
        else:
            assert output.estimated_cost is None
            assert output.estimated_rows is None

    @given(plan_input=strategies.plan_input)
    def test_duplicate_hash_equality_always_conflicts(self, plan_input) -> None:
        doubled = PlanInput(
            constraints=plan_input.constraints + (HASH_EQ, HASH_EQ),
            order_by=plan_input.order_by,
        )
        with pytest.raises(ConstraintConflictError):
            plan_commits(doubled)

    @given(plan_input=strategies.plan_input)
    def test_order_consumed_only_for_single_descending_committer_time(self, plan_input) -> None:
        try:
            output = plan_commits(plan_input)
        except ConstraintConflictError:
            return
        consumed = plan_input.order_by == (OrderBy(COL_COMMIT_COMMITTER_WHEN, desc=True),)
        assert output.order_by_consumed == consumed
        assert bool(decode_commit_plan(output.index_number) & PlanFlags.ORDER_DESC) == consumed

    @given(plan_input=strategies.plan_input)
    def test_refs_planner_never_accepts(self, plan_input) -> None:
        output = plan_refs(plan_input)
        assert output.accepted() == {}
        assert output.index_number == 0
        assert not output.order_by_consumed
