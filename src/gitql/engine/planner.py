"""Constraint planners for the gitql virtual tables.

The commit planner pushes down at most one hash equality, one lower and
one upper committer-time bound, and a descending committer-time order.
Accepted constraints are never marked omitted, so the host still
re-checks every predicate against the rows it receives.

The reference planner accepts nothing: enumerating references by name or
type is no cheaper than enumerating all of them.
"""

from __future__ import annotations

import enum
import logging

from gitql.exceptions import ConstraintConflictError
from gitql.models.schema import COL_COMMIT_COMMITTER_WHEN, COL_COMMIT_HASH
from gitql.protocols import ConstraintOp, ConstraintUsage, PlanInput, PlanOutput

logger = logging.getLogger(__name__)

# Cost reported for a unique point lookup.
POINT_LOOKUP_COST = 1.0


class PlanFlags(enum.IntFlag):
    """Bits of the index number handed back to the cursor's filter()."""

    NONE = 0
    HASH = 1
    SINCE = 2
    UNTIL = 4
    ORDER_DESC = 8


_LOWER_BOUND_OPS = frozenset({ConstraintOp.GT, ConstraintOp.GE})
_UPPER_BOUND_OPS = frozenset({ConstraintOp.LT, ConstraintOp.LE})

# Argument slots are assigned in this order, independent of the order the
# host lists its constraints in.
_SLOT_ORDER = (PlanFlags.HASH, PlanFlags.SINCE, PlanFlags.UNTIL)


def plan_commits(plan_input: PlanInput) -> PlanOutput:
    """Plan a scan of the commit table.

    Raises:
        ConstraintConflictError: Two usable constraints compete for the
            hash slot or for the same committer-time bound.
    """
    flags = PlanFlags.NONE
    positions: dict[PlanFlags, int] = {}

    for i, constraint in enumerate(plan_input.constraints):
        if not constraint.usable:
            continue

        if constraint.column == COL_COMMIT_HASH and constraint.op == ConstraintOp.EQ:
            if flags & PlanFlags.HASH:
                raise ConstraintConflictError("hash", "equality")
            flags |= PlanFlags.HASH
            positions[PlanFlags.HASH] = i

        elif constraint.column == COL_COMMIT_COMMITTER_WHEN:
            if constraint.op in _LOWER_BOUND_OPS:
                if flags & PlanFlags.SINCE:
                    raise ConstraintConflictError("committer_when", "lower bound")
                flags |= PlanFlags.SINCE
                positions[PlanFlags.SINCE] = i
            elif constraint.op in _UPPER_BOUND_OPS:
                if flags & PlanFlags.UNTIL:
                    raise ConstraintConflictError("committer_when", "upper bound")
                flags |= PlanFlags.UNTIL
                positions[PlanFlags.UNTIL] = i

    output = PlanOutput(constraint_usage=[None] * len(plan_input.constraints))

    argv_index = 0
    for flag in _SLOT_ORDER:
        if flag in positions:
            argv_index += 1
            output.constraint_usage[positions[flag]] = ConstraintUsage(argv_index=argv_index)

    if flags & PlanFlags.HASH:
        output.estimated_cost = POINT_LOOKUP_COST
        output.estimated_rows = 1
        output.unique = True

    if len(plan_input.order_by) == 1:
        order = plan_input.order_by[0]
        if order.desc and order.column == COL_COMMIT_COMMITTER_WHEN:
            flags |= PlanFlags.ORDER_DESC
            output.order_by_consumed = True

    output.index_number = int(flags)
    logger.debug("Planned commits scan: %r, %d argument(s)", flags, argv_index)
    return output


def plan_refs(plan_input: PlanInput) -> PlanOutput:
    """Plan a scan of the reference table: always a full enumeration."""
    return PlanOutput(constraint_usage=[None] * len(plan_input.constraints))


def decode_commit_plan(index_number: int) -> PlanFlags:
    return PlanFlags(index_number)
