"""Protocol definitions for gitql.

Defines the virtual table capability contracts (VirtualModule,
VirtualTable, VirtualCursor) and the frozen dataclasses exchanged during
plan negotiation (Constraint, OrderBy, PlanInput, PlanOutput).

No apsw imports allowed in this module -- the host bridge translates
between these types and the SQLite binding.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Protocol, Sequence, runtime_checkable

if TYPE_CHECKING:
    from gitql.models.schema import TableSchema

# SQLite column values returned from VirtualCursor.column().
SQLiteValue = str | int | float | bytes | None


class ConstraintOp(enum.IntEnum):
    """Comparison operators offered by the host (SQLITE_INDEX_CONSTRAINT_*)."""

    EQ = 2
    GT = 4
    LE = 8
    LT = 16
    GE = 32
    MATCH = 64
    LIKE = 65
    GLOB = 66
    REGEXP = 67
    NE = 68
    ISNOT = 69
    ISNOTNULL = 70
    ISNULL = 71
    IS = 72
    LIMIT = 73
    OFFSET = 74


@dataclass(frozen=True)
class Constraint:
    """A single predicate the host could push down."""

    column: int
    op: int
    usable: bool = True


@dataclass(frozen=True)
class OrderBy:
    """A requested sort key."""

    column: int
    desc: bool = False


@dataclass(frozen=True)
class PlanInput:
    """Everything the host offers to a table's planner."""

    constraints: tuple[Constraint, ...] = ()
    order_by: tuple[OrderBy, ...] = ()


@dataclass(frozen=True)
class ConstraintUsage:
    """Argument slot assigned to an accepted constraint.

    argv_index is 1-based, matching the position of the bound value in
    the sequence later passed to VirtualCursor.filter().
    """

    argv_index: int
    omit: bool = False


@dataclass
class PlanOutput:
    """A planner's answer to the host.

    estimated_cost and estimated_rows stay None to leave the host's
    full-scan defaults in place.
    """

    index_number: int = 0
    index_string: str | None = None
    constraint_usage: list[ConstraintUsage | None] = field(default_factory=list)
    order_by_consumed: bool = False
    estimated_cost: float | None = None
    estimated_rows: int | None = None
    unique: bool = False

    def accepted(self) -> dict[int, int]:
        """Map constraint position -> argv index for accepted constraints."""
        return {
            i: usage.argv_index
            for i, usage in enumerate(self.constraint_usage)
            if usage is not None
        }


DeclareFn = Callable[[str], None]


@runtime_checkable
class VirtualCursor(Protocol):
    """A single-use iteration handle over one scan's matching rows."""

    def filter(
        self, index_number: int, index_string: str | None, values: Sequence[SQLiteValue]
    ) -> None:
        """Bind argument values and position at the first row."""
        ...

    def next(self) -> None:
        """Advance to the next row, or to the exhausted state."""
        ...

    def eof(self) -> bool:
        """True when there is no current row."""
        ...

    def column(self, index: int) -> SQLiteValue:
        """Project column ``index`` of the current row."""
        ...

    def rowid(self) -> int:
        """Synthetic row identifier (unsupported by every gitql source)."""
        ...

    def close(self) -> None:
        """Release the traversal. Safe to call more than once."""
        ...


@runtime_checkable
class VirtualTable(Protocol):
    """A connected relation: plans scans and opens cursors."""

    schema: TableSchema

    def best_index(self, plan_input: PlanInput) -> PlanOutput:
        """Negotiate pushdown for the offered constraints and ordering."""
        ...

    def open(self) -> VirtualCursor:
        """Create a fresh cursor over this table."""
        ...

    def disconnect(self) -> None:
        ...


@runtime_checkable
class VirtualModule(Protocol):
    """A data source factory registered with the host under a name."""

    def connect(self, args: Sequence[str], declare: DeclareFn) -> VirtualTable:
        """Validate the argument vector, declare the schema, return a table."""
        ...
