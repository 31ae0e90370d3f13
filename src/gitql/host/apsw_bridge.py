"""Bridge between gitql's virtual table protocols and apsw.

apsw calls CamelCase methods with its own IndexInfo object; these
adapters translate that into PlanInput/PlanOutput and forward every
cursor call to the wrapped gitql cursor.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import apsw

from gitql.exceptions import PlanningError
from gitql.protocols import Constraint, OrderBy, PlanInput, PlanOutput, SQLiteValue

if TYPE_CHECKING:
    from gitql.protocols import VirtualCursor, VirtualModule, VirtualTable
    from gitql.registry import ModuleRegistry

logger = logging.getLogger(__name__)


def plan_input_from_index_info(index_info: apsw.IndexInfo) -> PlanInput:
    return PlanInput(
        constraints=tuple(
            Constraint(
                column=index_info.get_aConstraint_iColumn(i),
                op=index_info.get_aConstraint_op(i),
                usable=bool(index_info.get_aConstraint_usable(i)),
            )
            for i in range(index_info.nConstraint)
        ),
        order_by=tuple(
            OrderBy(
                column=index_info.get_aOrderBy_iColumn(i),
                desc=bool(index_info.get_aOrderBy_desc(i)),
            )
            for i in range(index_info.nOrderBy)
        ),
    )


def apply_plan_output(index_info: apsw.IndexInfo, output: PlanOutput) -> None:
    for i, usage in enumerate(output.constraint_usage):
        if usage is None:
            continue
        index_info.set_aConstraintUsage_argvIndex(i, usage.argv_index)
        if usage.omit:
            index_info.set_aConstraintUsage_omit(i, True)

    index_info.idxNum = output.index_number
    if output.index_string is not None:
        index_info.idxStr = output.index_string
    index_info.orderByConsumed = output.order_by_consumed
    if output.estimated_cost is not None:
        index_info.estimatedCost = output.estimated_cost
    if output.estimated_rows is not None:
        index_info.estimatedRows = output.estimated_rows
    if output.unique:
        index_info.idxFlags = index_info.idxFlags | apsw.SQLITE_INDEX_SCAN_UNIQUE


class ApswCursor:
    def __init__(self, cursor: VirtualCursor) -> None:
        self._cursor = cursor

    def Filter(self, indexnum: int, indexname: str | None, constraintargs: tuple | None) -> None:
        self._cursor.filter(indexnum, indexname, constraintargs or ())

    def Eof(self) -> bool:
        return self._cursor.eof()

    def Next(self) -> None:
        self._cursor.next()

    def Column(self, number: int) -> SQLiteValue:
        if number == -1:
            return self._cursor.rowid()
        return self._cursor.column(number)

    def Rowid(self) -> int:
        return self._cursor.rowid()

    def Close(self) -> None:
        self._cursor.close()


class ApswTable:
    def __init__(self, table: VirtualTable) -> None:
        self._table = table

    def BestIndexObject(self, index_info: apsw.IndexInfo) -> bool:
        """Plan through the wrapped table.

        A planning error answers False, which SQLite receives as
        SQLITE_CONSTRAINT: this combination of constraints is unusable.
        """
        plan_input = plan_input_from_index_info(index_info)
        try:
            output = self._table.best_index(plan_input)
        except PlanningError as exc:
            logger.debug("Rejected plan for %s: %s", self._table.schema.name, exc)
            return False
        apply_plan_output(index_info, output)
        return True

    def Open(self) -> ApswCursor:
        return ApswCursor(self._table.open())

    def Disconnect(self) -> None:
        self._table.disconnect()

    Destroy = Disconnect


class ApswModule:
    def __init__(self, module: VirtualModule) -> None:
        self._module = module

    def Create(
        self,
        connection: apsw.Connection,
        modulename: str,
        databasename: str,
        tablename: str,
        *args: str,
    ) -> tuple[str, ApswTable]:
        declared: list[str] = []
        table = self._module.connect(
            [modulename, databasename, tablename, *args], declared.append
        )
        logger.debug("Connected %s.%s using %s", databasename, tablename, modulename)
        return declared[-1], ApswTable(table)

    Connect = Create


def register_modules(connection: apsw.Connection, registry: ModuleRegistry) -> None:
    """Attach every module in ``registry`` to ``connection``."""
    for name, module in registry.items():
        connection.createmodule(name, ApswModule(module), use_bestindex_object=True)
        logger.debug("Registered module %s", name)
