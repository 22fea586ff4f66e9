from __future__ import annotations

from tableflow.application.dto.responses import TableStateResponse, TableStatusCheckResponse
from tableflow.application.errors import TableNotFoundError
from tableflow.application.mappers.table_mapper import (
    to_active_order_response,
    to_table_response,
    to_table_state_response,
)
from tableflow.application.ports.unit_of_work import UnitOfWork, UnitOfWorkFactory
from tableflow.domain.common.ids import TableId
from tableflow.domain.order.entities import Order
from tableflow.domain.table.entities import Table, TableStatus


def _load_table_with_active_order(
    uow: UnitOfWork, table_id: TableId
) -> tuple[Table, Order | None]:
    table = uow.tables.get(table_id)
    if table is None:
        raise TableNotFoundError(f"table {table_id} not found", tableId=str(table_id))
    return table, uow.orders.find_active_for_table(table_id)


class CheckTableStatus:
    """Audit the FREE/OCCUPIED status against the table's orders.

    RESERVED and MAINTENANCE tables never match: they are managed by hand.
    """

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self, table_id: TableId) -> TableStatusCheckResponse:
        with self._uow_factory() as uow:
            table, active = _load_table_with_active_order(uow, table_id)

        should_be_occupied = active is not None
        status_matches = (should_be_occupied and table.status == TableStatus.OCCUPIED) or (
            not should_be_occupied and table.status == TableStatus.FREE
        )
        return TableStatusCheckResponse(
            table=to_table_response(table),
            activeOrders=[to_active_order_response(active)] if active else [],
            shouldBeOccupied=should_be_occupied,
            statusMatches=status_matches,
        )


class GetTableCompleteState:
    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self, table_id: TableId) -> TableStateResponse:
        with self._uow_factory() as uow:
            table, active = _load_table_with_active_order(uow, table_id)
        return to_table_state_response(table, active)
