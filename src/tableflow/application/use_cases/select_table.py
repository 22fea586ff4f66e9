from __future__ import annotations

import logging

from tableflow.application.dto.responses import TableStateResponse
from tableflow.application.errors import (
    ActiveOrderExistsError,
    InvalidInputError,
    TableNotAvailableError,
    TableNotFoundError,
)
from tableflow.application.mappers.table_mapper import to_table_state_response
from tableflow.application.ports.unit_of_work import UnitOfWorkFactory
from tableflow.domain.common.ids import TableId, UserId
from tableflow.domain.table.entities import TableNotFreeError

logger = logging.getLogger(__name__)


class SelectTable:
    """Validate that a table can take a new order. Never writes."""

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self, table_id: TableId, staff_user_id: UserId) -> TableStateResponse:
        if not table_id:
            raise InvalidInputError("table id is required")
        if not staff_user_id:
            raise InvalidInputError("staff user id is required")

        with self._uow_factory() as uow:
            table = uow.tables.get(table_id)
            if table is None:
                raise TableNotFoundError(f"table {table_id} not found", tableId=str(table_id))

            try:
                table.ensure_free()
            except TableNotFreeError as exc:
                raise TableNotAvailableError(
                    str(exc), tableId=str(table_id), status=exc.status.value
                ) from exc

            # The status column can lag behind the orders; the order lookup decides.
            existing = uow.orders.find_active_for_table(table_id)
            if existing is not None:
                raise ActiveOrderExistsError(
                    f"table {table.number} already has an active order ({existing.order_id})",
                    tableId=str(table_id),
                    orderId=str(existing.order_id),
                )

        logger.info(
            "table_selected",
            extra={"table_id": str(table_id), "user_id": str(staff_user_id)},
        )
        return to_table_state_response(table, None)
