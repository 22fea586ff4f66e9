from __future__ import annotations

import logging
from datetime import datetime, timezone

from tableflow.application.dto.responses import TableResponse
from tableflow.application.errors import TableNotFoundError
from tableflow.application.mappers.table_mapper import to_table_response
from tableflow.application.ports.publisher import EventPublisher
from tableflow.application.ports.unit_of_work import UnitOfWorkFactory
from tableflow.application.use_cases.context import TraceContext
from tableflow.application.use_cases.publishing import publish_table_released
from tableflow.application.use_cases.table_release import release_table
from tableflow.domain.common.ids import TableId
from tableflow.domain.order.events import TableReleased

logger = logging.getLogger(__name__)


class ForceReleaseTable:
    """Operator override: frees the table even if an order still holds it."""

    def __init__(self, uow_factory: UnitOfWorkFactory, publisher: EventPublisher) -> None:
        self._uow_factory = uow_factory
        self._publisher = publisher

    def execute(self, table_id: TableId, trace_ctx: TraceContext) -> TableResponse:
        with self._uow_factory() as uow:
            orphaned = uow.orders.find_active_for_table(table_id)
            released = release_table(uow, table_id)
            if released is None:
                raise TableNotFoundError(f"table {table_id} not found", tableId=str(table_id))
            uow.commit()

        if orphaned is not None:
            logger.warning(
                "table_force_released_with_active_order",
                extra={"table_id": str(table_id), "order_id": str(orphaned.order_id)},
            )
        publish_table_released(
            self._publisher,
            TableReleased(
                table_id=table_id,
                order_id=None,
                reason="forced",
                occurred_at=datetime.now(timezone.utc),
            ),
            trace_ctx,
        )
        return to_table_response(released)
