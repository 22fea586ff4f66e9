from __future__ import annotations

import logging
from datetime import datetime, timezone

from tableflow.application.dto.responses import OrderResponse
from tableflow.application.metrics.order_lifecycle import record_transition
from tableflow.application.ports.publisher import EventPublisher
from tableflow.application.ports.unit_of_work import UnitOfWorkFactory
from tableflow.application.use_cases.context import TraceContext
from tableflow.application.use_cases.get_order import hydrate_order, load_order
from tableflow.application.use_cases.publishing import (
    publish_order_changed,
    publish_table_released,
)
from tableflow.application.use_cases.table_release import release_table
from tableflow.domain.common.ids import OrderId
from tableflow.domain.order.entities import OrderStatus
from tableflow.domain.order.events import TableReleased

logger = logging.getLogger(__name__)


class CancelOrder:
    def __init__(self, uow_factory: UnitOfWorkFactory, publisher: EventPublisher) -> None:
        self._uow_factory = uow_factory
        self._publisher = publisher

    def execute(self, order_id: OrderId, trace_ctx: TraceContext) -> OrderResponse:
        now = datetime.now(timezone.utc)
        with self._uow_factory() as uow:
            order = load_order(uow, order_id)
            cancelled = order.cancel(now)
            uow.orders.update(cancelled)
            # Only an order still holding the table frees it. One active order per
            # table means nothing else can be holding it then.
            released = None
            if cancelled.table_id is not None and order.occupies_table:
                released = release_table(uow, cancelled.table_id)
            uow.commit()
            response = hydrate_order(uow, cancelled, table=released)

        logger.info("order_cancelled", extra={"order_id": str(order_id)})
        record_transition(from_status=order.status, to_status=OrderStatus.CANCELLED)
        publish_order_changed(self._publisher, "order.cancelled", cancelled, trace_ctx)
        if released is not None:
            publish_table_released(
                self._publisher,
                TableReleased(
                    table_id=released.table_id,
                    order_id=cancelled.order_id,
                    reason="cancelled",
                    occurred_at=now,
                ),
                trace_ctx,
            )
        return response
