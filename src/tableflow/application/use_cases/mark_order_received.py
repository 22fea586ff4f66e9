from __future__ import annotations

import logging
from datetime import datetime, timezone

from tableflow.application.dto.responses import OrderResponse
from tableflow.application.errors import InvalidOrderTransitionError, OrderAlreadyReceivedError
from tableflow.application.metrics.order_lifecycle import record_transition
from tableflow.application.ports.publisher import EventPublisher
from tableflow.application.ports.unit_of_work import UnitOfWorkFactory
from tableflow.application.use_cases.context import TraceContext
from tableflow.application.use_cases.get_order import hydrate_order, load_order
from tableflow.application.use_cases.publishing import (
    publish_order_changed,
    publish_table_released,
)
from tableflow.application.use_cases.table_release import release_table_if_idle
from tableflow.domain.common.ids import OrderId
from tableflow.domain.order.entities import OrderAlreadyReceivedError as AlreadyReceived
from tableflow.domain.order.entities import OrderStatus, OrderTransitionError
from tableflow.domain.order.events import TableReleased

logger = logging.getLogger(__name__)


class MarkOrderReceived:
    def __init__(self, uow_factory: UnitOfWorkFactory, publisher: EventPublisher) -> None:
        self._uow_factory = uow_factory
        self._publisher = publisher

    def execute(self, order_id: OrderId, trace_ctx: TraceContext) -> OrderResponse:
        now = datetime.now(timezone.utc)
        with self._uow_factory() as uow:
            order = load_order(uow, order_id)
            try:
                received = order.mark_received(now)
            except AlreadyReceived as exc:
                raise OrderAlreadyReceivedError(str(exc), orderId=str(order_id)) from exc
            except OrderTransitionError as exc:
                raise InvalidOrderTransitionError(str(exc), orderId=str(order_id)) from exc

            uow.orders.update(received)
            released = None
            if received.table_id is not None:
                released = release_table_if_idle(uow, received.table_id)
            uow.commit()
            response = hydrate_order(uow, received, table=released)

        logger.info(
            "order_received",
            extra={"order_id": str(order_id), "is_paid": received.is_paid},
        )
        record_transition(from_status=order.status, to_status=OrderStatus.DELIVERED)
        publish_order_changed(self._publisher, "order.received", received, trace_ctx)
        if released is not None:
            publish_table_released(
                self._publisher,
                TableReleased(
                    table_id=released.table_id,
                    order_id=received.order_id,
                    reason="received",
                    occurred_at=now,
                ),
                trace_ctx,
            )
        return response
