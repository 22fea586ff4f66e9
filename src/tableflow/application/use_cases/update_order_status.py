from __future__ import annotations

import logging
from datetime import datetime, timezone

from tableflow.application.dto.responses import OrderResponse
from tableflow.application.errors import InvalidOrderStatusError, InvalidOrderTransitionError
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
from tableflow.domain.order.entities import OrderStatus, OrderTransitionError
from tableflow.domain.order.events import TableReleased

logger = logging.getLogger(__name__)

_DEDICATED_OPERATIONS = {
    OrderStatus.DELIVERED: "mark the order as received",
    OrderStatus.CANCELLED: "cancel the order",
}


class UpdateOrderStatus:
    """Move an order along the kitchen pipeline, or finalize it."""

    def __init__(self, uow_factory: UnitOfWorkFactory, publisher: EventPublisher) -> None:
        self._uow_factory = uow_factory
        self._publisher = publisher

    def execute(self, order_id: OrderId, status: str, trace_ctx: TraceContext) -> OrderResponse:
        target = parse_order_status(status)
        if target in _DEDICATED_OPERATIONS:
            raise InvalidOrderStatusError(
                f"status={target.value} cannot be set directly; {_DEDICATED_OPERATIONS[target]}"
            )

        now = datetime.now(timezone.utc)
        with self._uow_factory() as uow:
            order = load_order(uow, order_id)
            try:
                updated = order.advance_to(target, now)
            except OrderTransitionError as exc:
                raise InvalidOrderTransitionError(str(exc), orderId=str(order_id)) from exc

            if updated is order:
                return hydrate_order(uow, order)

            uow.orders.update(updated)
            released = None
            if target == OrderStatus.FINALIZED and updated.table_id is not None:
                released = release_table_if_idle(uow, updated.table_id)
            uow.commit()
            response = hydrate_order(uow, updated, table=released)

        logger.info(
            "order_status_changed",
            extra={
                "order_id": str(order_id),
                "from_status": order.status.value,
                "to_status": target.value,
            },
        )
        record_transition(from_status=order.status, to_status=target)
        publish_order_changed(self._publisher, "order.status_changed", updated, trace_ctx)
        if released is not None:
            publish_table_released(
                self._publisher,
                TableReleased(
                    table_id=released.table_id,
                    order_id=updated.order_id,
                    reason="finalized",
                    occurred_at=now,
                ),
                trace_ctx,
            )
        return response


def parse_order_status(value: str) -> OrderStatus:
    try:
        return OrderStatus((value or "").strip().upper())
    except ValueError as exc:
        raise InvalidOrderStatusError(f"invalid order status: {value}") from exc
