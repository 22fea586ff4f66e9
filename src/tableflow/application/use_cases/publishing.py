from __future__ import annotations

import logging

from tableflow.application.mappers.event_envelope import (
    serialize_order_event,
    serialize_table_released_event,
)
from tableflow.application.metrics.order_lifecycle import record_table_released
from tableflow.application.ports.publisher import LIFECYCLE_CHANNEL, EventPublisher
from tableflow.application.use_cases.context import TraceContext
from tableflow.domain.order.entities import Order
from tableflow.domain.order.events import OrderChanged, TableReleased

logger = logging.getLogger(__name__)


def publish_order_changed(
    publisher: EventPublisher,
    event_type: str,
    order: Order,
    trace_ctx: TraceContext,
) -> None:
    event = OrderChanged(
        event_type=event_type,
        order_id=order.order_id,
        table_id=order.table_id,
        occurred_at=order.updated_at,
    )
    message = serialize_order_event(
        event=event,
        order=order,
        trace_id=trace_ctx.trace_id,
        request_id=trace_ctx.request_id,
    )
    _publish(publisher, event_type, message)


def publish_table_released(
    publisher: EventPublisher,
    event: TableReleased,
    trace_ctx: TraceContext,
) -> None:
    logger.info(
        "table_released",
        extra={
            "table_id": str(event.table_id),
            "order_id": str(event.order_id) if event.order_id else None,
            "reason": event.reason,
        },
    )
    record_table_released(event.reason)
    message = serialize_table_released_event(
        event=event,
        trace_id=trace_ctx.trace_id,
        request_id=trace_ctx.request_id,
    )
    _publish(publisher, "table.released", message)


def _publish(publisher: EventPublisher, event_type: str, message: str) -> None:
    try:
        publisher.publish(channel=LIFECYCLE_CHANNEL, message=message)
    except Exception:
        logger.warning("event_publish_failed", extra={"event_type": event_type}, exc_info=True)
