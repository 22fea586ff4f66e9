from __future__ import annotations

import json
from datetime import datetime
from typing import Any
from uuid import uuid4

from tableflow.domain.order.entities import Order
from tableflow.domain.order.events import OrderChanged, TableReleased


def _serialize_event(
    *,
    event_type: str,
    occurred_at: datetime,
    payload: dict[str, Any],
    trace_id: str | None,
    request_id: str | None,
) -> str:
    envelope = {
        "event_id": str(uuid4()),
        "event_type": event_type,
        "occurred_at": occurred_at.isoformat(),
        "request_id": request_id,
        "trace_id": trace_id,
        "payload": payload,
    }
    return json.dumps(envelope, separators=(",", ":"), ensure_ascii=False)


def serialize_order_event(
    *,
    event: OrderChanged,
    order: Order,
    trace_id: str | None,
    request_id: str | None,
) -> str:
    return _serialize_event(
        event_type=event.event_type,
        occurred_at=event.occurred_at,
        trace_id=trace_id,
        request_id=request_id,
        payload={
            "orderId": str(order.order_id),
            "tableId": str(order.table_id) if order.table_id else None,
            "status": order.status.value,
            "isPaid": order.is_paid,
            "isActive": order.is_active,
            "paymentMethod": order.payment_method.value if order.payment_method else None,
            "totalMoney": {
                "amountCents": order.total.amount_cents,
                "currency": order.total.currency,
            },
            "itemCount": len(order.items),
            "updatedAt": order.updated_at.isoformat(),
        },
    )


def serialize_table_released_event(
    *,
    event: TableReleased,
    trace_id: str | None,
    request_id: str | None,
) -> str:
    return _serialize_event(
        event_type="table.released",
        occurred_at=event.occurred_at,
        trace_id=trace_id,
        request_id=request_id,
        payload={
            "tableId": str(event.table_id),
            "orderId": str(event.order_id) if event.order_id else None,
            "reason": event.reason,
        },
    )
