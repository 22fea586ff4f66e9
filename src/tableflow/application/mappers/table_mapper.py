from __future__ import annotations

from tableflow.application.dto.responses import (
    ActiveOrderResponse,
    TableResponse,
    TableStateResponse,
)
from tableflow.application.mappers.order_mapper import to_money_response
from tableflow.domain.order.entities import Order
from tableflow.domain.table.entities import Table


def to_table_response(table: Table) -> TableResponse:
    return TableResponse(
        tableId=str(table.table_id),
        number=table.number,
        capacity=table.capacity,
        status=table.status.value,
        assignedTo=str(table.assigned_to) if table.assigned_to else None,
    )


def to_active_order_response(order: Order) -> ActiveOrderResponse:
    return ActiveOrderResponse(
        orderId=str(order.order_id),
        status=order.status.value,
        total=to_money_response(order.total),
        createdAt=order.created_at,
        isActive=order.occupies_table,
        isReceived=order.is_received,
    )


def to_table_state_response(table: Table, active_order: Order | None) -> TableStateResponse:
    return TableStateResponse(
        tableId=str(table.table_id),
        tableNumber=table.number,
        status=table.status.value,
        assignedTo=str(table.assigned_to) if table.assigned_to else None,
        activeOrders=[to_active_order_response(active_order)] if active_order else [],
    )
