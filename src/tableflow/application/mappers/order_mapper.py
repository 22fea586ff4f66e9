from __future__ import annotations

from tableflow.application.dto.responses import (
    CustomizationsResponse,
    MoneyResponse,
    OrderItemResponse,
    OrderResponse,
    ProductSummaryResponse,
    TableSummaryResponse,
    UserSummaryResponse,
)
from tableflow.domain.common.money import Money
from tableflow.domain.order.entities import Order, OrderItem
from tableflow.domain.table.entities import Table
from tableflow.domain.user.entities import StaffUser


def to_money_response(money: Money) -> MoneyResponse:
    return MoneyResponse(amountCents=money.amount_cents, currency=money.currency)


def to_order_response(
    order: Order,
    user: StaffUser | None = None,
    table: Table | None = None,
) -> OrderResponse:
    return OrderResponse(
        orderId=str(order.order_id),
        userId=str(order.user_id),
        user=(
            UserSummaryResponse(userId=str(user.user_id), name=user.name, email=user.email)
            if user is not None
            else None
        ),
        tableId=str(order.table_id) if order.table_id else None,
        table=(
            TableSummaryResponse(
                tableId=str(table.table_id),
                number=table.number,
                capacity=table.capacity,
            )
            if table is not None
            else None
        ),
        status=order.status.value,
        deliveryType=order.delivery_type.value,
        paymentMethod=order.payment_method.value if order.payment_method else None,
        isPaid=order.is_paid,
        isActive=order.is_active,
        isReceived=order.is_received,
        notes=order.notes,
        items=[_to_item_response(item) for item in order.items],
        total=to_money_response(order.total),
        createdAt=order.created_at,
        updatedAt=order.updated_at,
    )


def _to_item_response(item: OrderItem) -> OrderItemResponse:
    return OrderItemResponse(
        itemId=str(item.item_id),
        productId=str(item.product_id),
        product=ProductSummaryResponse(productId=str(item.product_id), name=item.product_name),
        quantity=item.quantity,
        unitPrice=to_money_response(item.unit_price),
        lineTotal=to_money_response(item.line_total),
        notes=item.notes,
        customizations=(
            None
            if item.customizations.is_empty
            else CustomizationsResponse(
                adicionaisIds=[str(addon_id) for addon_id in item.customizations.addon_ids]
            )
        ),
    )
