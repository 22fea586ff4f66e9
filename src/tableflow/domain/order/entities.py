from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum

from tableflow.domain.catalog.entities import Customizations
from tableflow.domain.common.ids import OrderId, OrderItemId, ProductId, TableId, UserId
from tableflow.domain.common.money import Money


class OrderStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    PREPARING = "PREPARING"
    READY = "READY"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"
    FINALIZED = "FINALIZED"


class PaymentMethod(str, Enum):
    CASH = "CASH"
    CARD = "CARD"
    PIX = "PIX"


class DeliveryType(str, Enum):
    DELIVERY = "DELIVERY"
    PICKUP = "PICKUP"
    DINE_IN = "DINE_IN"


# Orders in these statuses no longer hold their table.
TERMINAL_STATUSES = frozenset(
    {OrderStatus.CANCELLED, OrderStatus.DELIVERED, OrderStatus.FINALIZED}
)
RECEIVED_STATUSES = frozenset({OrderStatus.DELIVERED, OrderStatus.FINALIZED})

_PIPELINE_RANK = {
    OrderStatus.PENDING: 0,
    OrderStatus.CONFIRMED: 1,
    OrderStatus.PREPARING: 2,
    OrderStatus.READY: 3,
}


def occupies_table(status: OrderStatus) -> bool:
    return status not in TERMINAL_STATUSES


def is_received(status: OrderStatus) -> bool:
    return status in RECEIVED_STATUSES


def is_collectable(status: OrderStatus, is_paid: bool) -> bool:
    """Whether accounting still expects money for an order."""
    return not is_paid and status != OrderStatus.CANCELLED


@dataclass(frozen=True)
class OrderItem:
    item_id: OrderItemId
    product_id: ProductId
    product_name: str
    quantity: int
    unit_price: Money
    notes: str | None = None
    customizations: Customizations = field(default_factory=Customizations)

    def __post_init__(self) -> None:
        if self.quantity < 1:
            raise ValueError("quantity must be >= 1")

    @property
    def line_total(self) -> Money:
        return self.unit_price.times(self.quantity)


@dataclass(frozen=True)
class Order:
    order_id: OrderId
    user_id: UserId
    table_id: TableId | None
    status: OrderStatus
    items: list[OrderItem]
    total: Money
    is_paid: bool
    payment_method: PaymentMethod | None
    delivery_type: DeliveryType
    notes: str | None
    created_at: datetime
    updated_at: datetime

    def __post_init__(self) -> None:
        if not self.items:
            raise ValueError("order must contain at least one item")

    @property
    def occupies_table(self) -> bool:
        return occupies_table(self.status)

    @property
    def is_received(self) -> bool:
        return is_received(self.status)

    @property
    def is_active(self) -> bool:
        return is_collectable(self.status, self.is_paid)

    def with_recomputed_total(self, now: datetime) -> Order:
        return replace(self, total=_sum_items(self.items), updated_at=now)

    def pay(self, method: PaymentMethod, now: datetime) -> Order:
        return replace(self, is_paid=True, payment_method=method, updated_at=now)

    def mark_received(self, now: datetime) -> Order:
        if self.status in RECEIVED_STATUSES:
            raise OrderAlreadyReceivedError(f"order {self.order_id} was already received")
        if self.status == OrderStatus.CANCELLED:
            raise OrderTransitionError(f"order {self.order_id} is cancelled")
        return replace(self, status=OrderStatus.DELIVERED, updated_at=now)

    def cancel(self, now: datetime) -> Order:
        return replace(self, status=OrderStatus.CANCELLED, updated_at=now)

    def advance_to(self, status: OrderStatus, now: datetime) -> Order:
        if not self.occupies_table:
            raise OrderTransitionError(
                f"cannot change status of order {self.order_id} from status={self.status.value}"
            )
        if status == self.status:
            return self
        if status == OrderStatus.FINALIZED:
            return replace(self, status=status, updated_at=now)
        if status not in _PIPELINE_RANK:
            raise OrderTransitionError(f"status={status.value} has a dedicated operation")
        if _PIPELINE_RANK[status] < _PIPELINE_RANK[self.status]:
            raise OrderTransitionError(
                f"cannot move order back from status={self.status.value} to {status.value}"
            )
        return replace(self, status=status, updated_at=now)


def create_confirmed_order(
    order_id: OrderId,
    user_id: UserId,
    table_id: TableId | None,
    items: list[OrderItem],
    notes: str | None,
    now: datetime,
) -> Order:
    if not items:
        raise ValueError("order must contain at least one item")
    return Order(
        order_id=order_id,
        user_id=user_id,
        table_id=table_id,
        status=OrderStatus.CONFIRMED,
        items=items,
        total=_sum_items(items),
        is_paid=False,
        payment_method=None,
        delivery_type=DeliveryType.DINE_IN if table_id else DeliveryType.PICKUP,
        notes=notes,
        created_at=now,
        updated_at=now,
    )


def _sum_items(items: list[OrderItem]) -> Money:
    total = Money.zero(items[0].unit_price.currency)
    for item in items:
        total = total + item.line_total
    return total


class OrderTransitionError(Exception):
    pass


class OrderAlreadyReceivedError(Exception):
    pass
