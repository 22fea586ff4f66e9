from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from tableflow.application.mappers.customizations import (
    parse_customizations,
    serialize_customizations,
)
from tableflow.application.ports.repositories import OrderRepository
from tableflow.domain.common.ids import OrderId, OrderItemId, ProductId, TableId, UserId
from tableflow.domain.common.money import Money
from tableflow.domain.order.entities import (
    TERMINAL_STATUSES,
    DeliveryType,
    Order,
    OrderItem,
    OrderStatus,
    PaymentMethod,
)
from tableflow.infrastructure.db.models.order import OrderItemModel, OrderModel

_TERMINAL_VALUES = sorted(status.value for status in TERMINAL_STATUSES)


class SqlAlchemyOrderRepository(OrderRepository):
    def __init__(self, session: Session) -> None:
        self._session = session

    def add(self, order: Order) -> None:
        self._session.add(self._to_model(order))
        self._session.flush()

    def get(self, order_id: OrderId) -> Order | None:
        model = self._session.get(
            OrderModel,
            str(order_id),
            options=[selectinload(OrderModel.items)],
        )
        if model is None:
            return None
        return self._to_domain(model)

    def update(self, order: Order) -> None:
        """Persist order-level fields. Items are only ever appended via ``add_items``."""
        model = self._session.get(OrderModel, str(order.order_id))
        if model is None:
            raise LookupError(f"order {order.order_id} does not exist")
        model.status = order.status.value
        model.total_cents = order.total.amount_cents
        model.currency = order.total.currency
        model.is_paid = order.is_paid
        model.is_active = order.is_active
        model.payment_method = order.payment_method.value if order.payment_method else None
        model.notes = order.notes
        model.updated_at = order.updated_at
        self._session.flush()

    def add_items(self, order_id: OrderId, items: list[OrderItem]) -> None:
        model = self._session.get(
            OrderModel,
            str(order_id),
            options=[selectinload(OrderModel.items)],
        )
        if model is None:
            raise LookupError(f"order {order_id} does not exist")
        start = len(model.items)
        for offset, item in enumerate(items):
            model.items.append(_to_item_model(item, str(order_id), start + offset))
        self._session.flush()

    def find_active_for_table(self, table_id: TableId) -> Order | None:
        statement = (
            select(OrderModel)
            .options(selectinload(OrderModel.items))
            .where(
                OrderModel.table_id == str(table_id),
                OrderModel.status.not_in(_TERMINAL_VALUES),
            )
            .order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
            .limit(1)
        )
        model = self._session.execute(statement).scalar_one_or_none()
        if model is None:
            return None
        return self._to_domain(model)

    def count_active_for_table(self, table_id: TableId) -> int:
        statement = select(func.count(OrderModel.id)).where(
            OrderModel.table_id == str(table_id),
            OrderModel.status.not_in(_TERMINAL_VALUES),
        )
        return int(self._session.execute(statement).scalar_one())

    def list_outstanding(self, limit: int) -> list[Order]:
        statement = (
            select(OrderModel)
            .options(selectinload(OrderModel.items))
            .where(
                OrderModel.is_paid.is_(False),
                OrderModel.status != OrderStatus.CANCELLED.value,
            )
            .order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
            .limit(limit)
        )
        models = self._session.execute(statement).scalars().all()
        return [self._to_domain(model) for model in models]

    def _to_model(self, order: Order) -> OrderModel:
        model = OrderModel(
            id=str(order.order_id),
            user_id=str(order.user_id),
            table_id=str(order.table_id) if order.table_id else None,
            status=order.status.value,
            total_cents=order.total.amount_cents,
            currency=order.total.currency,
            is_paid=order.is_paid,
            is_active=order.is_active,
            payment_method=order.payment_method.value if order.payment_method else None,
            delivery_type=order.delivery_type.value,
            notes=order.notes,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )
        model.items = [
            _to_item_model(item, str(order.order_id), position)
            for position, item in enumerate(order.items)
        ]
        return model

    def _to_domain(self, model: OrderModel) -> Order:
        items = [
            OrderItem(
                item_id=OrderItemId(item.id),
                product_id=ProductId(item.product_id),
                product_name=item.product_name,
                quantity=item.quantity,
                unit_price=Money(amount_cents=item.unit_price_cents, currency=item.currency),
                notes=item.notes,
                customizations=parse_customizations(item.customizations),
            )
            for item in model.items
        ]
        return Order(
            order_id=OrderId(model.id),
            user_id=UserId(model.user_id),
            table_id=TableId(model.table_id) if model.table_id else None,
            status=OrderStatus(model.status),
            items=items,
            total=Money(amount_cents=model.total_cents, currency=model.currency),
            is_paid=model.is_paid,
            payment_method=PaymentMethod(model.payment_method) if model.payment_method else None,
            delivery_type=DeliveryType(model.delivery_type),
            notes=model.notes,
            created_at=_aware(model.created_at),
            updated_at=_aware(model.updated_at),
        )


def _to_item_model(item: OrderItem, order_id: str, position: int) -> OrderItemModel:
    return OrderItemModel(
        id=str(item.item_id),
        order_id=order_id,
        position=position,
        product_id=str(item.product_id),
        product_name=item.product_name,
        quantity=item.quantity,
        unit_price_cents=item.unit_price.amount_cents,
        currency=item.unit_price.currency,
        notes=item.notes,
        customizations=serialize_customizations(item.customizations),
    )


def _aware(value: datetime) -> datetime:
    # SQLite drops tzinfo on round-trip.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
