from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from tableflow.domain.common.ids import OrderId, OrderItemId, ProductId, TableId, UserId
from tableflow.domain.common.money import Money
from tableflow.domain.order.entities import (
    DeliveryType,
    Order,
    OrderAlreadyReceivedError,
    OrderItem,
    OrderStatus,
    OrderTransitionError,
    PaymentMethod,
    create_confirmed_order,
    is_collectable,
    is_received,
    occupies_table,
)

NOW = datetime(2026, 10, 17, 12, 0, tzinfo=timezone.utc)


def _item(cents: int, quantity: int = 1) -> OrderItem:
    return OrderItem(
        item_id=OrderItemId(f"oit_{cents}_{quantity}"),
        product_id=ProductId("prd_001"),
        product_name="X-Burger",
        quantity=quantity,
        unit_price=Money(amount_cents=cents, currency="BRL"),
    )


def _order(table_id: str | None = "tbl_001") -> Order:
    return create_confirmed_order(
        order_id=OrderId("ord_001"),
        user_id=UserId("usr_001"),
        table_id=TableId(table_id) if table_id else None,
        items=[_item(1000, 2)],
        notes=None,
        now=NOW,
    )


@pytest.mark.parametrize(
    ("status", "occupies", "received"),
    [
        (OrderStatus.PENDING, True, False),
        (OrderStatus.CONFIRMED, True, False),
        (OrderStatus.PREPARING, True, False),
        (OrderStatus.READY, True, False),
        (OrderStatus.DELIVERED, False, True),
        (OrderStatus.FINALIZED, False, True),
        (OrderStatus.CANCELLED, False, False),
    ],
)
def test_status_derivations(status: OrderStatus, occupies: bool, received: bool) -> None:
    assert occupies_table(status) is occupies
    assert is_received(status) is received


def test_collectable_depends_on_status_and_settlement() -> None:
    assert is_collectable(OrderStatus.DELIVERED, is_paid=False) is True
    assert is_collectable(OrderStatus.DELIVERED, is_paid=True) is False
    assert is_collectable(OrderStatus.CANCELLED, is_paid=False) is False
    assert is_collectable(OrderStatus.CONFIRMED, is_paid=True) is False


def test_create_confirmed_order_defaults() -> None:
    order = _order()

    assert order.status == OrderStatus.CONFIRMED
    assert order.is_paid is False
    assert order.payment_method is None
    assert order.delivery_type == DeliveryType.DINE_IN
    assert order.total == Money(amount_cents=2000, currency="BRL")
    assert order.is_active is True
    assert order.occupies_table is True


def test_order_without_table_is_pickup() -> None:
    assert _order(table_id=None).delivery_type == DeliveryType.PICKUP


def test_order_requires_items() -> None:
    with pytest.raises(ValueError):
        create_confirmed_order(
            order_id=OrderId("ord_001"),
            user_id=UserId("usr_001"),
            table_id=TableId("tbl_001"),
            items=[],
            notes=None,
            now=NOW,
        )


def test_item_quantity_must_be_positive() -> None:
    with pytest.raises(ValueError):
        _item(1000, quantity=0)


def test_recomputed_total_sums_every_item() -> None:
    order = _order()
    drifted = replace(order, total=Money(amount_cents=1, currency="BRL"))
    grown = replace(drifted, items=[*drifted.items, _item(500)])

    fixed = grown.with_recomputed_total(NOW + timedelta(minutes=1))

    assert fixed.total == Money(amount_cents=2500, currency="BRL")
    assert fixed.updated_at == NOW + timedelta(minutes=1)


def test_pay_keeps_status_and_clears_active_flag() -> None:
    paid = _order().pay(PaymentMethod.PIX, NOW)

    assert paid.is_paid is True
    assert paid.payment_method == PaymentMethod.PIX
    assert paid.status == OrderStatus.CONFIRMED
    assert paid.is_active is False
    assert paid.occupies_table is True


def test_mark_received_twice_is_rejected() -> None:
    received = _order().mark_received(NOW)
    assert received.status == OrderStatus.DELIVERED
    assert received.is_received is True

    with pytest.raises(OrderAlreadyReceivedError):
        received.mark_received(NOW)


def test_mark_received_rejects_cancelled_order() -> None:
    with pytest.raises(OrderTransitionError):
        _order().cancel(NOW).mark_received(NOW)


def test_unpaid_delivered_order_stays_collectable() -> None:
    received = _order().mark_received(NOW)

    assert received.occupies_table is False
    assert received.is_active is True


def test_advance_is_forward_only() -> None:
    preparing = _order().advance_to(OrderStatus.PREPARING, NOW)
    assert preparing.status == OrderStatus.PREPARING

    with pytest.raises(OrderTransitionError):
        preparing.advance_to(OrderStatus.CONFIRMED, NOW)


def test_advance_to_same_status_is_noop() -> None:
    order = _order()
    assert order.advance_to(OrderStatus.CONFIRMED, NOW) is order


def test_advance_can_finalize_from_any_open_status() -> None:
    finalized = _order().advance_to(OrderStatus.FINALIZED, NOW)

    assert finalized.status == OrderStatus.FINALIZED
    assert finalized.occupies_table is False


def test_advance_rejects_terminal_orders() -> None:
    with pytest.raises(OrderTransitionError):
        _order().cancel(NOW).advance_to(OrderStatus.READY, NOW)


def test_advance_rejects_statuses_with_dedicated_operations() -> None:
    with pytest.raises(OrderTransitionError):
        _order().advance_to(OrderStatus.DELIVERED, NOW)


def test_money_from_decimal_rounds_half_up() -> None:
    assert Money.from_decimal(Decimal("12.345"), "BRL").amount_cents == 1235
    assert Money.from_decimal(Decimal("5"), "BRL").amount_cents == 500


def test_money_rejects_mixed_currencies() -> None:
    with pytest.raises(ValueError):
        Money(amount_cents=100, currency="BRL") + Money(amount_cents=100, currency="USD")


def test_money_rejects_invalid_currency_code() -> None:
    with pytest.raises(ValueError):
        Money(amount_cents=100, currency="real")
