from __future__ import annotations

import json
from decimal import Decimal

from fakes import FakePublisher, InMemoryStore

from tableflow.application.dto.requests import (
    AddProductLineRequest,
    CreateOrderRequest,
    OrderItemRequest,
)
from tableflow.application.errors import ErrorKind
from tableflow.application.lifecycle import OrderTableManager
from tableflow.domain.catalog.entities import Addon, Product
from tableflow.domain.common.ids import AddonId, ProductId, TableId, UserId
from tableflow.domain.common.money import Money
from tableflow.domain.table.entities import TableStatus

T1 = TableId("tbl_001")


def _create_request(**item_overrides) -> CreateOrderRequest:
    item = {"product_id": "prd_001", "quantity": 2, **item_overrides}
    return CreateOrderRequest(
        items=[OrderItemRequest(**item)],
        table_id=str(T1),
        staff_user_id="usr_001",
    )


def _event_types(publisher: FakePublisher) -> list[str]:
    return [json.loads(message)["event_type"] for _, message in publisher.messages]


def test_scenario_b_create_order_occupies_table(
    manager: OrderTableManager, store: InMemoryStore, publisher: FakePublisher
) -> None:
    result = manager.create_order(_create_request())

    assert result.success
    order = result.unwrap()
    assert order.total.amountCents == 2000
    assert order.status == "CONFIRMED"
    assert order.isActive is True
    assert order.isPaid is False
    assert order.deliveryType == "DINE_IN"
    assert order.user is not None and order.user.name == "Ana Souza"
    assert store.tables[T1].status == TableStatus.OCCUPIED
    assert store.tables[T1].assigned_to == UserId("usr_001")
    assert _event_types(publisher) == ["order.created"]
    assert publisher.messages[0][0] == "events:tables"


def test_scenario_c_addons_are_folded_into_unit_price(manager: OrderTableManager) -> None:
    order = manager.create_order(
        _create_request(customizations={"adicionaisIds": ["add_001"]})
    ).unwrap()

    assert order.items[0].unitPrice.amountCents == 1250
    assert order.total.amountCents == 2500
    assert order.items[0].customizations is not None
    assert order.items[0].customizations.adicionaisIds == ["add_001"]


def test_legacy_customizations_and_missing_addons(manager: OrderTableManager) -> None:
    order = manager.create_order(
        _create_request(
            quantity=1,
            customizations='{"adicionais": [{"id": "add_002"}, "add_gone"]}',
        )
    ).unwrap()

    # add_gone no longer exists and is charged nothing.
    assert order.items[0].unitPrice.amountCents == 1100
    assert order.items[0].customizations.adicionaisIds == ["add_002", "add_gone"]


def test_scenario_d_add_products_uses_supplied_price(
    manager: OrderTableManager, publisher: FakePublisher
) -> None:
    manager.create_order(_create_request())

    result = manager.add_products_to_order(
        "tbl_001",
        [AddProductLineRequest(product_id="prd_002", quantity=1, price=Decimal("5.00"))],
    )

    assert result.success
    order = result.unwrap()
    assert order.total.amountCents == 2500
    assert len(order.items) == 2
    assert order.items[1].unitPrice.amountCents == 500
    assert order.items[1].product.name == "Batata Frita"
    assert _event_types(publisher) == ["order.created", "order.items_added"]


def test_scenario_e_payment_then_receipt(
    manager: OrderTableManager, store: InMemoryStore, publisher: FakePublisher
) -> None:
    order_id = manager.create_order(_create_request()).unwrap().orderId

    paid = manager.process_payment(order_id, "pix").unwrap()
    assert paid.isPaid is True
    assert paid.isActive is False
    assert paid.paymentMethod == "PIX"
    assert store.tables[T1].status == TableStatus.OCCUPIED

    received = manager.mark_order_as_received(order_id).unwrap()
    assert received.status == "DELIVERED"
    assert received.isActive is False
    assert received.isReceived is True
    assert store.tables[T1].status == TableStatus.FREE
    assert store.tables[T1].assigned_to is None
    assert _event_types(publisher) == [
        "order.created",
        "order.paid",
        "order.received",
        "table.released",
    ]
    released = json.loads(publisher.messages[-1][1])
    assert released["payload"]["reason"] == "received"


def test_scenario_g_unavailable_product_changes_nothing(
    manager: OrderTableManager, store: InMemoryStore, publisher: FakePublisher
) -> None:
    table_before = store.tables[T1]

    result = manager.create_order(_create_request(product_id="prd_off"))

    assert result.error is not None
    assert result.error.kind == ErrorKind.UNAVAILABLE
    assert store.orders == {}
    assert store.tables[T1] == table_before
    assert publisher.messages == []


def test_create_order_rejects_second_active_order(
    manager: OrderTableManager, store: InMemoryStore
) -> None:
    manager.create_order(_create_request())

    result = manager.create_order(_create_request())

    assert result.error is not None
    assert result.error.kind == ErrorKind.CONFLICT
    assert result.error.code == "ACTIVE_ORDER_EXISTS"
    assert len(store.orders) == 1


def test_create_order_after_receipt_reuses_table(manager: OrderTableManager) -> None:
    first = manager.create_order(_create_request()).unwrap()
    manager.mark_order_as_received(first.orderId)

    second = manager.create_order(_create_request())

    assert second.success
    assert second.unwrap().orderId != first.orderId


def test_create_order_validation_short_circuits(
    manager: OrderTableManager, store: InMemoryStore
) -> None:
    result = manager.create_order(
        CreateOrderRequest(items=[], table_id="tbl_001", staff_user_id="usr_001")
    )

    assert result.error is not None
    assert result.error.kind == ErrorKind.VALIDATION
    assert store.commits == 0


def test_create_order_unknown_references(manager: OrderTableManager) -> None:
    missing_product = manager.create_order(_create_request(product_id="prd_404"))
    assert missing_product.error is not None
    assert missing_product.error.code == "PRODUCT_NOT_FOUND"

    missing_table = manager.create_order(
        CreateOrderRequest(
            items=[OrderItemRequest(product_id="prd_001", quantity=1)],
            table_id="tbl_404",
            staff_user_id="usr_001",
        )
    )
    assert missing_table.error is not None
    assert missing_table.error.code == "TABLE_NOT_FOUND"

    missing_user = manager.create_order(
        CreateOrderRequest(
            items=[OrderItemRequest(product_id="prd_001", quantity=1)],
            table_id="tbl_001",
            staff_user_id="usr_404",
        )
    )
    assert missing_user.error is not None
    assert missing_user.error.kind == ErrorKind.NOT_FOUND


def test_create_order_rejects_malformed_customizations(manager: OrderTableManager) -> None:
    result = manager.create_order(_create_request(customizations="{broken"))

    assert result.error is not None
    assert result.error.kind == ErrorKind.VALIDATION


def test_add_products_requires_occupied_table(manager: OrderTableManager) -> None:
    result = manager.add_products_to_order(
        "tbl_001",
        [AddProductLineRequest(product_id="prd_002", quantity=1, price=Decimal("5.00"))],
    )

    assert result.error is not None
    assert result.error.kind == ErrorKind.CONFLICT
    assert result.error.code == "TABLE_NOT_OCCUPIED"


def test_add_products_requires_active_order(
    manager: OrderTableManager, store: InMemoryStore
) -> None:
    store.tables[T1] = store.tables[T1].occupy(UserId("usr_001"))

    result = manager.add_products_to_order(
        "tbl_001",
        [AddProductLineRequest(product_id="prd_002", quantity=1, price=Decimal("5.00"))],
    )

    assert result.error is not None
    assert result.error.code == "NO_ACTIVE_ORDER"


def test_add_products_validates_lines(manager: OrderTableManager) -> None:
    manager.create_order(_create_request())

    for line in (
        AddProductLineRequest(product_id="", quantity=1, price=Decimal("5.00")),
        AddProductLineRequest(product_id="prd_002", quantity=0, price=Decimal("5.00")),
        AddProductLineRequest(product_id="prd_002", quantity=1, price=Decimal("0")),
    ):
        result = manager.add_products_to_order("tbl_001", [line])
        assert result.error is not None
        assert result.error.kind == ErrorKind.VALIDATION

    empty = manager.add_products_to_order("tbl_001", [])
    assert empty.error is not None
    assert empty.error.kind == ErrorKind.VALIDATION


def test_create_order_rejects_addon_in_another_currency(
    manager: OrderTableManager, store: InMemoryStore
) -> None:
    store.addons[AddonId("add_usd")] = Addon(
        addon_id=AddonId("add_usd"), name="Guacamole", price=Money(amount_cents=150, currency="USD")
    )

    result = manager.create_order(_create_request(customizations={"adicionaisIds": ["add_usd"]}))

    assert result.error is not None
    assert result.error.kind == ErrorKind.VALIDATION
    assert result.error.code == "CURRENCY_MISMATCH"
    assert result.error.details == {"addonId": "add_usd"}
    assert store.orders == {}
    assert store.tables[T1].status == TableStatus.FREE


def test_add_products_rejects_product_in_another_currency(
    manager: OrderTableManager, store: InMemoryStore
) -> None:
    order_id = manager.create_order(_create_request()).unwrap().orderId
    store.products[ProductId("prd_usd")] = Product(
        product_id=ProductId("prd_usd"),
        name="Nachos",
        price=Money(amount_cents=900, currency="USD"),
        is_available=True,
    )

    result = manager.add_products_to_order(
        "tbl_001",
        [AddProductLineRequest(product_id="prd_usd", quantity=1, price=Decimal("9.00"))],
    )

    assert result.error is not None
    assert result.error.code == "CURRENCY_MISMATCH"
    assert len(manager.get_order(order_id).unwrap().items) == 1

def test_process_payment_rejects_unknown_method(manager: OrderTableManager) -> None:
    order_id = manager.create_order(_create_request()).unwrap().orderId

    result = manager.process_payment(order_id, "BITCOIN")

    assert result.error is not None
    assert result.error.kind == ErrorKind.VALIDATION
    assert result.error.code == "INVALID_PAYMENT_METHOD"


def test_process_payment_unknown_order(manager: OrderTableManager) -> None:
    result = manager.process_payment("ord_404", "CASH")

    assert result.error is not None
    assert result.error.kind == ErrorKind.NOT_FOUND


def test_mark_received_twice_conflicts(manager: OrderTableManager) -> None:
    order_id = manager.create_order(_create_request()).unwrap().orderId
    manager.mark_order_as_received(order_id)

    result = manager.mark_order_as_received(order_id)

    assert result.error is not None
    assert result.error.kind == ErrorKind.CONFLICT
    assert result.error.code == "ORDER_ALREADY_RECEIVED"


def test_unpaid_received_order_stays_outstanding(manager: OrderTableManager) -> None:
    order_id = manager.create_order(_create_request()).unwrap().orderId

    received = manager.mark_order_as_received(order_id).unwrap()
    outstanding = manager.list_outstanding_orders().unwrap()

    assert received.isActive is True
    assert [order.orderId for order in outstanding.orders] == [order_id]
    assert outstanding.count == 1


def test_cancel_releases_table_even_when_paid(
    manager: OrderTableManager, store: InMemoryStore, publisher: FakePublisher
) -> None:
    order_id = manager.create_order(_create_request()).unwrap().orderId
    manager.process_payment(order_id, "CARD")

    cancelled = manager.cancel_order(order_id).unwrap()

    assert cancelled.status == "CANCELLED"
    assert cancelled.isActive is False
    assert store.tables[T1].status == TableStatus.FREE
    assert store.tables[T1].assigned_to is None
    assert _event_types(publisher)[-2:] == ["order.cancelled", "table.released"]


def test_cancel_unknown_order(manager: OrderTableManager) -> None:
    result = manager.cancel_order("ord_404")

    assert result.error is not None
    assert result.error.code == "ORDER_NOT_FOUND"
