from __future__ import annotations

import json

from fakes import FakePublisher, InMemoryStore

from tableflow.application.dto.requests import CreateOrderRequest, OrderItemRequest
from tableflow.application.errors import ErrorKind
from tableflow.application.lifecycle import OrderTableManager
from tableflow.domain.common.ids import TableId
from tableflow.domain.table.entities import TableStatus

T1 = TableId("tbl_001")


def _create_request() -> CreateOrderRequest:
    return CreateOrderRequest(
        items=[OrderItemRequest(product_id="prd_001", quantity=2)],
        table_id=str(T1),
        staff_user_id="usr_001",
    )


def test_scenario_a_select_free_table(manager: OrderTableManager, store: InMemoryStore) -> None:
    result = manager.select_table("tbl_001", "usr_001")

    assert result.success
    state = result.unwrap()
    assert state.activeOrders == []
    assert state.status == "FREE"
    assert store.tables[T1].status == TableStatus.FREE


def test_scenario_f_select_table_with_open_order(
    manager: OrderTableManager, store: InMemoryStore
) -> None:
    order_id = manager.create_order(_create_request()).unwrap().orderId
    # Status column drifted back to FREE while the order is still open.
    store.tables[T1] = store.tables[T1].release()

    result = manager.select_table("tbl_001", "usr_001")

    assert not result.success
    assert result.error is not None
    assert result.error.kind == ErrorKind.CONFLICT
    assert order_id in result.error.message
    assert result.error.details["orderId"] == order_id


def test_select_table_rejects_non_free_table(manager: OrderTableManager) -> None:
    manager.create_order(_create_request())

    result = manager.select_table("tbl_001", "usr_001")

    assert result.error is not None
    assert result.error.kind == ErrorKind.CONFLICT
    assert result.error.code == "TABLE_NOT_AVAILABLE"
    assert "occupied" in result.error.message


def test_check_table_status_reports_drift(
    manager: OrderTableManager, store: InMemoryStore
) -> None:
    order_id = manager.create_order(_create_request()).unwrap().orderId
    consistent = manager.check_table_status("tbl_001").unwrap()
    assert consistent.shouldBeOccupied is True
    assert consistent.statusMatches is True
    assert [order.orderId for order in consistent.activeOrders] == [order_id]

    store.tables[T1] = store.tables[T1].release()
    drifted = manager.check_table_status("tbl_001").unwrap()
    assert drifted.shouldBeOccupied is True
    assert drifted.statusMatches is False


def test_check_table_status_free_table(manager: OrderTableManager) -> None:
    report = manager.check_table_status("tbl_002").unwrap()

    assert report.table.status == "FREE"
    assert report.activeOrders == []
    assert report.shouldBeOccupied is False
    assert report.statusMatches is True


def test_force_release_frees_table_and_keeps_order(
    manager: OrderTableManager, store: InMemoryStore, publisher: FakePublisher
) -> None:
    order_id = manager.create_order(_create_request()).unwrap().orderId

    released = manager.force_release_table("tbl_001").unwrap()

    assert released.status == "FREE"
    assert released.assignedTo is None
    assert store.tables[T1].status == TableStatus.FREE
    assert manager.get_order(order_id).unwrap().status == "CONFIRMED"
    assert json.loads(publisher.messages[-1][1])["payload"]["reason"] == "forced"


def test_force_release_unknown_table(manager: OrderTableManager) -> None:
    result = manager.force_release_table("tbl_404")

    assert result.error is not None
    assert result.error.kind == ErrorKind.NOT_FOUND


def test_complete_state_lists_active_order(manager: OrderTableManager) -> None:
    order = manager.create_order(_create_request()).unwrap()

    state = manager.get_table_complete_state("tbl_001").unwrap()

    assert state.tableNumber == 1
    assert state.status == "OCCUPIED"
    assert state.assignedTo == "usr_001"
    assert len(state.activeOrders) == 1
    assert state.activeOrders[0].orderId == order.orderId
    assert state.activeOrders[0].isActive is True
    assert state.activeOrders[0].total.amountCents == 2000


def test_complete_state_unknown_table(manager: OrderTableManager) -> None:
    result = manager.get_table_complete_state("tbl_404")

    assert result.error is not None
    assert result.error.code == "TABLE_NOT_FOUND"
