from __future__ import annotations

import pytest
from fakes import FakePublisher, FakeUnitOfWork, InMemoryStore

from tableflow.application.lifecycle import OrderTableManager
from tableflow.domain.catalog.entities import Addon, Product
from tableflow.domain.common.ids import AddonId, ProductId, TableId, UserId
from tableflow.domain.common.money import Money
from tableflow.domain.table.entities import Table, TableStatus
from tableflow.domain.user.entities import StaffUser


def brl(cents: int) -> Money:
    return Money(amount_cents=cents, currency="BRL")


@pytest.fixture
def store() -> InMemoryStore:
    store = InMemoryStore()
    for number in (1, 2):
        table_id = TableId(f"tbl_00{number}")
        store.tables[table_id] = Table(
            table_id=table_id,
            number=number,
            capacity=4,
            status=TableStatus.FREE,
        )
    store.users[UserId("usr_001")] = StaffUser(
        user_id=UserId("usr_001"), name="Ana Souza", email="ana@example.com"
    )
    store.products[ProductId("prd_001")] = Product(
        product_id=ProductId("prd_001"), name="X-Burger", price=brl(1000), is_available=True
    )
    store.products[ProductId("prd_002")] = Product(
        product_id=ProductId("prd_002"), name="Batata Frita", price=brl(700), is_available=True
    )
    store.products[ProductId("prd_off")] = Product(
        product_id=ProductId("prd_off"), name="Pudim", price=brl(1200), is_available=False
    )
    store.addons[AddonId("add_001")] = Addon(
        addon_id=AddonId("add_001"), name="Bacon", price=brl(250)
    )
    store.addons[AddonId("add_002")] = Addon(
        addon_id=AddonId("add_002"), name="Cheddar", price=brl(100)
    )
    return store


@pytest.fixture
def publisher() -> FakePublisher:
    return FakePublisher()


@pytest.fixture
def manager(store: InMemoryStore, publisher: FakePublisher) -> OrderTableManager:
    return OrderTableManager(uow_factory=lambda: FakeUnitOfWork(store), publisher=publisher)
