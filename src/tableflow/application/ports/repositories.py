from __future__ import annotations

from typing import Protocol

from tableflow.domain.catalog.entities import Addon, Product
from tableflow.domain.common.ids import AddonId, OrderId, ProductId, TableId, UserId
from tableflow.domain.order.entities import Order, OrderItem
from tableflow.domain.table.entities import Table
from tableflow.domain.user.entities import StaffUser


class TableRepository(Protocol):
    def get(self, table_id: TableId) -> Table | None: ...

    def update(self, table: Table) -> None: ...


class OrderRepository(Protocol):
    def add(self, order: Order) -> None: ...

    def get(self, order_id: OrderId) -> Order | None: ...

    def update(self, order: Order) -> None: ...

    def add_items(self, order_id: OrderId, items: list[OrderItem]) -> None: ...

    def find_active_for_table(self, table_id: TableId) -> Order | None: ...

    def count_active_for_table(self, table_id: TableId) -> int: ...

    def list_outstanding(self, limit: int) -> list[Order]: ...


class ProductRepository(Protocol):
    def get(self, product_id: ProductId) -> Product | None: ...


class AddonRepository(Protocol):
    def get_many(self, addon_ids: list[AddonId]) -> dict[AddonId, Addon]: ...


class UserRepository(Protocol):
    def get(self, user_id: UserId) -> StaffUser | None: ...
