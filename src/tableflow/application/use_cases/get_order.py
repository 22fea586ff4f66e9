from __future__ import annotations

from tableflow.application.dto.responses import OrderResponse
from tableflow.application.errors import OrderNotFoundError
from tableflow.application.mappers.order_mapper import to_order_response
from tableflow.application.ports.unit_of_work import UnitOfWork, UnitOfWorkFactory
from tableflow.domain.common.ids import OrderId
from tableflow.domain.order.entities import Order
from tableflow.domain.table.entities import Table


def load_order(uow: UnitOfWork, order_id: OrderId) -> Order:
    order = uow.orders.get(order_id)
    if order is None:
        raise OrderNotFoundError(f"order {order_id} not found", orderId=str(order_id))
    return order


def hydrate_order(uow: UnitOfWork, order: Order, table: Table | None = None) -> OrderResponse:
    """Attach the owning user and the table summary to an order."""
    if table is None and order.table_id is not None:
        table = uow.tables.get(order.table_id)
    return to_order_response(order, user=uow.users.get(order.user_id), table=table)


class GetOrder:
    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self, order_id: OrderId) -> OrderResponse:
        with self._uow_factory() as uow:
            return hydrate_order(uow, load_order(uow, order_id))
