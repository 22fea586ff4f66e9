from __future__ import annotations

from tableflow.application.dto.responses import OutstandingOrdersResponse
from tableflow.application.errors import InvalidInputError
from tableflow.application.ports.unit_of_work import UnitOfWorkFactory
from tableflow.application.use_cases.get_order import hydrate_order


class ListOutstandingOrders:
    """Orders accounting still has to collect: unpaid and not cancelled."""

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self, limit: int = 100) -> OutstandingOrdersResponse:
        if limit < 1 or limit > 500:
            raise InvalidInputError("limit must be between 1 and 500")
        with self._uow_factory() as uow:
            orders = [hydrate_order(uow, order) for order in uow.orders.list_outstanding(limit)]
        return OutstandingOrdersResponse(orders=orders, count=len(orders))
