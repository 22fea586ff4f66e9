from __future__ import annotations

import logging
from datetime import datetime, timezone
from uuid import uuid4

from tableflow.application.dto.requests import AddProductLineRequest
from tableflow.application.dto.responses import OrderResponse
from tableflow.application.errors import (
    CurrencyMismatchError,
    InvalidInputError,
    NoActiveOrderError,
    OrderNotFoundError,
    ProductNotFoundError,
    TableNotFoundError,
    TableNotOccupiedError,
)
from tableflow.application.metrics.order_lifecycle import record_items_added
from tableflow.application.ports.publisher import EventPublisher
from tableflow.application.ports.unit_of_work import UnitOfWorkFactory
from tableflow.application.use_cases.context import TraceContext
from tableflow.application.use_cases.get_order import hydrate_order
from tableflow.application.use_cases.publishing import publish_order_changed
from tableflow.domain.common.ids import OrderItemId, ProductId, TableId
from tableflow.domain.common.money import Money
from tableflow.domain.order.entities import OrderItem
from tableflow.domain.table.entities import TableNotOccupiedError as TableNotOccupied

logger = logging.getLogger(__name__)


class AddProductsToOrder:
    def __init__(self, uow_factory: UnitOfWorkFactory, publisher: EventPublisher) -> None:
        self._uow_factory = uow_factory
        self._publisher = publisher

    def execute(
        self,
        table_id: TableId,
        products: list[AddProductLineRequest],
        trace_ctx: TraceContext,
    ) -> OrderResponse:
        _validate(products)

        with self._uow_factory() as uow:
            table = uow.tables.get(table_id)
            if table is None:
                raise TableNotFoundError(f"table {table_id} not found", tableId=str(table_id))
            try:
                table.ensure_occupied()
            except TableNotOccupied as exc:
                raise TableNotOccupiedError(str(exc), tableId=str(table_id)) from exc

            active = uow.orders.find_active_for_table(table_id)
            if active is None:
                raise NoActiveOrderError(
                    f"table {table.number} has no active order", tableId=str(table_id)
                )

            currency = active.total.currency
            new_items: list[OrderItem] = []
            for line in products:
                product = uow.products.get(ProductId(line.product_id))
                if product is None:
                    raise ProductNotFoundError(
                        f"product {line.product_id} not found", productId=line.product_id
                    )
                if product.price.currency != currency:
                    raise CurrencyMismatchError(
                        f"product {product.name} is priced in {product.price.currency},"
                        f" order {active.order_id} is in {currency}",
                        productId=line.product_id,
                    )
                new_items.append(
                    OrderItem(
                        item_id=OrderItemId(f"oit_{uuid4().hex[:12]}"),
                        product_id=product.product_id,
                        product_name=product.name,
                        quantity=line.quantity,
                        unit_price=Money.from_decimal(line.price, currency),
                        notes=line.notes or None,
                    )
                )

            uow.orders.add_items(active.order_id, new_items)
            # Total is rebuilt from every stored item so earlier drift cannot survive.
            current = uow.orders.get(active.order_id)
            if current is None:
                raise OrderNotFoundError(f"order {active.order_id} not found")
            updated = current.with_recomputed_total(datetime.now(timezone.utc))
            uow.orders.update(updated)
            uow.commit()
            response = hydrate_order(uow, updated, table=table)

        logger.info(
            "order_items_added",
            extra={
                "order_id": str(updated.order_id),
                "table_id": str(table_id),
                "item_count": len(new_items),
            },
        )
        record_items_added(len(new_items))
        publish_order_changed(self._publisher, "order.items_added", updated, trace_ctx)
        return response


def _validate(products: list[AddProductLineRequest]) -> None:
    if not products:
        raise InvalidInputError("products are required")
    for index, line in enumerate(products):
        if not line.product_id:
            raise InvalidInputError(f"products[{index}].productId is required")
        if line.quantity < 1:
            raise InvalidInputError(f"products[{index}].quantity must be a positive integer")
        if line.price <= 0:
            raise InvalidInputError(f"products[{index}].price must be positive")
