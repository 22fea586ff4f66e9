from __future__ import annotations

import logging
from datetime import datetime, timezone
from uuid import uuid4

from tableflow.application.dto.requests import CreateOrderRequest, OrderItemRequest
from tableflow.application.dto.responses import OrderResponse
from tableflow.application.errors import (
    ActiveOrderExistsError,
    CurrencyMismatchError,
    InvalidInputError,
    ProductNotFoundError,
    ProductUnavailableError,
    TableNotFoundError,
    UserNotFoundError,
)
from tableflow.application.mappers.customizations import parse_customizations
from tableflow.application.mappers.order_mapper import to_order_response
from tableflow.application.metrics.order_lifecycle import record_order_created
from tableflow.application.ports.publisher import EventPublisher
from tableflow.application.ports.unit_of_work import UnitOfWorkFactory
from tableflow.application.use_cases.context import TraceContext
from tableflow.application.use_cases.publishing import publish_order_changed
from tableflow.domain.catalog.entities import Addon, Customizations, Product
from tableflow.domain.common.ids import AddonId, OrderId, OrderItemId, ProductId, TableId, UserId
from tableflow.domain.order.entities import OrderItem, create_confirmed_order

logger = logging.getLogger(__name__)


class CreateOrder:
    def __init__(self, uow_factory: UnitOfWorkFactory, publisher: EventPublisher) -> None:
        self._uow_factory = uow_factory
        self._publisher = publisher

    def execute(self, request_dto: CreateOrderRequest, trace_ctx: TraceContext) -> OrderResponse:
        _validate(request_dto)
        selections = [parse_customizations(line.customizations) for line in request_dto.items]
        table_id = TableId(request_dto.table_id)

        with self._uow_factory() as uow:
            table = uow.tables.get(table_id)
            if table is None:
                raise TableNotFoundError(f"table {table_id} not found", tableId=str(table_id))

            staff = uow.users.get(UserId(request_dto.staff_user_id))
            if staff is None:
                raise UserNotFoundError(f"user {request_dto.staff_user_id} not found")

            products: dict[ProductId, Product] = {}
            for line in request_dto.items:
                product_id = ProductId(line.product_id)
                product = uow.products.get(product_id)
                if product is None:
                    raise ProductNotFoundError(
                        f"product {product_id} not found", productId=str(product_id)
                    )
                if not product.is_available:
                    raise ProductUnavailableError(
                        f"product {product.name} is not available", productId=str(product_id)
                    )
                products[product_id] = product

            currency = products[ProductId(request_dto.items[0].product_id)].price.currency
            for product in products.values():
                if product.price.currency != currency:
                    raise CurrencyMismatchError(
                        f"product {product.name} is priced in {product.price.currency},"
                        f" not {currency}",
                        productId=str(product.product_id),
                    )

            existing = uow.orders.find_active_for_table(table_id)
            if existing is not None:
                raise ActiveOrderExistsError(
                    f"table {table.number} already has an active order ({existing.order_id})",
                    tableId=str(table_id),
                    orderId=str(existing.order_id),
                )

            addon_ids = _unique_addon_ids(selections)
            addons = uow.addons.get_many(addon_ids) if addon_ids else {}
            items = [
                _build_item(line, products[ProductId(line.product_id)], selection, addons)
                for line, selection in zip(request_dto.items, selections)
            ]

            now = datetime.now(timezone.utc)
            order = create_confirmed_order(
                order_id=OrderId(f"ord_{uuid4().hex[:12]}"),
                user_id=staff.user_id,
                table_id=table_id,
                items=items,
                notes=request_dto.notes or None,
                now=now,
            )
            occupied = table.occupy(staff.user_id)
            uow.orders.add(order)
            uow.tables.update(occupied)
            uow.commit()

        logger.info(
            "order_created",
            extra={
                "order_id": str(order.order_id),
                "table_id": str(table_id),
                "user_id": str(staff.user_id),
            },
        )
        record_order_created()
        publish_order_changed(self._publisher, "order.created", order, trace_ctx)
        return to_order_response(order, user=staff, table=occupied)


def _validate(request_dto: CreateOrderRequest) -> None:
    if not request_dto.items:
        raise InvalidInputError("order items are required")
    if not request_dto.table_id:
        raise InvalidInputError("table id is required")
    if not request_dto.staff_user_id:
        raise InvalidInputError("staff user id is required")
    for index, line in enumerate(request_dto.items):
        if not line.product_id:
            raise InvalidInputError(f"items[{index}].productId is required")
        if line.quantity < 1:
            raise InvalidInputError(f"items[{index}].quantity must be a positive integer")


def _unique_addon_ids(selections: list[Customizations]) -> list[AddonId]:
    seen: dict[AddonId, None] = {}
    for selection in selections:
        for addon_id in selection.addon_ids:
            seen.setdefault(addon_id, None)
    return list(seen)


def _build_item(
    line: OrderItemRequest,
    product: Product,
    selection: Customizations,
    addons: dict[AddonId, Addon],
) -> OrderItem:
    unit_price = product.price
    for addon_id in selection.addon_ids:
        addon = addons.get(addon_id)
        # Add-ons deleted since the menu was loaded are charged nothing.
        if addon is None:
            continue
        if addon.price.currency != unit_price.currency:
            raise CurrencyMismatchError(
                f"add-on {addon.name} is priced in {addon.price.currency},"
                f" not {unit_price.currency}",
                addonId=str(addon_id),
            )
        unit_price = unit_price + addon.price
    return OrderItem(
        item_id=OrderItemId(f"oit_{uuid4().hex[:12]}"),
        product_id=product.product_id,
        product_name=product.name,
        quantity=line.quantity,
        unit_price=unit_price,
        notes=line.notes or None,
        customizations=selection,
    )
