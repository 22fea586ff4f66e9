from __future__ import annotations

import logging
from datetime import datetime, timezone
from decimal import Decimal

from tableflow.application.dto.responses import OrderResponse
from tableflow.application.errors import InvalidPaymentMethodError
from tableflow.application.metrics.order_lifecycle import record_payment
from tableflow.application.ports.publisher import EventPublisher
from tableflow.application.ports.unit_of_work import UnitOfWorkFactory
from tableflow.application.use_cases.context import TraceContext
from tableflow.application.use_cases.get_order import hydrate_order, load_order
from tableflow.application.use_cases.publishing import publish_order_changed
from tableflow.domain.common.ids import OrderId
from tableflow.domain.order.entities import PaymentMethod

logger = logging.getLogger(__name__)


class ProcessPayment:
    """Settle an order financially.

    Status and table are left alone: a table is only handed back once the
    order is received, cancelled or finalized.
    """

    def __init__(self, uow_factory: UnitOfWorkFactory, publisher: EventPublisher) -> None:
        self._uow_factory = uow_factory
        self._publisher = publisher

    def execute(
        self,
        order_id: OrderId,
        payment_method: str,
        trace_ctx: TraceContext,
        payment_amount: Decimal | None = None,
    ) -> OrderResponse:
        method = parse_payment_method(payment_method)

        with self._uow_factory() as uow:
            order = load_order(uow, order_id)
            paid = order.pay(method, datetime.now(timezone.utc))
            uow.orders.update(paid)
            uow.commit()
            response = hydrate_order(uow, paid)

        # payment_amount is recorded only; reconciliation against the total happens elsewhere.
        logger.info(
            "payment_processed",
            extra={
                "order_id": str(order_id),
                "payment_method": method.value,
                "payment_amount": str(payment_amount) if payment_amount is not None else None,
            },
        )
        record_payment(method)
        publish_order_changed(self._publisher, "order.paid", paid, trace_ctx)
        return response


def parse_payment_method(value: str) -> PaymentMethod:
    try:
        return PaymentMethod((value or "").strip().upper())
    except ValueError as exc:
        allowed = ", ".join(method.value for method in PaymentMethod)
        raise InvalidPaymentMethodError(
            f"invalid payment method: {value} (expected one of {allowed})"
        ) from exc
