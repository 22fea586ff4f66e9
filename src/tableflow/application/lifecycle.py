"""Table/order lifecycle manager.

Single entry point used by the HTTP layer. Every operation returns an
:class:`OperationResult`; no exception crosses this boundary. Expected
rejections come back with their :class:`ErrorKind`, anything else is logged
and reported as ``INTERNAL`` with a generic message.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Callable, TypeVar

from tableflow.application.dto.requests import AddProductLineRequest, CreateOrderRequest
from tableflow.application.dto.responses import (
    OrderResponse,
    OutstandingOrdersResponse,
    TableResponse,
    TableStateResponse,
    TableStatusCheckResponse,
)
from tableflow.application.errors import ErrorKind, LifecycleError
from tableflow.application.metrics.order_lifecycle import record_failure
from tableflow.application.ports.publisher import EventPublisher
from tableflow.application.ports.unit_of_work import UnitOfWorkFactory
from tableflow.application.result import OperationResult
from tableflow.application.use_cases.add_products import AddProductsToOrder
from tableflow.application.use_cases.cancel_order import CancelOrder
from tableflow.application.use_cases.context import TraceContext
from tableflow.application.use_cases.create_order import CreateOrder
from tableflow.application.use_cases.force_release_table import ForceReleaseTable
from tableflow.application.use_cases.get_order import GetOrder
from tableflow.application.use_cases.mark_order_received import MarkOrderReceived
from tableflow.application.use_cases.outstanding_orders import ListOutstandingOrders
from tableflow.application.use_cases.process_payment import ProcessPayment
from tableflow.application.use_cases.select_table import SelectTable
from tableflow.application.use_cases.table_state import CheckTableStatus, GetTableCompleteState
from tableflow.application.use_cases.update_order_status import UpdateOrderStatus
from tableflow.domain.common.ids import OrderId, TableId, UserId

logger = logging.getLogger(__name__)

T = TypeVar("T")

INTERNAL_ERROR_MESSAGE = "internal error"


class OrderTableManager:
    def __init__(self, uow_factory: UnitOfWorkFactory, publisher: EventPublisher) -> None:
        self._uow_factory = uow_factory
        self._publisher = publisher

    def select_table(
        self, table_id: str, staff_user_id: str
    ) -> OperationResult[TableStateResponse]:
        return self._run(
            "select_table",
            lambda: SelectTable(self._uow_factory).execute(
                table_id=TableId(table_id),
                staff_user_id=UserId(staff_user_id),
            ),
        )

    def create_order(
        self,
        request_dto: CreateOrderRequest,
        trace_ctx: TraceContext | None = None,
    ) -> OperationResult[OrderResponse]:
        return self._run(
            "create_order",
            lambda: CreateOrder(self._uow_factory, self._publisher).execute(
                request_dto=request_dto,
                trace_ctx=trace_ctx or TraceContext.empty(),
            ),
        )

    def add_products_to_order(
        self,
        table_id: str,
        products: list[AddProductLineRequest],
        trace_ctx: TraceContext | None = None,
    ) -> OperationResult[OrderResponse]:
        return self._run(
            "add_products_to_order",
            lambda: AddProductsToOrder(self._uow_factory, self._publisher).execute(
                table_id=TableId(table_id),
                products=products,
                trace_ctx=trace_ctx or TraceContext.empty(),
            ),
        )

    def process_payment(
        self,
        order_id: str,
        payment_method: str,
        payment_amount: Decimal | None = None,
        trace_ctx: TraceContext | None = None,
    ) -> OperationResult[OrderResponse]:
        return self._run(
            "process_payment",
            lambda: ProcessPayment(self._uow_factory, self._publisher).execute(
                order_id=OrderId(order_id),
                payment_method=payment_method,
                payment_amount=payment_amount,
                trace_ctx=trace_ctx or TraceContext.empty(),
            ),
        )

    def mark_order_as_received(
        self, order_id: str, trace_ctx: TraceContext | None = None
    ) -> OperationResult[OrderResponse]:
        return self._run(
            "mark_order_as_received",
            lambda: MarkOrderReceived(self._uow_factory, self._publisher).execute(
                order_id=OrderId(order_id),
                trace_ctx=trace_ctx or TraceContext.empty(),
            ),
        )

    def cancel_order(
        self, order_id: str, trace_ctx: TraceContext | None = None
    ) -> OperationResult[OrderResponse]:
        return self._run(
            "cancel_order",
            lambda: CancelOrder(self._uow_factory, self._publisher).execute(
                order_id=OrderId(order_id),
                trace_ctx=trace_ctx or TraceContext.empty(),
            ),
        )

    def update_order_status(
        self, order_id: str, status: str, trace_ctx: TraceContext | None = None
    ) -> OperationResult[OrderResponse]:
        return self._run(
            "update_order_status",
            lambda: UpdateOrderStatus(self._uow_factory, self._publisher).execute(
                order_id=OrderId(order_id),
                status=status,
                trace_ctx=trace_ctx or TraceContext.empty(),
            ),
        )

    def check_table_status(self, table_id: str) -> OperationResult[TableStatusCheckResponse]:
        return self._run(
            "check_table_status",
            lambda: CheckTableStatus(self._uow_factory).execute(table_id=TableId(table_id)),
        )

    def force_release_table(
        self, table_id: str, trace_ctx: TraceContext | None = None
    ) -> OperationResult[TableResponse]:
        return self._run(
            "force_release_table",
            lambda: ForceReleaseTable(self._uow_factory, self._publisher).execute(
                table_id=TableId(table_id),
                trace_ctx=trace_ctx or TraceContext.empty(),
            ),
        )

    def get_table_complete_state(self, table_id: str) -> OperationResult[TableStateResponse]:
        return self._run(
            "get_table_complete_state",
            lambda: GetTableCompleteState(self._uow_factory).execute(table_id=TableId(table_id)),
        )

    def get_order(self, order_id: str) -> OperationResult[OrderResponse]:
        return self._run(
            "get_order",
            lambda: GetOrder(self._uow_factory).execute(order_id=OrderId(order_id)),
        )

    def list_outstanding_orders(
        self, limit: int = 100
    ) -> OperationResult[OutstandingOrdersResponse]:
        return self._run(
            "list_outstanding_orders",
            lambda: ListOutstandingOrders(self._uow_factory).execute(limit=limit),
        )

    def _run(self, operation: str, call: Callable[[], T]) -> OperationResult[T]:
        try:
            return OperationResult.ok(call())
        except LifecycleError as exc:
            logger.info(
                "lifecycle_rejected",
                extra={
                    "operation": operation,
                    "error_kind": exc.kind.value,
                    "error_code": exc.code,
                    "reason": str(exc),
                },
            )
            record_failure(operation=operation, kind=exc.kind.value)
            return OperationResult.failure(exc.kind, exc.code, str(exc), dict(exc.details))
        except Exception:
            logger.exception("lifecycle_failed", extra={"operation": operation})
            record_failure(operation=operation, kind=ErrorKind.INTERNAL.value)
            return OperationResult.failure(
                ErrorKind.INTERNAL, "INTERNAL_ERROR", INTERNAL_ERROR_MESSAGE
            )
