from __future__ import annotations

from prometheus_client import Counter

from tableflow.domain.order.entities import OrderStatus, PaymentMethod

ORDERS_CREATED_TOTAL = Counter(
    "tableflow_orders_created_total",
    "Total number of orders created for tables.",
)

ORDER_ITEMS_ADDED_TOTAL = Counter(
    "tableflow_order_items_added_total",
    "Total number of items appended to active orders.",
)

ORDER_TRANSITION_TOTAL = Counter(
    "tableflow_order_transition_total",
    "Total number of order lifecycle transitions.",
    ["from", "to"],
)

PAYMENTS_TOTAL = Counter(
    "tableflow_payments_total",
    "Total number of processed payments by method.",
    ["method"],
)

TABLES_RELEASED_TOTAL = Counter(
    "tableflow_tables_released_total",
    "Total number of tables returned to FREE.",
    ["reason"],
)

LIFECYCLE_FAILURES_TOTAL = Counter(
    "tableflow_lifecycle_failures_total",
    "Total number of failed lifecycle operations.",
    ["operation", "kind"],
)


def record_order_created() -> None:
    ORDERS_CREATED_TOTAL.inc()


def record_items_added(count: int) -> None:
    ORDER_ITEMS_ADDED_TOTAL.inc(count)


def record_transition(from_status: OrderStatus, to_status: OrderStatus) -> None:
    ORDER_TRANSITION_TOTAL.labels(**{"from": from_status.value, "to": to_status.value}).inc()


def record_payment(method: PaymentMethod) -> None:
    PAYMENTS_TOTAL.labels(method=method.value).inc()


def record_table_released(reason: str) -> None:
    TABLES_RELEASED_TOTAL.labels(reason=reason).inc()


def record_failure(operation: str, kind: str) -> None:
    LIFECYCLE_FAILURES_TOTAL.labels(operation=operation, kind=kind).inc()
