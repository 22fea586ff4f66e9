from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from tableflow.api.dependencies import current_trace_context, get_manager
from tableflow.api.error_handling import unwrap_or_raise
from tableflow.application.dto.requests import (
    CreateOrderRequest,
    ProcessPaymentRequest,
    UpdateOrderStatusRequest,
)
from tableflow.application.dto.responses import OrderResponse, OutstandingOrdersResponse
from tableflow.application.lifecycle import OrderTableManager

router = APIRouter()


@router.post(
    "/v1/orders",
    response_model=OrderResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_order(
    request_dto: CreateOrderRequest,
    manager: OrderTableManager = Depends(get_manager),
) -> OrderResponse:
    return unwrap_or_raise(
        manager.create_order(request_dto=request_dto, trace_ctx=current_trace_context())
    )


# Declared before /v1/orders/{order_id} so "outstanding" is not taken as an id.
@router.get("/v1/orders/outstanding", response_model=OutstandingOrdersResponse)
def list_outstanding_orders(
    limit: int = Query(default=100),
    manager: OrderTableManager = Depends(get_manager),
) -> OutstandingOrdersResponse:
    return unwrap_or_raise(manager.list_outstanding_orders(limit=limit))


@router.get("/v1/orders/{order_id}", response_model=OrderResponse)
def get_order(
    order_id: str,
    manager: OrderTableManager = Depends(get_manager),
) -> OrderResponse:
    return unwrap_or_raise(manager.get_order(order_id=order_id))


@router.post("/v1/orders/{order_id}/payment", response_model=OrderResponse)
def process_payment(
    order_id: str,
    request_dto: ProcessPaymentRequest,
    manager: OrderTableManager = Depends(get_manager),
) -> OrderResponse:
    return unwrap_or_raise(
        manager.process_payment(
            order_id=order_id,
            payment_method=request_dto.payment_method,
            payment_amount=request_dto.payment_amount,
            trace_ctx=current_trace_context(),
        )
    )


@router.post("/v1/orders/{order_id}/receive", response_model=OrderResponse)
def mark_order_as_received(
    order_id: str,
    manager: OrderTableManager = Depends(get_manager),
) -> OrderResponse:
    return unwrap_or_raise(
        manager.mark_order_as_received(order_id=order_id, trace_ctx=current_trace_context())
    )


@router.post("/v1/orders/{order_id}/cancel", response_model=OrderResponse)
def cancel_order(
    order_id: str,
    manager: OrderTableManager = Depends(get_manager),
) -> OrderResponse:
    return unwrap_or_raise(
        manager.cancel_order(order_id=order_id, trace_ctx=current_trace_context())
    )


@router.post("/v1/orders/{order_id}/status", response_model=OrderResponse)
def update_order_status(
    order_id: str,
    request_dto: UpdateOrderStatusRequest,
    manager: OrderTableManager = Depends(get_manager),
) -> OrderResponse:
    return unwrap_or_raise(
        manager.update_order_status(
            order_id=order_id,
            status=request_dto.status,
            trace_ctx=current_trace_context(),
        )
    )
