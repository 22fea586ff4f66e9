from __future__ import annotations

from fastapi import APIRouter, Depends

from tableflow.api.dependencies import current_trace_context, get_manager
from tableflow.api.error_handling import unwrap_or_raise
from tableflow.application.dto.requests import AddProductsRequest, SelectTableRequest
from tableflow.application.dto.responses import (
    OrderResponse,
    TableResponse,
    TableStateResponse,
    TableStatusCheckResponse,
)
from tableflow.application.lifecycle import OrderTableManager

router = APIRouter()


@router.post("/v1/tables/{table_id}/select", response_model=TableStateResponse)
def select_table(
    table_id: str,
    request_dto: SelectTableRequest,
    manager: OrderTableManager = Depends(get_manager),
) -> TableStateResponse:
    return unwrap_or_raise(
        manager.select_table(table_id=table_id, staff_user_id=request_dto.staff_user_id)
    )


@router.get("/v1/tables/{table_id}/state", response_model=TableStateResponse)
def get_table_state(
    table_id: str,
    manager: OrderTableManager = Depends(get_manager),
) -> TableStateResponse:
    return unwrap_or_raise(manager.get_table_complete_state(table_id=table_id))


@router.get("/v1/tables/{table_id}/status-check", response_model=TableStatusCheckResponse)
def check_table_status(
    table_id: str,
    manager: OrderTableManager = Depends(get_manager),
) -> TableStatusCheckResponse:
    return unwrap_or_raise(manager.check_table_status(table_id=table_id))


@router.post("/v1/tables/{table_id}/release", response_model=TableResponse)
def force_release_table(
    table_id: str,
    manager: OrderTableManager = Depends(get_manager),
) -> TableResponse:
    return unwrap_or_raise(
        manager.force_release_table(table_id=table_id, trace_ctx=current_trace_context())
    )


@router.post("/v1/tables/{table_id}/products", response_model=OrderResponse)
def add_products_to_order(
    table_id: str,
    request_dto: AddProductsRequest,
    manager: OrderTableManager = Depends(get_manager),
) -> OrderResponse:
    return unwrap_or_raise(
        manager.add_products_to_order(
            table_id=table_id,
            products=request_dto.products,
            trace_ctx=current_trace_context(),
        )
    )
