from __future__ import annotations

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


def _to_camel(value: str) -> str:
    parts = value.split("_")
    return parts[0] + "".join(part.capitalize() for part in parts[1:])


class CamelBaseModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=_to_camel,
        populate_by_name=True,
    )


class OrderItemRequest(CamelBaseModel):
    product_id: str = ""
    quantity: int = 0
    price: Decimal | None = None
    notes: str | None = None
    customizations: Any = None


class CreateOrderRequest(CamelBaseModel):
    items: list[OrderItemRequest] = Field(default_factory=list)
    table_id: str = ""
    notes: str | None = None
    staff_user_id: str = ""


class AddProductLineRequest(CamelBaseModel):
    product_id: str = ""
    quantity: int = 0
    price: Decimal = Decimal("0")
    notes: str | None = None


class AddProductsRequest(CamelBaseModel):
    products: list[AddProductLineRequest] = Field(default_factory=list)


class SelectTableRequest(CamelBaseModel):
    staff_user_id: str


class ProcessPaymentRequest(CamelBaseModel):
    payment_method: str
    payment_amount: Decimal | None = None


class UpdateOrderStatusRequest(CamelBaseModel):
    status: str
