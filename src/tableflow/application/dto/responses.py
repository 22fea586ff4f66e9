from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class MoneyResponse(BaseModel):
    amountCents: int
    currency: str


class UserSummaryResponse(BaseModel):
    userId: str
    name: str
    email: str | None = None


class TableSummaryResponse(BaseModel):
    tableId: str
    number: int
    capacity: int


class ProductSummaryResponse(BaseModel):
    productId: str
    name: str


class CustomizationsResponse(BaseModel):
    adicionaisIds: list[str] = Field(default_factory=list)


class OrderItemResponse(BaseModel):
    itemId: str
    productId: str
    product: ProductSummaryResponse
    quantity: int
    unitPrice: MoneyResponse
    lineTotal: MoneyResponse
    notes: str | None = None
    customizations: CustomizationsResponse | None = None


class OrderResponse(BaseModel):
    orderId: str
    userId: str
    user: UserSummaryResponse | None = None
    tableId: str | None = None
    table: TableSummaryResponse | None = None
    status: str
    deliveryType: str
    paymentMethod: str | None = None
    isPaid: bool
    isActive: bool
    isReceived: bool
    notes: str | None = None
    items: list[OrderItemResponse] = Field(default_factory=list)
    total: MoneyResponse
    createdAt: datetime
    updatedAt: datetime


class OutstandingOrdersResponse(BaseModel):
    orders: list[OrderResponse] = Field(default_factory=list)
    count: int = 0


class TableResponse(BaseModel):
    tableId: str
    number: int
    capacity: int
    status: str
    assignedTo: str | None = None


class ActiveOrderResponse(BaseModel):
    orderId: str
    status: str
    total: MoneyResponse
    createdAt: datetime
    isActive: bool
    isReceived: bool


class TableStateResponse(BaseModel):
    tableId: str
    tableNumber: int
    status: str
    assignedTo: str | None = None
    activeOrders: list[ActiveOrderResponse] = Field(default_factory=list)


class TableStatusCheckResponse(BaseModel):
    table: TableResponse
    activeOrders: list[ActiveOrderResponse] = Field(default_factory=list)
    shouldBeOccupied: bool
    statusMatches: bool
