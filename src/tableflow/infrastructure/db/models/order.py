from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tableflow.infrastructure.db.models.base import Base

ACTIVE_TABLE_INDEX = "uq_orders_active_table"

# At most one order per table may hold it; shared by both dialects.
_ACTIVE_TABLE_PREDICATE = text(
    "table_id IS NOT NULL AND status NOT IN ('CANCELLED', 'DELIVERED', 'FINALIZED')"
)


class OrderModel(Base):
    __tablename__ = "orders"

    id: Mapped[str] = mapped_column(String(50), primary_key=True)
    user_id: Mapped[str] = mapped_column(
        String(50),
        ForeignKey("users.id"),
        nullable=False,
    )
    table_id: Mapped[str | None] = mapped_column(
        String(50),
        ForeignKey("tables.id", ondelete="SET NULL"),
        nullable=True,
    )
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    total_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False)
    is_paid: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    payment_method: Mapped[str | None] = mapped_column(String(20), nullable=True)
    delivery_type: Mapped[str] = mapped_column(String(20), nullable=False)
    notes: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    items: Mapped[list["OrderItemModel"]] = relationship(
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItemModel.position",
    )

    __table_args__ = (
        Index("ix_orders_table_id_status", "table_id", "status"),
        Index("ix_orders_status_created_at", "status", "created_at"),
        Index(
            ACTIVE_TABLE_INDEX,
            "table_id",
            unique=True,
            postgresql_where=_ACTIVE_TABLE_PREDICATE,
            sqlite_where=_ACTIVE_TABLE_PREDICATE,
        ),
    )


class OrderItemModel(Base):
    __tablename__ = "order_items"

    id: Mapped[str] = mapped_column(String(50), primary_key=True)
    order_id: Mapped[str] = mapped_column(
        String(50),
        ForeignKey("orders.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    product_id: Mapped[str] = mapped_column(String(50), ForeignKey("products.id"), nullable=False)
    product_name: Mapped[str] = mapped_column(String(255), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_price_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False)
    notes: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    customizations: Mapped[str | None] = mapped_column(Text, nullable=True)

    order: Mapped[OrderModel] = relationship(back_populates="items")
