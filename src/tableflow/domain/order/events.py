from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from tableflow.domain.common.ids import OrderId, TableId


@dataclass(frozen=True)
class OrderChanged:
    event_type: str
    order_id: OrderId
    table_id: TableId | None
    occurred_at: datetime


@dataclass(frozen=True)
class TableReleased:
    table_id: TableId
    order_id: OrderId | None
    reason: str
    occurred_at: datetime
