from __future__ import annotations

from typing import NewType

UserId = NewType("UserId", str)
TableId = NewType("TableId", str)
OrderId = NewType("OrderId", str)
OrderItemId = NewType("OrderItemId", str)
ProductId = NewType("ProductId", str)
AddonId = NewType("AddonId", str)
