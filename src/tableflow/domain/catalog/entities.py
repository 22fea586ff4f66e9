from __future__ import annotations

from dataclasses import dataclass, field

from tableflow.domain.common.ids import AddonId, ProductId
from tableflow.domain.common.money import Money


@dataclass(frozen=True)
class Product:
    product_id: ProductId
    name: str
    price: Money
    is_available: bool

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValueError("name must be non-empty")


@dataclass(frozen=True)
class Addon:
    addon_id: AddonId
    name: str
    price: Money
    description: str | None = None


@dataclass(frozen=True)
class Customizations:
    """Add-on selection attached to an order item, already normalised."""

    addon_ids: tuple[AddonId, ...] = field(default_factory=tuple)

    @property
    def is_empty(self) -> bool:
        return not self.addon_ids
