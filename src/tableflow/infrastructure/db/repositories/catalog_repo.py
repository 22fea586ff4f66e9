from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from tableflow.application.ports.repositories import AddonRepository, ProductRepository
from tableflow.domain.catalog.entities import Addon, Product
from tableflow.domain.common.ids import AddonId, ProductId
from tableflow.domain.common.money import Money
from tableflow.infrastructure.db.models.catalog import AddonModel, ProductModel


class SqlAlchemyProductRepository(ProductRepository):
    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, product_id: ProductId) -> Product | None:
        model = self._session.get(ProductModel, str(product_id))
        if model is None:
            return None
        return Product(
            product_id=ProductId(model.id),
            name=model.name,
            price=Money(amount_cents=model.price_cents, currency=model.currency),
            is_available=model.is_available,
        )


class SqlAlchemyAddonRepository(AddonRepository):
    def __init__(self, session: Session) -> None:
        self._session = session

    def get_many(self, addon_ids: list[AddonId]) -> dict[AddonId, Addon]:
        if not addon_ids:
            return {}
        statement = select(AddonModel).where(AddonModel.id.in_([str(i) for i in set(addon_ids)]))
        models = self._session.execute(statement).scalars().all()
        return {
            AddonId(model.id): Addon(
                addon_id=AddonId(model.id),
                name=model.name,
                # Add-ons without a price are free.
                price=Money(amount_cents=model.price_cents or 0, currency=model.currency),
                description=model.description,
            )
            for model in models
        }
