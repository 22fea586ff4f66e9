from __future__ import annotations

import logging
from types import TracebackType

from sqlalchemy import Engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from tableflow.application.errors import ActiveOrderExistsError
from tableflow.application.ports.unit_of_work import UnitOfWorkFactory
from tableflow.infrastructure.db.models.order import ACTIVE_TABLE_INDEX
from tableflow.infrastructure.db.repositories.catalog_repo import (
    SqlAlchemyAddonRepository,
    SqlAlchemyProductRepository,
)
from tableflow.infrastructure.db.repositories.order_repo import SqlAlchemyOrderRepository
from tableflow.infrastructure.db.repositories.table_repo import SqlAlchemyTableRepository
from tableflow.infrastructure.db.repositories.user_repo import SqlAlchemyUserRepository
from tableflow.infrastructure.db.session import get_engine

logger = logging.getLogger(__name__)

# Postgres reports the index name, SQLite only the indexed column.
_ACTIVE_TABLE_MARKERS = (ACTIVE_TABLE_INDEX, "orders.table_id")


class SqlAlchemyUnitOfWork:
    """One session and one transaction per lifecycle operation."""

    def __init__(self, engine: Engine | None = None) -> None:
        self._engine = engine or get_engine()
        self._session: Session | None = None

    def __enter__(self) -> SqlAlchemyUnitOfWork:
        self._session = Session(self._engine, expire_on_commit=False)
        self.tables = SqlAlchemyTableRepository(self._session)
        self.orders = SqlAlchemyOrderRepository(self._session)
        self.products = SqlAlchemyProductRepository(self._session)
        self.addons = SqlAlchemyAddonRepository(self._session)
        self.users = SqlAlchemyUserRepository(self._session)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        session = self._require_session()
        try:
            session.rollback()
        finally:
            session.close()
            self._session = None
        if isinstance(exc, IntegrityError) and _is_active_table_violation(exc):
            raise _active_order_conflict() from exc

    def commit(self) -> None:
        session = self._require_session()
        try:
            session.commit()
        except IntegrityError as exc:
            session.rollback()
            if _is_active_table_violation(exc):
                raise _active_order_conflict() from exc
            raise

    def rollback(self) -> None:
        self._require_session().rollback()

    def _require_session(self) -> Session:
        if self._session is None:
            raise RuntimeError("unit of work is not active")
        return self._session


def _is_active_table_violation(exc: IntegrityError) -> bool:
    message = str(exc.orig)
    return any(marker in message for marker in _ACTIVE_TABLE_MARKERS)


def _active_order_conflict() -> ActiveOrderExistsError:
    logger.info("active_order_race_lost")
    return ActiveOrderExistsError("table already has an active order")


def sqlalchemy_uow_factory(engine: Engine | None = None) -> UnitOfWorkFactory:
    def factory() -> SqlAlchemyUnitOfWork:
        return SqlAlchemyUnitOfWork(engine)

    return factory
