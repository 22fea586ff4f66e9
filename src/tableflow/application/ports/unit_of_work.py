from __future__ import annotations

from types import TracebackType
from typing import Callable, Protocol

from tableflow.application.ports.repositories import (
    AddonRepository,
    OrderRepository,
    ProductRepository,
    TableRepository,
    UserRepository,
)


class UnitOfWork(Protocol):
    """One transaction spanning every repository it exposes.

    Leaving the ``with`` block without calling ``commit`` rolls back.
    """

    tables: TableRepository
    orders: OrderRepository
    products: ProductRepository
    addons: AddonRepository
    users: UserRepository

    def __enter__(self) -> UnitOfWork: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...


UnitOfWorkFactory = Callable[[], UnitOfWork]
