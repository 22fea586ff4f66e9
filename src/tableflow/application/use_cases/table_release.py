from __future__ import annotations

from tableflow.application.ports.unit_of_work import UnitOfWork
from tableflow.domain.common.ids import TableId
from tableflow.domain.table.entities import Table, TableStatus


def release_table(uow: UnitOfWork, table_id: TableId) -> Table | None:
    table = uow.tables.get(table_id)
    if table is None:
        return None
    released = table.release()
    uow.tables.update(released)
    return released


def release_table_if_idle(uow: UnitOfWork, table_id: TableId) -> Table | None:
    """Free the table once no order on it still occupies it.

    Must run after the triggering order update inside the same unit of work.
    """
    if uow.orders.count_active_for_table(table_id) > 0:
        return None
    table = uow.tables.get(table_id)
    if table is None or (table.status == TableStatus.FREE and table.assigned_to is None):
        return None
    released = table.release()
    uow.tables.update(released)
    return released
