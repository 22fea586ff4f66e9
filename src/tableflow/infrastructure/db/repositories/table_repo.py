from __future__ import annotations

from sqlalchemy.orm import Session

from tableflow.application.ports.repositories import TableRepository
from tableflow.domain.common.ids import TableId, UserId
from tableflow.domain.table.entities import Table, TableStatus
from tableflow.infrastructure.db.models.table import TableModel


class SqlAlchemyTableRepository(TableRepository):
    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, table_id: TableId) -> Table | None:
        model = self._session.get(TableModel, str(table_id))
        if model is None:
            return None
        return self._to_domain(model)

    def update(self, table: Table) -> None:
        model = self._session.get(TableModel, str(table.table_id))
        if model is None:
            raise LookupError(f"table {table.table_id} does not exist")
        model.status = table.status.value
        model.assigned_to = str(table.assigned_to) if table.assigned_to else None
        self._session.flush()

    def _to_domain(self, model: TableModel) -> Table:
        return Table(
            table_id=TableId(model.id),
            number=model.number,
            capacity=model.capacity,
            status=TableStatus(model.status),
            assigned_to=UserId(model.assigned_to) if model.assigned_to else None,
        )
