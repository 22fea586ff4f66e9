from __future__ import annotations

import pytest

from tableflow.domain.common.ids import TableId, UserId
from tableflow.domain.table.entities import (
    Table,
    TableNotFreeError,
    TableNotOccupiedError,
    TableStatus,
)


def _table(status: TableStatus = TableStatus.FREE, assigned_to: str | None = None) -> Table:
    return Table(
        table_id=TableId("tbl_001"),
        number=1,
        capacity=4,
        status=status,
        assigned_to=UserId(assigned_to) if assigned_to else None,
    )


def test_capacity_must_be_positive() -> None:
    with pytest.raises(ValueError):
        Table(table_id=TableId("tbl_001"), number=1, capacity=0, status=TableStatus.FREE)


def test_occupy_assigns_staff() -> None:
    occupied = _table().occupy(UserId("usr_001"))

    assert occupied.status == TableStatus.OCCUPIED
    assert occupied.assigned_to == UserId("usr_001")


def test_release_clears_assignment() -> None:
    released = _table(TableStatus.OCCUPIED, "usr_001").release()

    assert released.status == TableStatus.FREE
    assert released.assigned_to is None


@pytest.mark.parametrize(
    "status", [TableStatus.OCCUPIED, TableStatus.RESERVED, TableStatus.MAINTENANCE]
)
def test_ensure_free_reports_current_status(status: TableStatus) -> None:
    with pytest.raises(TableNotFreeError) as exc_info:
        _table(status).ensure_free()

    assert exc_info.value.status == status
    assert status.value.lower() in str(exc_info.value)


def test_ensure_occupied_rejects_free_table() -> None:
    with pytest.raises(TableNotOccupiedError):
        _table().ensure_occupied()
