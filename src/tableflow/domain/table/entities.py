from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

from tableflow.domain.common.ids import TableId, UserId


class TableStatus(str, Enum):
    FREE = "FREE"
    OCCUPIED = "OCCUPIED"
    RESERVED = "RESERVED"
    MAINTENANCE = "MAINTENANCE"


@dataclass(frozen=True)
class Table:
    table_id: TableId
    number: int
    capacity: int
    status: TableStatus
    assigned_to: UserId | None = None

    def __post_init__(self) -> None:
        if self.capacity < 1:
            raise ValueError("capacity must be >= 1")

    def ensure_free(self) -> None:
        if self.status != TableStatus.FREE:
            raise TableNotFreeError(
                f"table {self.number} is {self.status.value.lower()}",
                status=self.status,
            )

    def ensure_occupied(self) -> None:
        if self.status != TableStatus.OCCUPIED:
            raise TableNotOccupiedError(f"table {self.number} is not occupied")

    def occupy(self, staff_user_id: UserId) -> Table:
        return replace(self, status=TableStatus.OCCUPIED, assigned_to=staff_user_id)

    def release(self) -> Table:
        return replace(self, status=TableStatus.FREE, assigned_to=None)


class TableNotFreeError(Exception):
    def __init__(self, message: str, status: TableStatus) -> None:
        super().__init__(message)
        self.status = status


class TableNotOccupiedError(Exception):
    pass
