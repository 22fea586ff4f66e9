from __future__ import annotations

from dataclasses import dataclass

from tableflow.domain.common.ids import UserId


@dataclass(frozen=True)
class StaffUser:
    user_id: UserId
    name: str
    email: str | None
