from __future__ import annotations

from sqlalchemy.orm import Session

from tableflow.application.ports.repositories import UserRepository
from tableflow.domain.common.ids import UserId
from tableflow.domain.user.entities import StaffUser
from tableflow.infrastructure.db.models.user import UserModel


class SqlAlchemyUserRepository(UserRepository):
    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, user_id: UserId) -> StaffUser | None:
        model = self._session.get(UserModel, str(user_id))
        if model is None:
            return None
        return StaffUser(user_id=UserId(model.id), name=model.name, email=model.email)
