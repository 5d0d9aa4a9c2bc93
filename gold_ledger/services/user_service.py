"""Service layer for member use-cases."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from gold_ledger.errors import ConflictError, NotFoundError
from gold_ledger.models.user import User
from gold_ledger.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


class UserService:
    """Member registry use-cases."""

    def __init__(self, repository: UserRepository | None = None) -> None:
        self._repo = repository or UserRepository()

    def get_user(self, session: Session, user_id: int) -> User:
        user = self._repo.get_by_id(session, user_id)
        if user is None:
            raise NotFoundError(message="User not found")
        return user

    def create_user(self, session: Session, *, name: str, member_id: str, phone_number: str | None = None) -> User:
        if self._repo.get_by_member_id(session, member_id) is not None:
            raise ConflictError(message=f"Member ID {member_id} is already registered")
        user = self._repo.create(session, name=name, member_id=member_id, phone_number=phone_number)
        logger.info("Created user %s (%s)", user.id, member_id)
        return user
