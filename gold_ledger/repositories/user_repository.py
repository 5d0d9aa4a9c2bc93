"""Repository layer for member persistence."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from gold_ledger.models.user import User


class UserRepository:
    """CRUD operations for User."""

    def get_by_id(self, session: Session, user_id: int) -> User | None:
        return session.get(User, user_id)

    def get_by_member_id(self, session: Session, member_id: str) -> User | None:
        stmt = select(User).where(User.member_id == member_id)
        return session.scalars(stmt).first()

    def create(self, session: Session, *, name: str, member_id: str, phone_number: str | None) -> User:
        user = User(name=name, member_id=member_id, phone_number=phone_number)
        session.add(user)
        session.flush()  # assign PK
        return user
