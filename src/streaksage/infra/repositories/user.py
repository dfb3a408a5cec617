"""SQLModel implementation of User repository."""

from __future__ import annotations

from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import select

from ...errors import Conflict
from ...models.user import User
from ..database import SessionFactory


class SQLModelUserRepository:
    """SQLModel-based user repository implementation."""

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with self.session_factory() as session:
            obj = session.get(User, user_id)
            if obj:
                session.expunge(obj)
            return obj

    def get_by_username(self, username: str) -> Optional[User]:
        with self.session_factory() as session:
            obj = session.exec(select(User).where(User.username == username)).first()
            if obj:
                session.expunge(obj)
            return obj

    def list_all(self) -> list[User]:
        with self.session_factory() as session:
            rows = list(session.exec(select(User).order_by(User.created_at, User.id)).all())  # type: ignore[arg-type]
            session.expunge_all()
            return rows

    def create(self, user: User) -> User:
        try:
            with self.session_factory() as session:
                session.add(user)
                session.commit()
                session.refresh(user)
                session.expunge(user)
                return user
        except IntegrityError as exc:
            raise Conflict(f"Username {user.username!r} already exists") from exc


__all__ = ["SQLModelUserRepository"]
