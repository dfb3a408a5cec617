"""SQLModel implementation of Completion repository.

Uniqueness of (habit_id, completed_on) is enforced by the table's unique
constraint; a writer that loses an insert race sees ``IntegrityError`` and
re-reads the row the winner stored.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from ...logging_config import get_logger
from ...models.habit import Completion
from ..database import SessionFactory
from .habit import delete_support_marks

logger = get_logger(__name__)


def _select_day(habit_id: int, completed_on: date):
    return select(Completion).where(
        Completion.habit_id == habit_id, Completion.completed_on == completed_on
    )


class SQLModelCompletionRepository:
    """SQLModel-based completion repository implementation."""

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    def get_by_id(self, completion_id: int) -> Optional[Completion]:
        with self.session_factory() as session:
            obj = session.get(Completion, completion_id)
            if obj:
                session.expunge(obj)
            return obj

    def get(self, habit_id: int, completed_on: date) -> Optional[Completion]:
        with self.session_factory() as session:
            obj = session.exec(_select_day(habit_id, completed_on)).first()
            if obj:
                session.expunge(obj)
            return obj

    def list_for_habit(self, habit_id: int) -> list[Completion]:
        with self.session_factory() as session:
            statement = (
                select(Completion)
                .where(Completion.habit_id == habit_id)
                .order_by(Completion.completed_on)  # type: ignore[arg-type]
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def list_for_user(
        self, user_id: int, start_date: date | None = None, end_date: date | None = None
    ) -> list[Completion]:
        with self.session_factory() as session:
            statement = select(Completion).where(Completion.user_id == user_id)
            if start_date is not None:
                statement = statement.where(Completion.completed_on >= start_date)
            if end_date is not None:
                statement = statement.where(Completion.completed_on <= end_date)
            statement = statement.order_by(Completion.completed_on, Completion.id)  # type: ignore[arg-type]
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def add(self, habit_id: int, user_id: int, completed_on: date, completed_at: datetime) -> Completion:
        try:
            with self.session_factory() as session:
                existing = session.exec(_select_day(habit_id, completed_on)).first()
                if existing:
                    session.expunge(existing)
                    return existing
                return self._insert(session, habit_id, user_id, completed_on, completed_at)
        except IntegrityError:
            logger.info(
                "Concurrent completion insert lost the race",
                extra={"habit_id": habit_id, "completed_on": completed_on.isoformat()},
            )
            winner = self.get(habit_id, completed_on)
            if winner is None:
                raise
            return winner

    def remove(self, habit_id: int, completed_on: date) -> bool:
        with self.session_factory() as session:
            existing = session.exec(_select_day(habit_id, completed_on)).first()
            if existing is None:
                return False
            self._delete(session, existing)
            return True

    def toggle(self, habit_id: int, user_id: int, completed_on: date, completed_at: datetime) -> bool:
        try:
            with self.session_factory() as session:
                existing = session.exec(_select_day(habit_id, completed_on)).first()
                if existing:
                    self._delete(session, existing)
                    return False
                self._insert(session, habit_id, user_id, completed_on, completed_at)
                return True
        except IntegrityError:
            # A foreign-key failure (habit deleted meanwhile) leaves no row behind
            if self.get(habit_id, completed_on) is None:
                raise
            # Another writer completed the same day first; both converge on completed.
            logger.info(
                "Concurrent toggle converged on completed",
                extra={"habit_id": habit_id, "completed_on": completed_on.isoformat()},
            )
            return True

    @staticmethod
    def _insert(
        session: Session, habit_id: int, user_id: int, completed_on: date, completed_at: datetime
    ) -> Completion:
        completion = Completion(
            habit_id=habit_id,
            user_id=user_id,
            completed_on=completed_on,
            completed_at=completed_at,
        )
        session.add(completion)
        session.commit()
        session.refresh(completion)
        session.expunge(completion)
        return completion

    @staticmethod
    def _delete(session: Session, completion: Completion) -> None:
        delete_support_marks(session, [completion.id] if completion.id is not None else [])
        session.flush()
        session.delete(completion)
        session.commit()


__all__ = ["SQLModelCompletionRepository"]
