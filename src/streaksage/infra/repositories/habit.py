"""SQLModel implementation of Habit repository."""

from __future__ import annotations

from typing import Optional

from sqlmodel import Session, select

from ...models.habit import Completion, Habit
from ...models.social import SupportMark
from ..database import SessionFactory


def delete_support_marks(session: Session, completion_ids: list[int]) -> None:
    """Delete the support marks attached to the given completions."""

    if not completion_ids:
        return
    marks = session.exec(
        select(SupportMark).where(SupportMark.completion_id.in_(completion_ids))  # type: ignore[union-attr]
    ).all()
    for mark in marks:
        session.delete(mark)


class SQLModelHabitRepository:
    """SQLModel-based habit repository implementation."""

    def __init__(self, session_factory: SessionFactory):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_id(self, habit_id: int) -> Optional[Habit]:
        """Retrieve a habit by ID."""
        with self.session_factory() as session:
            obj = session.get(Habit, habit_id)
            if obj:
                session.expunge(obj)
            return obj

    def list_for_user(self, user_id: int, include_inactive: bool = True) -> list[Habit]:
        """List a user's habits, optionally excluding paused ones."""
        with self.session_factory() as session:
            statement = select(Habit).where(Habit.user_id == user_id).order_by(Habit.id)  # type: ignore[arg-type]
            if not include_inactive:
                statement = statement.where(Habit.is_active == True)  # noqa: E712

            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def create(self, habit: Habit) -> Habit:
        """Create a new habit."""
        with self.session_factory() as session:
            session.add(habit)
            session.commit()
            session.refresh(habit)
            session.expunge(habit)
            return habit

    def update(self, habit: Habit) -> Habit:
        """Update an existing habit."""
        with self.session_factory() as session:
            habit = session.merge(habit)
            session.commit()
            session.refresh(habit)
            session.expunge(habit)
            return habit

    def delete(self, habit_id: int) -> None:
        """Delete a habit and everything hanging off it."""
        with self.session_factory() as session:
            habit = session.get(Habit, habit_id)
            if habit is None:
                return
            completions = session.exec(
                select(Completion).where(Completion.habit_id == habit_id)
            ).all()
            delete_support_marks(session, [c.id for c in completions if c.id is not None])
            session.flush()
            for completion in completions:
                session.delete(completion)
            session.flush()
            session.delete(habit)
            session.commit()


__all__ = ["SQLModelHabitRepository", "delete_support_marks"]
