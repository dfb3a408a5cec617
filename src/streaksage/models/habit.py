"""Habits tracking data structures."""

from __future__ import annotations

from datetime import date, datetime
from typing import ClassVar, Optional

from sqlalchemy import DateTime, Index, UniqueConstraint
from sqlmodel import Field, SQLModel

from .user import utcnow

TITLE_MAX_LENGTH = 80
DESCRIPTION_MAX_LENGTH = 255


class Habit(SQLModel, table=True):
    """A user-defined habit tracked once per calendar day."""

    __tablename__: ClassVar[str] = "habit"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    title: str = Field(nullable=False, max_length=TITLE_MAX_LENGTH)
    description: Optional[str] = Field(default=None, max_length=DESCRIPTION_MAX_LENGTH)
    is_active: bool = Field(default=True, nullable=False)
    created_at: datetime = Field(default_factory=utcnow, nullable=False, sa_type=DateTime)


class Completion(SQLModel, table=True):
    """A habit performed on one calendar day."""

    __tablename__: ClassVar[str] = "completion"
    __table_args__ = (
        UniqueConstraint("habit_id", "completed_on", name="uq_completion_habit_day"),
        Index("ix_completion_user_day", "user_id", "completed_on"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    habit_id: int = Field(foreign_key="habit.id", nullable=False, index=True)
    user_id: int = Field(foreign_key="user.id", nullable=False)
    completed_on: date = Field(nullable=False)
    completed_at: datetime = Field(default_factory=utcnow, nullable=False, sa_type=DateTime)
