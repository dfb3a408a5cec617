"""Follow edges and support marks between users."""

from __future__ import annotations

from datetime import datetime
from typing import ClassVar, Optional

from sqlalchemy import DateTime, UniqueConstraint
from sqlmodel import Field, SQLModel

from .user import utcnow


class FollowEdge(SQLModel, table=True):
    """Directed edge: ``follower_id`` sees ``following_id``'s completions."""

    __tablename__: ClassVar[str] = "follow_edge"
    __table_args__ = (
        UniqueConstraint("follower_id", "following_id", name="uq_follow_edge_pair"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    follower_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    following_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    created_at: datetime = Field(default_factory=utcnow, nullable=False, sa_type=DateTime)


class SupportMark(SQLModel, table=True):
    """A "like" left by one user on a specific completion."""

    __tablename__: ClassVar[str] = "support_mark"
    __table_args__ = (
        UniqueConstraint("from_user_id", "completion_id", name="uq_support_mark_pair"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    from_user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    completion_id: int = Field(foreign_key="completion.id", nullable=False, index=True)
    created_at: datetime = Field(default_factory=utcnow, nullable=False, sa_type=DateTime)
