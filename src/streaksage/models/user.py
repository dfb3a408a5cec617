"""User model and its credential-free public projection."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import ClassVar, Optional

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    """Naive UTC timestamp; every timestamp column is a naive ``DateTime``."""

    return datetime.now(timezone.utc).replace(tzinfo=None)


class User(SQLModel, table=True):
    """Application user with credentials."""

    __tablename__: ClassVar[str] = "user"

    id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(nullable=False, unique=True, index=True, max_length=64)
    password_hash: str = Field(nullable=False, max_length=255)
    display_name: str = Field(nullable=False, max_length=80)
    avatar: Optional[str] = Field(default=None, max_length=255)
    created_at: datetime = Field(default_factory=utcnow, nullable=False, sa_type=DateTime)


@dataclass(frozen=True, slots=True)
class PublicUser:
    """A user as other users may see it: no password hash."""

    id: int
    username: str
    display_name: str
    avatar: Optional[str]
    created_at: datetime

    @classmethod
    def from_user(cls, user: User) -> "PublicUser":
        return cls(
            id=user.id,  # type: ignore[arg-type]
            username=user.username,
            display_name=user.display_name,
            avatar=user.avatar,
            created_at=user.created_at,
        )
