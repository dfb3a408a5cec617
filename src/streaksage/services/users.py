"""User registration and lookup services."""

from __future__ import annotations

from typing import Optional

from argon2 import PasswordHasher

from ..domain.repositories import UserRepository
from ..errors import Conflict, NotFound, ValidationError
from ..logging_config import get_logger
from ..models.user import PublicUser, User

logger = get_logger(__name__)

_hasher = PasswordHasher()
USERNAME_MAX_LENGTH = 64


def create_user(
    *,
    username: str,
    password: str,
    display_name: str,
    avatar: Optional[str] = None,
    users: UserRepository,
) -> User:
    """Create a new user with an argon2-hashed password."""

    username = (username or "").strip()
    display_name = (display_name or "").strip()
    if not username:
        raise ValidationError("Username is required")
    if len(username) > USERNAME_MAX_LENGTH:
        raise ValidationError(f"Username must be at most {USERNAME_MAX_LENGTH} characters")
    if not password:
        raise ValidationError("Password is required")
    if not display_name:
        raise ValidationError("Display name is required")
    if users.get_by_username(username) is not None:
        raise Conflict(f"Username {username!r} already exists")

    user = users.create(
        User(
            username=username,
            password_hash=_hasher.hash(password),
            display_name=display_name,
            avatar=avatar,
        )
    )
    logger.info("User created", extra={"user_id": user.id, "username": user.username})
    return user


def get_user(user_id: int, *, users: UserRepository) -> User:
    """Fetch a user or raise ``NotFound``."""

    user = users.get_by_id(user_id)
    if user is None:
        raise NotFound(f"User {user_id} not found")
    return user


def get_user_by_username(username: str, *, users: UserRepository) -> User:
    """Fetch a user by username or raise ``NotFound``."""

    user = users.get_by_username(username.strip())
    if user is None:
        raise NotFound(f"User {username!r} not found")
    return user


def discover_users(viewer_id: int, *, users: UserRepository) -> list[PublicUser]:
    """Every user except the viewer, credentials stripped."""

    return [PublicUser.from_user(u) for u in users.list_all() if u.id != viewer_id]


__all__ = ["create_user", "discover_users", "get_user", "get_user_by_username"]
