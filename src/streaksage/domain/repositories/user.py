"""User repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.user import User


class UserRepository(Protocol):
    """Repository for looking up and registering users."""

    def get_by_id(self, user_id: int) -> Optional[User]:
        """Retrieve a user by ID."""
        ...

    def get_by_username(self, username: str) -> Optional[User]:
        """Retrieve a user by username."""
        ...

    def list_all(self) -> list[User]:
        """List every user ordered by creation time."""
        ...

    def create(self, user: User) -> User:
        """Create a new user; raises Conflict when the username is taken."""
        ...
