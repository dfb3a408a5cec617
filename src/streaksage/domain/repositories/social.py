"""Follow edge and support mark repository protocols."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.social import FollowEdge, SupportMark


class FollowRepository(Protocol):
    """Repository for directed follow edges."""

    def get(self, follower_id: int, following_id: int) -> Optional[FollowEdge]:
        """Get the edge between two users, if any."""
        ...

    def create(self, edge: FollowEdge) -> FollowEdge:
        """Create an edge; raises Conflict when the pair already exists."""
        ...

    def delete(self, edge_id: int) -> None:
        """Delete an edge by ID."""
        ...

    def following_ids(self, user_id: int) -> list[int]:
        """IDs of the users ``user_id`` follows."""
        ...

    def follower_ids(self, user_id: int) -> list[int]:
        """IDs of the users following ``user_id``."""
        ...


class SupportRepository(Protocol):
    """Repository for support marks on completions."""

    def get(self, from_user_id: int, completion_id: int) -> Optional[SupportMark]:
        """Get a user's mark on a completion, if any."""
        ...

    def create(self, mark: SupportMark) -> SupportMark:
        """Create a mark; raises Conflict when the pair already exists."""
        ...

    def delete(self, mark_id: int) -> None:
        """Delete a mark by ID."""
        ...

    def supported_completion_ids(self, from_user_id: int) -> set[int]:
        """IDs of every completion the user has supported."""
        ...
