"""Habit repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.habit import Habit


class HabitRepository(Protocol):
    """Repository for managing habit entities."""

    def get_by_id(self, habit_id: int) -> Optional[Habit]:
        """Retrieve a habit by ID."""
        ...

    def list_for_user(self, user_id: int, include_inactive: bool = True) -> list[Habit]:
        """List a user's habits ordered by id."""
        ...

    def create(self, habit: Habit) -> Habit:
        """Create a new habit."""
        ...

    def update(self, habit: Habit) -> Habit:
        """Persist changes to an existing habit."""
        ...

    def delete(self, habit_id: int) -> None:
        """Delete a habit with its completions and their support marks."""
        ...
