"""Completion repository protocol."""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol

from ...models.habit import Completion


class CompletionRepository(Protocol):
    """Repository for habit completions, unique per (habit, day)."""

    def get_by_id(self, completion_id: int) -> Optional[Completion]:
        """Retrieve a completion by ID."""
        ...

    def get(self, habit_id: int, completed_on: date) -> Optional[Completion]:
        """Get the completion of a habit on a given day."""
        ...

    def list_for_habit(self, habit_id: int) -> list[Completion]:
        """All completions of a habit, oldest day first."""
        ...

    def list_for_user(
        self, user_id: int, start_date: date | None = None, end_date: date | None = None
    ) -> list[Completion]:
        """Completions of a user, optionally bounded by an inclusive date range."""
        ...

    def add(self, habit_id: int, user_id: int, completed_on: date, completed_at: datetime) -> Completion:
        """Insert a completion unless one exists for the day; return the stored row."""
        ...

    def remove(self, habit_id: int, completed_on: date) -> bool:
        """Delete the completion for the day; return whether a row was removed."""
        ...

    def toggle(self, habit_id: int, user_id: int, completed_on: date, completed_at: datetime) -> bool:
        """Atomically flip the completion for the day; return the new completed state."""
        ...
