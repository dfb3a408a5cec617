"""Habit services: ownership checks, completions and per-habit status."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..domain.repositories import CompletionRepository, HabitRepository, UserRepository
from ..errors import Forbidden, NotFound, ValidationError
from ..logging_config import get_logger
from ..models.habit import DESCRIPTION_MAX_LENGTH, TITLE_MAX_LENGTH, Completion, Habit
from ..models.user import utcnow
from .streaks import compute_streaks, current_streak

logger = get_logger(__name__)


@dataclass(slots=True)
class HabitUpdate:
    """Explicit set of mutable habit fields; ``None`` leaves a field unchanged.

    An empty ``description`` clears it.
    """

    title: Optional[str] = None
    description: Optional[str] = None
    is_active: Optional[bool] = None


@dataclass(frozen=True, slots=True)
class HabitStatus:
    habit: Habit
    is_completed: bool
    streak: int


@dataclass(frozen=True, slots=True)
class ToggleResult:
    completed: bool
    streak: int


@dataclass(frozen=True, slots=True)
class HabitDetail:
    """A habit with its streaks and full completion history (newest first)."""

    habit: Habit
    streak: int
    longest_streak: int
    completions: list[Completion]


def coerce_day(value: date | str) -> date:
    """Accept a ``date`` or a ``YYYY-MM-DD`` string; reject anything else."""

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return datetime.strptime(value.strip(), "%Y-%m-%d").date()
        except ValueError as exc:
            raise ValidationError(f"Malformed date {value!r}, expected YYYY-MM-DD") from exc
    raise ValidationError(f"Malformed date {value!r}, expected YYYY-MM-DD")


def _clean_title(title: str | None) -> str:
    title = (title or "").strip()
    if not title:
        raise ValidationError("Habit title is required")
    if len(title) > TITLE_MAX_LENGTH:
        raise ValidationError(f"Habit title must be at most {TITLE_MAX_LENGTH} characters")
    return title


def _clean_description(description: str | None) -> str | None:
    if description is None:
        return None
    description = description.strip()
    if len(description) > DESCRIPTION_MAX_LENGTH:
        raise ValidationError(
            f"Habit description must be at most {DESCRIPTION_MAX_LENGTH} characters"
        )
    return description or None


def require_owned_habit(habit_id: int, user_id: int, *, habits: HabitRepository) -> Habit:
    """Return the habit, raising ``NotFound`` if absent and ``Forbidden`` if not owned."""

    habit = habits.get_by_id(habit_id)
    if habit is None:
        raise NotFound(f"Habit {habit_id} not found")
    if habit.user_id != user_id:
        raise Forbidden(f"User {user_id} does not own habit {habit_id}")
    return habit


def completion_days(habit_id: int, *, completions: CompletionRepository) -> set[date]:
    return {c.completed_on for c in completions.list_for_habit(habit_id)}


def habit_streak(habit_id: int, today: date, *, completions: CompletionRepository) -> int:
    return current_streak(completion_days(habit_id, completions=completions), today)


def create_habit(
    user_id: int,
    title: str,
    description: str | None = None,
    *,
    users: UserRepository,
    habits: HabitRepository,
) -> Habit:
    if users.get_by_id(user_id) is None:
        raise NotFound(f"User {user_id} not found")
    habit = habits.create(
        Habit(user_id=user_id, title=_clean_title(title), description=_clean_description(description))
    )
    logger.info("Habit created", extra={"habit_id": habit.id, "user_id": user_id})
    return habit


def update_habit(
    habit_id: int, user_id: int, changes: HabitUpdate, *, habits: HabitRepository
) -> Habit:
    habit = require_owned_habit(habit_id, user_id, habits=habits)
    # Validate everything before touching the habit
    title = _clean_title(changes.title) if changes.title is not None else habit.title
    description = (
        _clean_description(changes.description)
        if changes.description is not None
        else habit.description
    )
    habit.title = title
    habit.description = description
    if changes.is_active is not None:
        habit.is_active = changes.is_active
    return habits.update(habit)


def delete_habit(habit_id: int, user_id: int, *, habits: HabitRepository) -> None:
    require_owned_habit(habit_id, user_id, habits=habits)
    habits.delete(habit_id)
    logger.info("Habit deleted", extra={"habit_id": habit_id, "user_id": user_id})


def get_habits_with_status(
    user_id: int,
    today: date,
    *,
    habits: HabitRepository,
    completions: CompletionRepository,
) -> list[HabitStatus]:
    """Each of the user's habits with today's completion state and current streak."""

    statuses = []
    for habit in habits.list_for_user(user_id):
        days = completion_days(habit.id, completions=completions)  # type: ignore[arg-type]
        statuses.append(
            HabitStatus(habit=habit, is_completed=today in days, streak=current_streak(days, today))
        )
    return statuses


def toggle_completion(
    habit_id: int,
    user_id: int,
    day: date | str,
    *,
    habits: HabitRepository,
    completions: CompletionRepository,
    today: date | None = None,
    now: datetime | None = None,
) -> ToggleResult:
    """Complete the habit for ``day``, or undo the completion if it already exists."""

    completed_on = coerce_day(day)
    require_owned_habit(habit_id, user_id, habits=habits)
    completed = completions.toggle(habit_id, user_id, completed_on, now or utcnow())
    streak = habit_streak(habit_id, today or date.today(), completions=completions)
    logger.info(
        "Completion toggled",
        extra={
            "habit_id": habit_id,
            "user_id": user_id,
            "completed_on": completed_on.isoformat(),
            "completed": completed,
        },
    )
    return ToggleResult(completed=completed, streak=streak)


def complete_habit(
    habit_id: int,
    user_id: int,
    day: date | str,
    *,
    habits: HabitRepository,
    completions: CompletionRepository,
    now: datetime | None = None,
) -> Completion:
    """Mark the habit done for ``day``; a repeat call returns the existing completion."""

    completed_on = coerce_day(day)
    require_owned_habit(habit_id, user_id, habits=habits)
    return completions.add(habit_id, user_id, completed_on, now or utcnow())


def uncomplete_habit(
    habit_id: int,
    user_id: int,
    day: date | str,
    *,
    habits: HabitRepository,
    completions: CompletionRepository,
) -> bool:
    """Remove the completion for ``day``; returns False when there was none."""

    completed_on = coerce_day(day)
    require_owned_habit(habit_id, user_id, habits=habits)
    return completions.remove(habit_id, completed_on)


def get_habit_detail(
    habit_id: int,
    user_id: int,
    today: date,
    *,
    habits: HabitRepository,
    completions: CompletionRepository,
) -> HabitDetail:
    habit = require_owned_habit(habit_id, user_id, habits=habits)
    rows = completions.list_for_habit(habit_id)
    streak, longest = compute_streaks((c.completed_on for c in rows), today=today)
    return HabitDetail(
        habit=habit,
        streak=streak,
        longest_streak=longest,
        completions=sorted(rows, key=lambda c: c.completed_on, reverse=True),
    )


__all__ = [
    "HabitDetail",
    "HabitStatus",
    "HabitUpdate",
    "ToggleResult",
    "coerce_day",
    "complete_habit",
    "completion_days",
    "create_habit",
    "delete_habit",
    "get_habit_detail",
    "get_habits_with_status",
    "habit_streak",
    "require_owned_habit",
    "toggle_completion",
    "uncomplete_habit",
]
