"""User-level statistics composed from the streak and rate calculators."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..domain.repositories import CompletionRepository, HabitRepository
from ..models.habit import Habit
from .habits import completion_days
from .rates import monthly_rate, percent, trailing_window_rate, window_days
from .streaks import current_streak, longest_streak


@dataclass(frozen=True, slots=True)
class UserStats:
    current_streak: int
    today_completion_rate: float
    today_completed: int
    today_total: int
    monthly_completion_rate: float
    monthly_completed_days: int
    monthly_total_days: int


@dataclass(frozen=True, slots=True)
class HabitOverview:
    """Trailing completion rate plus the standout habit and habit counts."""

    completion_rate: float
    longest_streak_habit: Optional[Habit]
    longest_streak: int
    active: int
    paused: int
    total: int


def user_current_streak(
    user_id: int, today: date, *, habits: HabitRepository, completions: CompletionRepository
) -> int:
    """The best current streak among the user's habits."""

    streaks = [
        current_streak(completion_days(h.id, completions=completions), today)  # type: ignore[arg-type]
        for h in habits.list_for_user(user_id)
    ]
    return max(streaks, default=0)


def get_user_completion_rate(
    user_id: int,
    days: int,
    today: date,
    *,
    habits: HabitRepository,
    completions: CompletionRepository,
) -> float:
    """Percentage of active habit-days completed over the last ``days`` days."""

    window = window_days(days, today)
    active = habits.list_for_user(user_id, include_inactive=False)
    habit_dates: dict[int, list[date]] = {h.id: [] for h in active}  # type: ignore[misc]
    for completion in completions.list_for_user(user_id, window[0], window[-1]):
        if completion.habit_id in habit_dates:
            habit_dates[completion.habit_id].append(completion.completed_on)
    return trailing_window_rate(habit_dates, days, today)


def get_user_stats(
    user_id: int, today: date, *, habits: HabitRepository, completions: CompletionRepository
) -> UserStats:
    all_habits = habits.list_for_user(user_id)
    active_ids = {h.id for h in all_habits if h.is_active}

    month_start = today.replace(day=1)
    month_rows = completions.list_for_user(user_id, month_start, today)
    done_today = {c.habit_id for c in month_rows if c.completed_on == today} & active_ids
    monthly = monthly_rate(
        (c.completed_on for c in month_rows), today, habit_count=len(all_habits)
    )

    return UserStats(
        current_streak=user_current_streak(user_id, today, habits=habits, completions=completions),
        today_completion_rate=percent(len(done_today), len(active_ids)),
        today_completed=len(done_today),
        today_total=len(active_ids),
        monthly_completion_rate=monthly.rate,
        monthly_completed_days=monthly.completed_days,
        monthly_total_days=monthly.total_days,
    )


def get_habit_overview(
    user_id: int,
    today: date,
    *,
    days: int = 7,
    habits: HabitRepository,
    completions: CompletionRepository,
) -> HabitOverview:
    all_habits = habits.list_for_user(user_id)
    days_by_habit: dict[int, set[date]] = defaultdict(set)
    for completion in completions.list_for_user(user_id):
        days_by_habit[completion.habit_id].add(completion.completed_on)

    best_habit: Optional[Habit] = None
    best = 0
    for habit in all_habits:
        longest = longest_streak(days_by_habit[habit.id])  # type: ignore[index]
        if longest > best:
            best_habit, best = habit, longest

    active = sum(1 for h in all_habits if h.is_active)
    return HabitOverview(
        completion_rate=get_user_completion_rate(
            user_id, days, today, habits=habits, completions=completions
        ),
        longest_streak_habit=best_habit,
        longest_streak=best,
        active=active,
        paused=len(all_habits) - active,
        total=len(all_habits),
    )


__all__ = [
    "HabitOverview",
    "UserStats",
    "get_habit_overview",
    "get_user_completion_rate",
    "get_user_stats",
    "user_current_streak",
]
