"""Completion-rate aggregates over trailing windows and calendar months."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, Mapping

from ..errors import ValidationError


@dataclass(frozen=True, slots=True)
class MonthlyRate:
    """Share of days this month with at least one completion."""

    rate: float
    completed_days: int
    total_days: int


def percent(hits: int, expected: int) -> float:
    if expected <= 0:
        return 0.0
    return round(min(hits / expected, 1.0) * 100, 2)


def window_days(days: int, today: date) -> list[date]:
    """The ``days`` consecutive calendar dates ending at ``today`` inclusive."""

    if days < 1:
        raise ValidationError(f"days must be >= 1, got {days}")
    return [today - timedelta(days=offset) for offset in range(days - 1, -1, -1)]


def trailing_window_rate(
    habit_dates: Mapping[int, Iterable[date]], days: int, today: date
) -> float:
    """Percentage of expected habit-days completed over the trailing window.

    Args:
        habit_dates: completion days keyed by habit id, one entry per habit
            expected to be done daily (habits with no completions map to ``[]``)
        days: window length, ``today`` included
        today: last day of the window

    Returns:
        ``hits / (habit_count * days) * 100``, or 0.0 when there are no habits
    """

    window = set(window_days(days, today))
    if not habit_dates:
        return 0.0
    hits = sum(len(window & set(completed)) for completed in habit_dates.values())
    return percent(hits, len(habit_dates) * days)


def monthly_rate(dates: Iterable[date], today: date, *, habit_count: int) -> MonthlyRate:
    """Rate of days from the 1st of ``today``'s month through ``today`` with any completion."""

    month_start = today.replace(day=1)
    total_days = (today - month_start).days + 1
    if habit_count == 0:
        return MonthlyRate(rate=0.0, completed_days=0, total_days=total_days)

    completed_days = len({d for d in dates if month_start <= d <= today})
    return MonthlyRate(
        rate=percent(completed_days, total_days),
        completed_days=completed_days,
        total_days=total_days,
    )


__all__ = ["MonthlyRate", "monthly_rate", "percent", "trailing_window_rate", "window_days"]
