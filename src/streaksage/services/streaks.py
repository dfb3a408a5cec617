"""Streak calculations over a habit's set of completion days.

These functions are pure: they take the completion days and a caller-supplied
``today`` and never touch storage.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable

ONE_DAY = timedelta(days=1)


def current_streak(dates: Iterable[date], today: date) -> int:
    """Return the run of consecutive completed days ending today or yesterday.

    A streak survives a missing ``today`` as long as yesterday was completed,
    so it only breaks once a whole day has passed without a completion.
    """

    days = set(dates)
    if today in days:
        cursor = today
    elif today - ONE_DAY in days:
        cursor = today - ONE_DAY
    else:
        return 0

    count = 0
    while cursor in days:
        count += 1
        cursor -= ONE_DAY
    return count


def longest_streak(dates: Iterable[date]) -> int:
    """Return the longest run of consecutive calendar days in ``dates``."""

    longest = 0
    run = 0
    last_day: date | None = None
    for day in sorted(set(dates)):
        if last_day is not None and day == last_day + ONE_DAY:
            run += 1
        else:
            run = 1
        longest = max(longest, run)
        last_day = day
    return longest


def compute_streaks(dates: Iterable[date], *, today: date) -> tuple[int, int]:
    """Return (current_streak, longest_streak) from a collection of days."""

    days = set(dates)
    return current_streak(days, today), longest_streak(days)


__all__ = ["compute_streaks", "current_streak", "longest_streak"]
