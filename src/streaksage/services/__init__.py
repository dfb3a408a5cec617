"""Service module exports."""

from . import demo, feed, habits, rates, social, stats, streaks, support, users

__all__ = [
    "demo",
    "feed",
    "habits",
    "rates",
    "social",
    "stats",
    "streaks",
    "support",
    "users",
]
