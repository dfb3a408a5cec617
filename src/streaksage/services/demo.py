"""Demo data: a few users with habits, follows and recent completions."""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import TYPE_CHECKING, Optional

from ..errors import Conflict
from ..logging_config import get_logger
from ..models.user import User, utcnow

if TYPE_CHECKING:  # pragma: no cover
    from ..tracker import HabitTracker

logger = get_logger(__name__)

DEMO_PASSWORD = "password"

DEMO_USERS = [
    ("demo", "Demo User"),
    ("ana", "Ana Runner"),
    ("ben", "Ben Reader"),
]

DEMO_HABITS = {
    "demo": [
        ("Morning meditation", "10 minutes"),
        ("Read for 30 minutes", "Personal development"),
        ("Drink 2L of water", "Stay hydrated"),
        ("Exercise for 30 minutes", "Cardio or strength"),
        ("Write in journal", "Evening reflection"),
    ],
    "ana": [("Run 5k", None), ("Stretch", "Before bed")],
    "ben": [("Read 20 pages", None)],
}

# Days back from today each user's first habit was completed
DEMO_HISTORY = {
    "demo": [0, 1, 2, 4],
    "ana": [0, 1, 2, 3, 4, 5, 6],
    "ben": [1, 2],
}


def _get_or_create(tracker: "HabitTracker", username: str, display_name: str) -> tuple[User, bool]:
    existing = tracker.context.users.get_by_username(username)
    if existing is not None:
        return existing, False
    try:
        return tracker.create_user(username, DEMO_PASSWORD, display_name), True
    except Conflict:
        # Created concurrently
        return tracker.context.users.get_by_username(username), False  # type: ignore[return-value]


def seed_demo(
    tracker: "HabitTracker", *, today: Optional[date] = None, now: Optional[datetime] = None
) -> dict[str, int]:
    """Populate demo content; users that already exist are left untouched.

    Returns the id of every demo user keyed by username.
    """

    today = today or date.today()
    now = now or utcnow()
    ids: dict[str, int] = {}
    created: list[str] = []

    for username, display_name in DEMO_USERS:
        user, was_created = _get_or_create(tracker, username, display_name)
        ids[username] = user.id  # type: ignore[assignment]
        if not was_created:
            continue
        created.append(username)
        habit_ids = [
            tracker.create_habit(user.id, title, description).id  # type: ignore[arg-type]
            for title, description in DEMO_HABITS[username]
        ]
        for days_back in DEMO_HISTORY[username]:
            tracker.complete_habit(
                habit_ids[0],  # type: ignore[arg-type]
                user.id,  # type: ignore[arg-type]
                today - timedelta(days=days_back),
                now=now - timedelta(days=days_back, minutes=5 * len(created)),
            )

    if "demo" in created:
        for other in ("ana", "ben"):
            tracker.follow(ids["demo"], ids[other])

    logger.info("Demo data seeded", extra={"created_users": created})
    return ids


__all__ = ["DEMO_PASSWORD", "seed_demo"]
