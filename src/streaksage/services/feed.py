"""Activity feed: recent completions across the people a user follows."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Optional

from ..domain.repositories import (
    CompletionRepository,
    FollowRepository,
    HabitRepository,
    SupportRepository,
    UserRepository,
)
from ..errors import ValidationError
from ..logging_config import get_logger
from ..models.habit import Completion, Habit
from ..models.user import PublicUser, utcnow
from .habits import completion_days
from .streaks import current_streak

logger = get_logger(__name__)

DEFAULT_FEED_LIMIT = 10
MILESTONE_STREAKS = frozenset({21, 30, 100, 365})


@dataclass(frozen=True, slots=True)
class FeedItem:
    """A completion enriched with its actor, habit, streak and age."""

    id: int
    user: PublicUser
    habit: Habit
    completed_on: date
    completed_at: datetime
    streak: int
    supported: bool
    time_ago: str

    @property
    def milestone(self) -> bool:
        return self.streak in MILESTONE_STREAKS


def _naive_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment
    return moment.astimezone(timezone.utc).replace(tzinfo=None)


def relative_time_label(completed_at: datetime, now: datetime) -> str:
    """Human label for an event's age: ``just now``, ``5m ago``, ``3h ago``, ``2d ago``."""

    seconds = int((_naive_utc(now) - _naive_utc(completed_at)).total_seconds())
    if seconds < 60:
        return "just now"
    if seconds < 3600:
        return f"{seconds // 60}m ago"
    if seconds < 86400:
        return f"{seconds // 3600}h ago"
    return f"{seconds // 86400}d ago"


def build_feed(
    viewer_id: int,
    *,
    users: UserRepository,
    habits: HabitRepository,
    completions: CompletionRepository,
    follows: FollowRepository,
    supports: SupportRepository,
    limit: int = DEFAULT_FEED_LIMIT,
    include_self: bool = False,
    now: Optional[datetime] = None,
    today: Optional[date] = None,
) -> list[FeedItem]:
    """Assemble the viewer's feed, newest completion first.

    Completions whose habit or user cannot be resolved (deleted while the feed
    was being built) are left out rather than reported.
    """

    if limit < 1:
        raise ValidationError(f"limit must be >= 1, got {limit}")
    now = now or utcnow()
    today = today or _naive_utc(now).date()

    actor_ids = list(dict.fromkeys(follows.following_ids(viewer_id)))
    if include_self and viewer_id not in actor_ids:
        actor_ids.append(viewer_id)

    supported = supports.supported_completion_ids(viewer_id)
    streaks: dict[int, int] = {}
    habit_cache: dict[int, Optional[Habit]] = {}
    items: list[FeedItem] = []

    for actor_id in actor_ids:
        actor = users.get_by_id(actor_id)
        if actor is None:
            logger.debug("Dropping feed actor that no longer exists", extra={"user_id": actor_id})
            continue
        public_actor = PublicUser.from_user(actor)

        for completion in completions.list_for_user(actor_id):
            item = _feed_item(
                completion,
                public_actor,
                habits=habits,
                completions=completions,
                habit_cache=habit_cache,
                streaks=streaks,
                supported=supported,
                now=now,
                today=today,
            )
            if item is not None:
                items.append(item)

    items.sort(key=lambda i: i.id)
    items.sort(key=lambda i: _naive_utc(i.completed_at), reverse=True)
    return items[:limit]


def _feed_item(
    completion: Completion,
    actor: PublicUser,
    *,
    habits: HabitRepository,
    completions: CompletionRepository,
    habit_cache: dict[int, Optional[Habit]],
    streaks: dict[int, int],
    supported: set[int],
    now: datetime,
    today: date,
) -> Optional[FeedItem]:
    if completion.habit_id not in habit_cache:
        habit_cache[completion.habit_id] = habits.get_by_id(completion.habit_id)
    habit = habit_cache[completion.habit_id]
    if habit is None or habit.user_id != actor.id:
        logger.debug(
            "Dropping feed item with unresolvable habit",
            extra={"completion_id": completion.id, "habit_id": completion.habit_id},
        )
        return None

    if habit.id not in streaks:
        streaks[habit.id] = current_streak(  # type: ignore[index]
            completion_days(habit.id, completions=completions), today  # type: ignore[arg-type]
        )

    return FeedItem(
        id=completion.id,  # type: ignore[arg-type]
        user=actor,
        habit=habit,
        completed_on=completion.completed_on,
        completed_at=completion.completed_at,
        streak=streaks[habit.id],  # type: ignore[index]
        supported=completion.id in supported,
        time_ago=relative_time_label(completion.completed_at, now),
    )


__all__ = ["DEFAULT_FEED_LIMIT", "FeedItem", "build_feed", "relative_time_label"]
