"""The habit tracker facade: every operation a caller (HTTP layer, CLI) needs.

Identity is assumed verified by the caller; ownership of habits is checked
here. Derived values (streaks, rates, feed) are recomputed on every call.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from .context import AppContext
from .models.habit import Completion, Habit
from .models.social import FollowEdge, SupportMark
from .models.user import PublicUser, User
from .services import feed, habits, social, stats, support, users
from .services.feed import FeedItem
from .services.habits import HabitDetail, HabitStatus, HabitUpdate, ToggleResult
from .services.stats import HabitOverview, UserStats


class HabitTracker:
    """Binds the services to one set of repositories and configured policies."""

    def __init__(self, context: AppContext):
        self.context = context
        self.config = context.config

    # Users
    def create_user(
        self, username: str, password: str, display_name: str, avatar: Optional[str] = None
    ) -> User:
        return users.create_user(
            username=username,
            password=password,
            display_name=display_name,
            avatar=avatar,
            users=self.context.users,
        )

    def get_user(self, user_id: int) -> PublicUser:
        return PublicUser.from_user(users.get_user(user_id, users=self.context.users))

    def get_user_by_username(self, username: str) -> PublicUser:
        return PublicUser.from_user(users.get_user_by_username(username, users=self.context.users))

    def discover_users(self, viewer_id: int) -> list[PublicUser]:
        return users.discover_users(viewer_id, users=self.context.users)

    # Habits
    def create_habit(self, user_id: int, title: str, description: Optional[str] = None) -> Habit:
        return habits.create_habit(
            user_id, title, description, users=self.context.users, habits=self.context.habits
        )

    def update_habit(self, habit_id: int, user_id: int, changes: HabitUpdate) -> Habit:
        return habits.update_habit(habit_id, user_id, changes, habits=self.context.habits)

    def delete_habit(self, habit_id: int, user_id: int) -> None:
        habits.delete_habit(habit_id, user_id, habits=self.context.habits)

    def get_habits_with_status(self, user_id: int, today: Optional[date] = None) -> list[HabitStatus]:
        return habits.get_habits_with_status(
            user_id,
            today or date.today(),
            habits=self.context.habits,
            completions=self.context.completions,
        )

    def get_habit_detail(self, habit_id: int, user_id: int, today: Optional[date] = None) -> HabitDetail:
        return habits.get_habit_detail(
            habit_id,
            user_id,
            today or date.today(),
            habits=self.context.habits,
            completions=self.context.completions,
        )

    # Completions
    def toggle_completion(
        self,
        habit_id: int,
        user_id: int,
        day: date | str,
        today: Optional[date] = None,
        now: Optional[datetime] = None,
    ) -> ToggleResult:
        return habits.toggle_completion(
            habit_id,
            user_id,
            day,
            habits=self.context.habits,
            completions=self.context.completions,
            today=today,
            now=now,
        )

    def complete_habit(
        self, habit_id: int, user_id: int, day: date | str, now: Optional[datetime] = None
    ) -> Completion:
        return habits.complete_habit(
            habit_id,
            user_id,
            day,
            habits=self.context.habits,
            completions=self.context.completions,
            now=now,
        )

    def uncomplete_habit(self, habit_id: int, user_id: int, day: date | str) -> bool:
        return habits.uncomplete_habit(
            habit_id, user_id, day, habits=self.context.habits, completions=self.context.completions
        )

    # Statistics
    def get_user_stats(self, user_id: int, today: Optional[date] = None) -> UserStats:
        return stats.get_user_stats(
            user_id,
            today or date.today(),
            habits=self.context.habits,
            completions=self.context.completions,
        )

    def get_user_completion_rate(
        self, user_id: int, days: Optional[int] = None, today: Optional[date] = None
    ) -> float:
        return stats.get_user_completion_rate(
            user_id,
            self.config.STATS_WINDOW_DAYS if days is None else days,
            today or date.today(),
            habits=self.context.habits,
            completions=self.context.completions,
        )

    def get_habit_overview(
        self, user_id: int, days: Optional[int] = None, today: Optional[date] = None
    ) -> HabitOverview:
        return stats.get_habit_overview(
            user_id,
            today or date.today(),
            days=self.config.STATS_WINDOW_DAYS if days is None else days,
            habits=self.context.habits,
            completions=self.context.completions,
        )

    # Social
    def get_activity_feed(
        self,
        user_id: int,
        limit: Optional[int] = None,
        now: Optional[datetime] = None,
        today: Optional[date] = None,
    ) -> list[FeedItem]:
        return feed.build_feed(
            user_id,
            users=self.context.users,
            habits=self.context.habits,
            completions=self.context.completions,
            follows=self.context.follows,
            supports=self.context.supports,
            limit=self.config.FEED_LIMIT if limit is None else limit,
            include_self=self.config.FEED_INCLUDE_SELF,
            now=now,
            today=today,
        )

    def follow(self, follower_id: int, following_id: int) -> FollowEdge:
        return social.follow(
            follower_id,
            following_id,
            users=self.context.users,
            follows=self.context.follows,
            policy=self.config.FOLLOW_POLICY,
        )

    def unfollow(self, follower_id: int, following_id: int) -> None:
        social.unfollow(follower_id, following_id, follows=self.context.follows)

    def get_followers(self, user_id: int) -> list[PublicUser]:
        return social.followers(user_id, users=self.context.users, follows=self.context.follows)

    def get_following(self, user_id: int) -> list[PublicUser]:
        return social.following(user_id, users=self.context.users, follows=self.context.follows)

    def support_completion(self, user_id: int, completion_id: int) -> SupportMark:
        return support.support_completion(
            user_id,
            completion_id,
            completions=self.context.completions,
            supports=self.context.supports,
        )

    def unsupport_completion(self, user_id: int, completion_id: int) -> None:
        support.unsupport_completion(user_id, completion_id, supports=self.context.supports)


__all__ = ["HabitTracker"]
