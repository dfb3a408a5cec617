"""End-to-end tests of the tracker operations on both repository backings."""

from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from streaksage.errors import Conflict, Forbidden, NotFound, ValidationError
from streaksage.services.habits import HabitUpdate

TODAY = date(2024, 1, 10)
NOW = datetime(2024, 1, 10, 20, 0, 0)


def back(*offsets: int) -> list[date]:
    return [TODAY - timedelta(days=o) for o in offsets]


class TestHabits:
    def test_create_habit_strips_title(self, tracker, user_factory):
        owner = user_factory()
        habit = tracker.create_habit(owner.id, "  Meditate  ", "10 minutes")

        assert habit.id is not None
        assert habit.title == "Meditate"
        assert habit.description == "10 minutes"
        assert habit.is_active is True

    @pytest.mark.parametrize("title", ["", "   ", "x" * 81])
    def test_create_habit_rejects_bad_title(self, tracker, user_factory, title):
        with pytest.raises(ValidationError):
            tracker.create_habit(user_factory().id, title)

    def test_create_habit_for_unknown_user(self, tracker):
        with pytest.raises(NotFound):
            tracker.create_habit(424242, "Orphan")

    def test_update_habit_fields(self, tracker, habit_factory):
        habit = habit_factory("Read", description="Books")

        updated = tracker.update_habit(
            habit.id, habit.user_id, HabitUpdate(title="Read more", is_active=False)
        )

        assert updated.title == "Read more"
        assert updated.description == "Books"
        assert updated.is_active is False

    def test_update_habit_clears_description(self, tracker, habit_factory):
        habit = habit_factory(description="Something")
        updated = tracker.update_habit(habit.id, habit.user_id, HabitUpdate(description=""))
        assert updated.description is None

    def test_invalid_update_leaves_habit_untouched(self, tracker, habit_factory):
        habit = habit_factory("Read")

        with pytest.raises(ValidationError):
            tracker.update_habit(
                habit.id, habit.user_id, HabitUpdate(title="Write", description="x" * 256)
            )

        assert tracker.context.habits.get_by_id(habit.id).title == "Read"

    def test_update_requires_owner(self, tracker, habit_factory, user_factory):
        habit = habit_factory()
        with pytest.raises(Forbidden):
            tracker.update_habit(habit.id, user_factory().id, HabitUpdate(title="Mine now"))

    def test_delete_habit_cascades_completions(self, tracker, habit_factory, complete_days):
        habit = habit_factory()
        complete_days(habit, back(0, 1))

        tracker.delete_habit(habit.id, habit.user_id)

        assert tracker.context.habits.get_by_id(habit.id) is None
        assert tracker.context.completions.list_for_habit(habit.id) == []
        assert tracker.context.completions.list_for_user(habit.user_id) == []

    def test_returned_habit_is_detached(self, tracker, habit_factory):
        habit = habit_factory("Read")

        fetched = tracker.context.habits.get_by_id(habit.id)
        fetched.title = "Edited in place"
        tracker.context.habits.list_for_user(habit.user_id)[0].is_active = False

        stored = tracker.context.habits.get_by_id(habit.id)
        assert stored.title == "Read"
        assert stored.is_active is True

    def test_delete_requires_owner(self, tracker, habit_factory, user_factory):
        habit = habit_factory()
        with pytest.raises(Forbidden):
            tracker.delete_habit(habit.id, user_factory().id)
        with pytest.raises(NotFound):
            tracker.delete_habit(999, habit.user_id)


class TestCompletions:
    def test_toggle_twice_round_trips(self, tracker, habit_factory):
        habit = habit_factory()

        first = tracker.toggle_completion(habit.id, habit.user_id, TODAY, today=TODAY, now=NOW)
        second = tracker.toggle_completion(habit.id, habit.user_id, TODAY, today=TODAY, now=NOW)

        assert (first.completed, first.streak) == (True, 1)
        assert (second.completed, second.streak) == (False, 0)
        assert tracker.context.completions.get(habit.id, TODAY) is None

    def test_toggle_accepts_iso_string(self, tracker, habit_factory):
        habit = habit_factory()
        result = tracker.toggle_completion(habit.id, habit.user_id, "2024-01-10", today=TODAY)
        assert result.completed is True
        assert tracker.context.completions.get(habit.id, TODAY) is not None

    @pytest.mark.parametrize("bad", ["2024-13-01", "10/01/2024", "", "yesterday", 20240110])
    def test_toggle_rejects_malformed_date(self, tracker, habit_factory, bad):
        habit = habit_factory()
        with pytest.raises(ValidationError):
            tracker.toggle_completion(habit.id, habit.user_id, bad, today=TODAY)

    def test_toggle_streak_extends_chain(self, tracker, habit_factory, complete_days):
        habit = habit_factory()
        complete_days(habit, back(1, 2, 3))

        result = tracker.toggle_completion(habit.id, habit.user_id, TODAY, today=TODAY, now=NOW)

        assert result.streak == 4

    def test_toggle_requires_owner(self, tracker, habit_factory, user_factory):
        habit = habit_factory()
        intruder = user_factory()
        with pytest.raises(Forbidden):
            tracker.toggle_completion(habit.id, intruder.id, TODAY, today=TODAY)
        assert tracker.context.completions.get(habit.id, TODAY) is None

    def test_toggle_unknown_habit(self, tracker, user_factory):
        with pytest.raises(NotFound):
            tracker.toggle_completion(12345, user_factory().id, TODAY, today=TODAY)

    def test_complete_is_idempotent(self, tracker, habit_factory):
        habit = habit_factory()

        first = tracker.complete_habit(habit.id, habit.user_id, TODAY, now=NOW)
        again = tracker.complete_habit(habit.id, habit.user_id, TODAY, now=NOW + timedelta(hours=1))

        assert first.id == again.id
        assert len(tracker.context.completions.list_for_habit(habit.id)) == 1

    def test_uncomplete(self, tracker, habit_factory):
        habit = habit_factory()
        tracker.complete_habit(habit.id, habit.user_id, TODAY, now=NOW)

        assert tracker.uncomplete_habit(habit.id, habit.user_id, TODAY) is True
        assert tracker.uncomplete_habit(habit.id, habit.user_id, TODAY) is False

    def test_completion_records_owner(self, tracker, habit_factory):
        habit = habit_factory()
        completion = tracker.complete_habit(habit.id, habit.user_id, TODAY, now=NOW)
        assert completion.user_id == habit.user_id
        assert completion.completed_on == TODAY
        assert completion.completed_at == NOW


class TestStatusAndDetail:
    def test_habits_with_status(self, tracker, user_factory, habit_factory, complete_days):
        owner = user_factory()
        done = habit_factory("Done", owner=owner)
        pending = habit_factory("Pending", owner=owner)
        complete_days(done, back(0, 1, 2))
        complete_days(pending, back(1))

        statuses = tracker.get_habits_with_status(owner.id, TODAY)

        assert [(s.habit.title, s.is_completed, s.streak) for s in statuses] == [
            ("Done", True, 3),
            ("Pending", False, 1),
        ]

    def test_habits_with_status_empty(self, tracker, user_factory):
        assert tracker.get_habits_with_status(user_factory().id, TODAY) == []

    def test_habit_detail(self, tracker, habit_factory, complete_days):
        habit = habit_factory()
        complete_days(habit, back(0, 3, 4, 5, 6))

        detail = tracker.get_habit_detail(habit.id, habit.user_id, TODAY)

        assert detail.streak == 1
        assert detail.longest_streak == 4
        assert [c.completed_on for c in detail.completions] == back(0, 3, 4, 5, 6)

    def test_habit_detail_requires_owner(self, tracker, habit_factory, user_factory):
        habit = habit_factory()
        with pytest.raises(Forbidden):
            tracker.get_habit_detail(habit.id, user_factory().id, TODAY)


class TestStats:
    def test_user_stats(self, tracker, user_factory, habit_factory, complete_days):
        owner = user_factory()
        a = habit_factory("A", owner=owner)
        b = habit_factory("B", owner=owner)
        habit_factory("C", owner=owner)
        complete_days(a, back(0, 1, 2, 3))
        complete_days(b, back(0, 5))

        stats = tracker.get_user_stats(owner.id, TODAY)

        assert stats.current_streak == 4
        assert stats.today_completed == 2
        assert stats.today_total == 3
        assert stats.today_completion_rate == round(2 / 3 * 100, 2)
        # Jan 10: days 5,7,8,9,10 had something done
        assert stats.monthly_completed_days == 5
        assert stats.monthly_total_days == 10
        assert stats.monthly_completion_rate == 50.0

    def test_user_stats_no_habits(self, tracker, user_factory):
        stats = tracker.get_user_stats(user_factory().id, TODAY)

        assert stats.current_streak == 0
        assert stats.today_completion_rate == 0.0
        assert (stats.today_completed, stats.today_total) == (0, 0)
        assert stats.monthly_completion_rate == 0.0
        assert stats.monthly_completed_days == 0

    def test_paused_habits_not_expected_today(self, tracker, user_factory, habit_factory, complete_days):
        owner = user_factory()
        active = habit_factory("Active", owner=owner)
        paused = habit_factory("Paused", owner=owner)
        tracker.update_habit(paused.id, owner.id, HabitUpdate(is_active=False))
        complete_days(active, back(0))

        stats = tracker.get_user_stats(owner.id, TODAY)

        assert (stats.today_completed, stats.today_total) == (1, 1)
        assert stats.today_completion_rate == 100.0

    def test_completion_rate_over_window(self, tracker, user_factory, habit_factory, complete_days):
        owner = user_factory()
        a = habit_factory("A", owner=owner)
        habit_factory("B", owner=owner)
        complete_days(a, back(0, 1, 2, 3, 4, 5, 6, 7))

        # 7 hits out of 2 habits x 7 days
        assert tracker.get_user_completion_rate(owner.id, 7, TODAY) == 50.0
        assert tracker.get_user_completion_rate(owner.id, 1, TODAY) == 50.0

    def test_completion_rate_uses_configured_window(self, tracker, habit_factory, complete_days):
        tracker.config.STATS_WINDOW_DAYS = 2
        habit = habit_factory()
        complete_days(habit, back(0))
        assert tracker.get_user_completion_rate(habit.user_id, today=TODAY) == 50.0

    def test_completion_rate_no_habits(self, tracker, user_factory):
        assert tracker.get_user_completion_rate(user_factory().id, 7, TODAY) == 0.0

    @pytest.mark.parametrize("days", [0, -1])
    def test_completion_rate_rejects_bad_window(self, tracker, habit_factory, days):
        habit = habit_factory()
        with pytest.raises(ValidationError):
            tracker.get_user_completion_rate(habit.user_id, days, TODAY)

    def test_overview_rejects_empty_window(self, tracker, habit_factory):
        habit = habit_factory()
        with pytest.raises(ValidationError):
            tracker.get_habit_overview(habit.user_id, days=0, today=TODAY)

    def test_habit_overview(self, tracker, user_factory, habit_factory, complete_days):
        owner = user_factory()
        short = habit_factory("Short", owner=owner)
        long_ = habit_factory("Long", owner=owner)
        paused = habit_factory("Paused", owner=owner)
        tracker.update_habit(paused.id, owner.id, HabitUpdate(is_active=False))
        complete_days(short, back(0))
        complete_days(long_, back(20, 21, 22))

        overview = tracker.get_habit_overview(owner.id, days=7, today=TODAY)

        assert overview.longest_streak_habit.title == "Long"
        assert overview.longest_streak == 3
        assert (overview.active, overview.paused, overview.total) == (2, 1, 3)
        assert overview.completion_rate == round(1 / 14 * 100, 2)

    def test_habit_overview_empty(self, tracker, user_factory):
        overview = tracker.get_habit_overview(user_factory().id, days=7, today=TODAY)
        assert overview.longest_streak_habit is None
        assert overview.longest_streak == 0
        assert overview.completion_rate == 0.0


class TestSupport:
    def test_support_and_unsupport(self, tracker, habit_factory, user_factory):
        habit = habit_factory()
        fan = user_factory()
        completion = tracker.complete_habit(habit.id, habit.user_id, TODAY, now=NOW)

        mark = tracker.support_completion(fan.id, completion.id)
        assert mark.id is not None
        with pytest.raises(Conflict):
            tracker.support_completion(fan.id, completion.id)

        tracker.unsupport_completion(fan.id, completion.id)
        with pytest.raises(NotFound):
            tracker.unsupport_completion(fan.id, completion.id)

    def test_support_missing_completion(self, tracker, user_factory):
        with pytest.raises(NotFound):
            tracker.support_completion(user_factory().id, 777)

    def test_uncompleting_removes_support(self, tracker, habit_factory, user_factory):
        habit = habit_factory()
        fan = user_factory()
        completion = tracker.complete_habit(habit.id, habit.user_id, TODAY, now=NOW)
        tracker.support_completion(fan.id, completion.id)

        tracker.uncomplete_habit(habit.id, habit.user_id, TODAY)

        assert tracker.context.supports.supported_completion_ids(fan.id) == set()


class TestUsers:
    def test_create_user_hashes_password(self, tracker):
        user = tracker.create_user("dana", "hunter2", "Dana")
        assert user.password_hash != "hunter2"
        assert user.password_hash.startswith("$argon2")

    def test_duplicate_username(self, tracker, user_factory):
        user_factory("dana")
        with pytest.raises(Conflict):
            tracker.create_user("dana", "pw", "Dana Two")

    @pytest.mark.parametrize(
        "username,password,display_name",
        [("", "pw", "Name"), ("name", "", "Name"), ("name", "pw", "  ")],
    )
    def test_create_user_validation(self, tracker, username, password, display_name):
        with pytest.raises(ValidationError):
            tracker.create_user(username, password, display_name)

    def test_lookup(self, tracker, user_factory):
        created = user_factory("erin", "Erin E")
        assert tracker.get_user(created.id).username == "erin"
        assert tracker.get_user_by_username("erin").display_name == "Erin E"
        with pytest.raises(NotFound):
            tracker.get_user_by_username("nobody")
        with pytest.raises(NotFound):
            tracker.get_user(31337)
