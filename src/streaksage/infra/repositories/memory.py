"""In-memory repository implementations for tests and demos.

All repositories built from one ``InMemoryStore`` share its tables. Identifiers
come from per-store counters, so two stores never interfere. Completion writes
take the lock stripe of their (habit, day) so check-then-act sequences are
atomic. Rows go in and come out as copies, as detached rows do from the SQL
repositories.
"""

from __future__ import annotations

import itertools
import threading
from collections import defaultdict
from datetime import date, datetime
from typing import Iterator, Optional, TypeVar

from sqlmodel import SQLModel

from ...errors import Conflict, DuplicateEdge
from ...models.habit import Completion, Habit
from ...models.social import FollowEdge, SupportMark
from ...models.user import User

DAY_LOCK_STRIPES = 64

RowT = TypeVar("RowT", bound=SQLModel)


def _detached(row: RowT) -> RowT:
    return type(row)(**row.model_dump())


def _maybe_detached(row: Optional[RowT]) -> Optional[RowT]:
    return None if row is None else _detached(row)


class InMemoryStore:
    """Shared tables and id sequences for the in-memory repositories."""

    def __init__(self) -> None:
        self.users: dict[int, User] = {}
        self.habits: dict[int, Habit] = {}
        self.completions: dict[int, Completion] = {}
        self.follows: dict[int, FollowEdge] = {}
        self.supports: dict[int, SupportMark] = {}
        self._sequences: dict[str, Iterator[int]] = defaultdict(lambda: itertools.count(1))
        self._lock = threading.RLock()
        self._day_locks = [threading.Lock() for _ in range(DAY_LOCK_STRIPES)]

    def next_id(self, table: str) -> int:
        with self._lock:
            return next(self._sequences[table])

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    def day_lock(self, habit_id: int, completed_on: date) -> threading.Lock:
        """Lock guarding writes to one habit's completion on one day.

        Keys share a fixed pool of stripes; a writer holds one stripe at a time.
        """
        return self._day_locks[hash((habit_id, completed_on)) % DAY_LOCK_STRIPES]

    def drop_supports_for(self, completion_ids: set[int]) -> None:
        with self._lock:
            for mark_id in [m.id for m in self.supports.values() if m.completion_id in completion_ids]:
                del self.supports[mark_id]  # type: ignore[arg-type]


class InMemoryUserRepository:
    def __init__(self, store: InMemoryStore):
        self.store = store

    def _find(self, username: str) -> Optional[User]:
        return next((u for u in list(self.store.users.values()) if u.username == username), None)

    def get_by_id(self, user_id: int) -> Optional[User]:
        return _maybe_detached(self.store.users.get(user_id))

    def get_by_username(self, username: str) -> Optional[User]:
        return _maybe_detached(self._find(username))

    def list_all(self) -> list[User]:
        rows = sorted(self.store.users.values(), key=lambda u: (u.created_at, u.id))
        return [_detached(u) for u in rows]

    def create(self, user: User) -> User:
        with self.store.lock:
            if self._find(user.username) is not None:
                raise Conflict(f"Username {user.username!r} already exists")
            user.id = self.store.next_id("user")
            self.store.users[user.id] = _detached(user)
            return user


class InMemoryHabitRepository:
    def __init__(self, store: InMemoryStore):
        self.store = store

    def get_by_id(self, habit_id: int) -> Optional[Habit]:
        return _maybe_detached(self.store.habits.get(habit_id))

    def list_for_user(self, user_id: int, include_inactive: bool = True) -> list[Habit]:
        rows = sorted(
            (
                h
                for h in list(self.store.habits.values())
                if h.user_id == user_id and (include_inactive or h.is_active)
            ),
            key=lambda h: h.id,
        )
        return [_detached(h) for h in rows]

    def create(self, habit: Habit) -> Habit:
        habit.id = self.store.next_id("habit")
        with self.store.lock:
            self.store.habits[habit.id] = _detached(habit)
        return habit

    def update(self, habit: Habit) -> Habit:
        with self.store.lock:
            self.store.habits[habit.id] = _detached(habit)  # type: ignore[index]
        return _detached(habit)

    def delete(self, habit_id: int) -> None:
        with self.store.lock:
            if self.store.habits.pop(habit_id, None) is None:
                return
            doomed = {cid for cid, c in self.store.completions.items() if c.habit_id == habit_id}
            self.store.drop_supports_for(doomed)
            for completion_id in doomed:
                del self.store.completions[completion_id]


class InMemoryCompletionRepository:
    def __init__(self, store: InMemoryStore):
        self.store = store

    def _find(self, habit_id: int, completed_on: date) -> Optional[Completion]:
        return next(
            (
                c
                for c in list(self.store.completions.values())
                if c.habit_id == habit_id and c.completed_on == completed_on
            ),
            None,
        )

    def get_by_id(self, completion_id: int) -> Optional[Completion]:
        return _maybe_detached(self.store.completions.get(completion_id))

    def get(self, habit_id: int, completed_on: date) -> Optional[Completion]:
        return _maybe_detached(self._find(habit_id, completed_on))

    def list_for_habit(self, habit_id: int) -> list[Completion]:
        rows = [c for c in list(self.store.completions.values()) if c.habit_id == habit_id]
        return [_detached(c) for c in sorted(rows, key=lambda c: c.completed_on)]

    def list_for_user(
        self, user_id: int, start_date: date | None = None, end_date: date | None = None
    ) -> list[Completion]:
        rows = [
            c
            for c in list(self.store.completions.values())
            if c.user_id == user_id
            and (start_date is None or c.completed_on >= start_date)
            and (end_date is None or c.completed_on <= end_date)
        ]
        return [_detached(c) for c in sorted(rows, key=lambda c: (c.completed_on, c.id))]

    def add(self, habit_id: int, user_id: int, completed_on: date, completed_at: datetime) -> Completion:
        with self.store.day_lock(habit_id, completed_on):
            existing = self.get(habit_id, completed_on)
            if existing is not None:
                return existing
            return self._insert(habit_id, user_id, completed_on, completed_at)

    def remove(self, habit_id: int, completed_on: date) -> bool:
        with self.store.day_lock(habit_id, completed_on):
            existing = self._find(habit_id, completed_on)
            if existing is None:
                return False
            self._delete(existing)
            return True

    def toggle(self, habit_id: int, user_id: int, completed_on: date, completed_at: datetime) -> bool:
        with self.store.day_lock(habit_id, completed_on):
            existing = self._find(habit_id, completed_on)
            if existing is not None:
                self._delete(existing)
                return False
            self._insert(habit_id, user_id, completed_on, completed_at)
            return True

    def _insert(self, habit_id: int, user_id: int, completed_on: date, completed_at: datetime) -> Completion:
        completion = Completion(
            id=self.store.next_id("completion"),
            habit_id=habit_id,
            user_id=user_id,
            completed_on=completed_on,
            completed_at=completed_at,
        )
        with self.store.lock:
            self.store.completions[completion.id] = _detached(completion)  # type: ignore[index]
        return completion

    def _delete(self, completion: Completion) -> None:
        with self.store.lock:
            self.store.drop_supports_for({completion.id})  # type: ignore[arg-type]
            self.store.completions.pop(completion.id, None)  # type: ignore[arg-type]


class InMemoryFollowRepository:
    def __init__(self, store: InMemoryStore):
        self.store = store

    def _find(self, follower_id: int, following_id: int) -> Optional[FollowEdge]:
        return next(
            (
                e
                for e in list(self.store.follows.values())
                if e.follower_id == follower_id and e.following_id == following_id
            ),
            None,
        )

    def get(self, follower_id: int, following_id: int) -> Optional[FollowEdge]:
        return _maybe_detached(self._find(follower_id, following_id))

    def create(self, edge: FollowEdge) -> FollowEdge:
        with self.store.lock:
            if self._find(edge.follower_id, edge.following_id) is not None:
                raise DuplicateEdge(
                    f"User {edge.follower_id} already follows user {edge.following_id}"
                )
            edge.id = self.store.next_id("follow_edge")
            self.store.follows[edge.id] = _detached(edge)
            return edge

    def delete(self, edge_id: int) -> None:
        with self.store.lock:
            self.store.follows.pop(edge_id, None)

    def following_ids(self, user_id: int) -> list[int]:
        edges = sorted(list(self.store.follows.values()), key=lambda e: e.id)
        return [e.following_id for e in edges if e.follower_id == user_id]

    def follower_ids(self, user_id: int) -> list[int]:
        edges = sorted(list(self.store.follows.values()), key=lambda e: e.id)
        return [e.follower_id for e in edges if e.following_id == user_id]


class InMemorySupportRepository:
    def __init__(self, store: InMemoryStore):
        self.store = store

    def _find(self, from_user_id: int, completion_id: int) -> Optional[SupportMark]:
        return next(
            (
                m
                for m in list(self.store.supports.values())
                if m.from_user_id == from_user_id and m.completion_id == completion_id
            ),
            None,
        )

    def get(self, from_user_id: int, completion_id: int) -> Optional[SupportMark]:
        return _maybe_detached(self._find(from_user_id, completion_id))

    def create(self, mark: SupportMark) -> SupportMark:
        with self.store.lock:
            if self._find(mark.from_user_id, mark.completion_id) is not None:
                raise Conflict(
                    f"User {mark.from_user_id} already supports completion {mark.completion_id}"
                )
            mark.id = self.store.next_id("support_mark")
            self.store.supports[mark.id] = _detached(mark)
            return mark

    def delete(self, mark_id: int) -> None:
        with self.store.lock:
            self.store.supports.pop(mark_id, None)

    def supported_completion_ids(self, from_user_id: int) -> set[int]:
        return {
            m.completion_id
            for m in list(self.store.supports.values())
            if m.from_user_id == from_user_id
        }


__all__ = [
    "DAY_LOCK_STRIPES",
    "InMemoryCompletionRepository",
    "InMemoryFollowRepository",
    "InMemoryHabitRepository",
    "InMemoryStore",
    "InMemorySupportRepository",
    "InMemoryUserRepository",
]
