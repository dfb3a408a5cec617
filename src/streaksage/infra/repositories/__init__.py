"""Concrete repository implementations (SQLModel and in-memory)."""

from .completion import SQLModelCompletionRepository
from .habit import SQLModelHabitRepository
from .memory import (
    DAY_LOCK_STRIPES,
    InMemoryCompletionRepository,
    InMemoryFollowRepository,
    InMemoryHabitRepository,
    InMemoryStore,
    InMemorySupportRepository,
    InMemoryUserRepository,
)
from .social import SQLModelFollowRepository, SQLModelSupportRepository
from .user import SQLModelUserRepository

__all__ = [
    "DAY_LOCK_STRIPES",
    "InMemoryCompletionRepository",
    "InMemoryFollowRepository",
    "InMemoryHabitRepository",
    "InMemoryStore",
    "InMemorySupportRepository",
    "InMemoryUserRepository",
    "SQLModelCompletionRepository",
    "SQLModelFollowRepository",
    "SQLModelHabitRepository",
    "SQLModelSupportRepository",
    "SQLModelUserRepository",
]
