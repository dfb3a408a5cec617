"""Repository protocol definitions for domain layer."""

from .completion import CompletionRepository
from .habit import HabitRepository
from .social import FollowRepository, SupportRepository
from .user import UserRepository

__all__ = [
    "CompletionRepository",
    "FollowRepository",
    "HabitRepository",
    "SupportRepository",
    "UserRepository",
]
