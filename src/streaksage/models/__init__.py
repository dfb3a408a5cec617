"""SQLModel table exports."""

from .habit import Completion, Habit
from .social import FollowEdge, SupportMark
from .user import PublicUser, User

__all__ = [
    "Completion",
    "FollowEdge",
    "Habit",
    "PublicUser",
    "SupportMark",
    "User",
]
