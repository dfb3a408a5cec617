"""Exceptions surfaced by the habit engine."""

from __future__ import annotations


class StreakSageError(Exception):
    """Base class for every error the engine raises on purpose."""


class NotFound(StreakSageError):
    """A habit, user, completion, follow edge or support mark is absent."""


class Forbidden(StreakSageError):
    """The acting user does not own the target habit."""


class Conflict(StreakSageError):
    """The write would duplicate a unique record."""


class DuplicateEdge(Conflict):
    """The follower already follows the target user."""


class ValidationError(StreakSageError, ValueError):
    """Malformed caller input (empty title, bad date, bad limit)."""


class InvalidEdge(ValidationError):
    """A user attempted to follow themselves."""


__all__ = [
    "Conflict",
    "DuplicateEdge",
    "Forbidden",
    "InvalidEdge",
    "NotFound",
    "StreakSageError",
    "ValidationError",
]
