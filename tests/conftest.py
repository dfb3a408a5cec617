"""Pytest configuration and shared fixtures for StreakSage tests.

Provides a throwaway SQLite database, repository contexts for both backings,
and factories for users, habits and completions.
"""

from __future__ import annotations

import os
import tempfile
from datetime import date, datetime, timedelta
from pathlib import Path

import pytest

# Keep BaseConfig from creating ./instance while tests run
os.environ.setdefault("STREAKSAGE_DATA_DIR", tempfile.mkdtemp(prefix="streaksage-tests-"))

from sqlmodel import SQLModel  # noqa: E402

from streaksage.config import TestConfig  # noqa: E402
from streaksage.context import AppContext, create_memory_context  # noqa: E402
from streaksage.infra.database import create_db_engine, create_session_factory  # noqa: E402
from streaksage.infra.repositories import (  # noqa: E402
    SQLModelCompletionRepository,
    SQLModelFollowRepository,
    SQLModelHabitRepository,
    SQLModelSupportRepository,
    SQLModelUserRepository,
)
from streaksage.models import Habit, User  # noqa: E402
from streaksage.tracker import HabitTracker  # noqa: E402

# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture
def test_config(tmp_path) -> TestConfig:
    """Configuration pointing at a per-test data directory."""
    config = TestConfig()
    config.DATA_DIR = tmp_path
    config.FOLLOW_POLICY = "reject"
    config.FEED_INCLUDE_SELF = False
    config.FEED_LIMIT = 10
    return config


@pytest.fixture(scope="function")
def db_engine(test_config):
    """Create an isolated SQLite database file for each test.

    Yields:
        Engine: engine with every table created and foreign keys enforced
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    test_config.DATABASE_URL = f"sqlite:///{db_path}"
    engine = create_db_engine(test_config)
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Committing session factory, as used by the SQLModel repositories."""
    return create_session_factory(db_engine)


@pytest.fixture
def sql_context(test_config, db_engine, session_factory) -> AppContext:
    return AppContext(
        config=test_config,
        users=SQLModelUserRepository(session_factory),
        habits=SQLModelHabitRepository(session_factory),
        completions=SQLModelCompletionRepository(session_factory),
        follows=SQLModelFollowRepository(session_factory),
        supports=SQLModelSupportRepository(session_factory),
        engine=db_engine,
        session_factory=session_factory,
    )


@pytest.fixture
def memory_context(test_config) -> AppContext:
    return create_memory_context(test_config)


@pytest.fixture(params=["memory", "sql"])
def context(request) -> AppContext:
    """Run the test once per repository backing."""
    return request.getfixturevalue(f"{request.param}_context")


@pytest.fixture
def tracker(context) -> HabitTracker:
    return HabitTracker(context)


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def user_factory(tracker):
    """Factory for creating users through the tracker."""

    counter = {"n": 0}

    def _create_user(username: str | None = None, display_name: str | None = None) -> User:
        counter["n"] += 1
        username = username or f"user{counter['n']}"
        return tracker.create_user(username, "secret-pass", display_name or username.title())

    return _create_user


@pytest.fixture
def habit_factory(tracker, user_factory):
    """Factory for creating habits, with an owner created on demand."""

    def _create_habit(
        title: str = "Test Habit",
        owner: User | None = None,
        description: str | None = None,
    ) -> Habit:
        owner = owner or user_factory()
        return tracker.create_habit(owner.id, title, description)

    return _create_habit


@pytest.fixture
def complete_days(tracker):
    """Record completions of ``habit`` on each given day."""

    def _complete(habit: Habit, days: list[date], at: datetime | None = None) -> None:
        for day in days:
            stamp = at or datetime.combine(day, datetime.min.time()) + timedelta(hours=8)
            tracker.complete_habit(habit.id, habit.user_id, day, now=stamp)

    return _complete
