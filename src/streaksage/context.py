"""Application context for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from sqlalchemy.engine import Engine

from .config import BaseConfig
from .domain.repositories import (
    CompletionRepository,
    FollowRepository,
    HabitRepository,
    SupportRepository,
    UserRepository,
)
from .infra.database import SessionFactory, bootstrap_database
from .infra.repositories import (
    InMemoryCompletionRepository,
    InMemoryFollowRepository,
    InMemoryHabitRepository,
    InMemoryStore,
    InMemorySupportRepository,
    InMemoryUserRepository,
    SQLModelCompletionRepository,
    SQLModelFollowRepository,
    SQLModelHabitRepository,
    SQLModelSupportRepository,
    SQLModelUserRepository,
)
from .logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class AppContext:
    """Configuration plus one repository per entity, whatever the backing."""

    config: BaseConfig

    users: UserRepository
    habits: HabitRepository
    completions: CompletionRepository
    follows: FollowRepository
    supports: SupportRepository

    # Only set for the SQL backing
    engine: Optional[Engine] = None
    session_factory: Optional[SessionFactory] = None


def create_app_context(config: Optional[BaseConfig] = None) -> AppContext:
    """Create a context backed by the configured SQL database."""

    if config is None:
        config = BaseConfig()

    engine, session_factory = bootstrap_database(config)
    logger.info("Database ready", extra={"database_url": engine.url.render_as_string()})

    return AppContext(
        config=config,
        users=SQLModelUserRepository(session_factory),
        habits=SQLModelHabitRepository(session_factory),
        completions=SQLModelCompletionRepository(session_factory),
        follows=SQLModelFollowRepository(session_factory),
        supports=SQLModelSupportRepository(session_factory),
        engine=engine,
        session_factory=session_factory,
    )


def create_memory_context(
    config: Optional[BaseConfig] = None, store: Optional[InMemoryStore] = None
) -> AppContext:
    """Create a context backed by process-local dictionaries."""

    store = store or InMemoryStore()
    return AppContext(
        config=config or BaseConfig(),
        users=InMemoryUserRepository(store),
        habits=InMemoryHabitRepository(store),
        completions=InMemoryCompletionRepository(store),
        follows=InMemoryFollowRepository(store),
        supports=InMemorySupportRepository(store),
    )
