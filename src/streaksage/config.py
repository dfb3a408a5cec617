"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from sqlalchemy.pool import StaticPool

load_dotenv()

FOLLOW_POLICIES = {"reject", "ignore"}


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    """Read a positive integer from the environment."""

    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        parsed = int(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {value!r}") from exc
    if parsed < 1:
        raise ValueError(f"{name} must be >= 1, got {parsed}")
    return parsed


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "StreakSage"
    DB_FILENAME = "streaksage.db"

    def __init__(self) -> None:
        self.DATA_DIR = self._resolve_data_dir()
        self.DEV_MODE = _env_bool("STREAKSAGE_DEV_MODE", default=True)
        self.DATABASE_URL = os.getenv("STREAKSAGE_DATABASE_URL", self._build_sqlite_url())
        self.FEED_LIMIT = _env_int("STREAKSAGE_FEED_LIMIT", 10)
        self.FEED_INCLUDE_SELF = _env_bool("STREAKSAGE_FEED_INCLUDE_SELF", default=False)
        self.STATS_WINDOW_DAYS = _env_int("STREAKSAGE_STATS_WINDOW_DAYS", 7)
        self.FOLLOW_POLICY = os.getenv("STREAKSAGE_FOLLOW_POLICY", "reject").strip().lower()
        if self.FOLLOW_POLICY not in FOLLOW_POLICIES:
            raise ValueError(
                f"STREAKSAGE_FOLLOW_POLICY must be one of {sorted(FOLLOW_POLICIES)}, "
                f"got {self.FOLLOW_POLICY!r}"
            )

    def _resolve_data_dir(self) -> Path:
        """Return the directory where the SQLite file and logs live."""

        data_root = os.getenv("STREAKSAGE_DATA_DIR", "instance")
        path = Path(data_root).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _build_sqlite_url(self) -> str:
        """Construct the default SQLite URL inside the data directory."""

        db_path = self.DATA_DIR / self.DB_FILENAME
        return f"sqlite:///{db_path}"

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        if self.DATABASE_URL == "sqlite://":
            # One shared connection, otherwise every session sees an empty database
            return {"connect_args": {"check_same_thread": False}, "poolclass": StaticPool}
        if self.DATABASE_URL.startswith("sqlite"):
            return {"connect_args": {"check_same_thread": False}}
        return {"pool_pre_ping": True}


class DevConfig(BaseConfig):
    """Development configuration using local SQLite."""

    DEBUG = True
    TESTING = False


class TestConfig(BaseConfig):
    """Configuration for the test-suite: in-memory SQLite, quiet console."""

    DEBUG = False
    TESTING = True

    def __init__(self) -> None:
        super().__init__()
        self.DEV_MODE = False
        self.DATABASE_URL = "sqlite://"
