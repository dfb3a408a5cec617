"""StreakSage habit tracking package."""

from __future__ import annotations

from .config import BaseConfig, DevConfig, TestConfig
from .context import AppContext, create_app_context, create_memory_context
from .tracker import HabitTracker

__all__ = [
    "AppContext",
    "BaseConfig",
    "DevConfig",
    "HabitTracker",
    "TestConfig",
    "create_app_context",
    "create_memory_context",
]
