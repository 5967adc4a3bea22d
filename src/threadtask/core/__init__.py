"""
Core infrastructure shared by the task primitives.

Provides:
- Signal: synchronous multicast notification with listener isolation
- ConfigManager: pydantic-validated settings with persistence and on_changed
- SingletonMeta: thread-safe lazily initialised singletons
- setup_logging: loguru sinks for console and rotating file
"""
from .events import Signal
from .config import (
    ConfigManager,
    AppConfig,
    TaskSettings,
    LoggingSettings,
    get_config,
    set_config,
)
from .singleton import SingletonMeta
from .logging import setup_logging

__all__ = [
    "Signal",
    "ConfigManager",
    "AppConfig",
    "TaskSettings",
    "LoggingSettings",
    "get_config",
    "set_config",
    "SingletonMeta",
    "setup_logging",
]
