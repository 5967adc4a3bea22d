from typing import Any, Optional
import json
import os
import threading
from pydantic import BaseModel, Field, field_validator
from loguru import logger
from .events import Signal

PRIORITY_NAMES = ("LOWEST", "BELOW_NORMAL", "NORMAL", "ABOVE_NORMAL", "HIGHEST")


# --- Settings Models ---
class TaskSettings(BaseModel):
    pool_size: int = Field(default=8, ge=1)  # Advisory registry capacity
    thread_name_prefix: str = "Task"
    default_priority: str = "NORMAL"

    @field_validator("default_priority")
    @classmethod
    def _known_priority(cls, value: str) -> str:
        value = value.upper()
        if value not in PRIORITY_NAMES:
            raise ValueError(f"Unknown priority: {value}")
        return value


class LoggingSettings(BaseModel):
    debug_mode: bool = True
    log_dir: str = "logs"


class AppConfig(BaseModel):
    tasks: TaskSettings = Field(default_factory=TaskSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


# --- Manager ---
class ConfigManager:
    """
    Manages library configuration with optional persistence and reactivity.

    With ``filepath=None`` the configuration lives in memory only.
    """
    def __init__(self, filepath: Optional[str] = None):
        self.filepath = filepath
        self._data = AppConfig()
        self.on_changed = Signal("ConfigChanged")
        self._load()

    @property
    def data(self) -> AppConfig:
        return self._data

    def update(self, section: str, key: str, value: Any):
        """Update a setting, validate via Pydantic, autosave, and emit change event."""
        if not hasattr(self._data, section):
            raise ValueError(f"Invalid section: {section}")

        section_obj = getattr(self._data, section)
        if key not in type(section_obj).model_fields:
            raise ValueError(f"Invalid key: {key} in section {section}")

        raw = section_obj.model_dump()
        raw[key] = value
        validated = type(section_obj).model_validate(raw)
        setattr(self._data, section, validated)
        self._save()
        self.on_changed.emit(section, key, getattr(validated, key))

    def get(self, section: str, key: str) -> Any:
        section_obj = getattr(self._data, section)
        return getattr(section_obj, key)

    def _load(self):
        """Load settings from JSON or TOML file if present; otherwise keep defaults."""
        if not self.filepath:
            return
        if os.path.isfile(self.filepath):
            try:
                if self.filepath.endswith('.toml'):
                    import tomllib
                    with open(self.filepath, "rb") as f:
                        raw = tomllib.load(f)
                else:
                    with open(self.filepath, "r", encoding="utf-8") as f:
                        raw = json.load(f)
                self._data = AppConfig.model_validate(raw)
            except Exception as e:
                logger.error(f"Failed to load config from {self.filepath}: {e}")
                self._save()
        else:
            self._save()

    def _save(self):
        """Persist current config to JSON file."""
        if not self.filepath or self.filepath.endswith('.toml'):
            return
        try:
            dirname = os.path.dirname(self.filepath)
            if dirname:
                os.makedirs(dirname, exist_ok=True)
            with open(self.filepath, "w", encoding="utf-8") as f:
                json.dump(self._data.model_dump(), f, indent=4)
        except Exception as e:
            logger.error(f"Failed to save config to {self.filepath}: {e}")


# Global access
_config: Optional[ConfigManager] = None
_config_lock = threading.Lock()


def get_config() -> ConfigManager:
    """Return the process-wide configuration, creating an in-memory one on first use."""
    global _config
    if _config is None:
        with _config_lock:
            if _config is None:
                _config = ConfigManager()
    return _config


def set_config(manager: ConfigManager) -> None:
    """Install ``manager`` as the process-wide configuration."""
    global _config
    with _config_lock:
        _config = manager
