"""
TaskRegistry - process-wide bookkeeping of live tasks.

Tasks added to the registry are dropped automatically from their own
``on_end`` notification, so the registry only ever holds tasks that are
still running (or have not been started yet).

``pool_size`` is advisory: ``add()`` never rejects a task, it logs a warning
when the number of live tasks exceeds it.
"""
import threading
from typing import FrozenSet, Optional

from loguru import logger

from ..core.config import ConfigManager, get_config
from ..core.singleton import SingletonMeta
from .base import BaseTask


class TaskRegistry(metaclass=SingletonMeta):
    """
    Tracks currently running tasks.

    Usage:
        registry = get_registry()
        registry.add(ActionTask.run_new(work))
        print(registry.count)
    """

    def __init__(self):
        self._pool: set = set()
        self._lock = threading.Lock()
        self._config: Optional[ConfigManager] = None
        self._pool_size = 0
        self.configure(get_config())

    @classmethod
    def instance(cls) -> "TaskRegistry":
        """Get the registry, creating it on first access."""
        return cls()

    @classmethod
    def reset(cls) -> None:
        """Forget the current instance (for testing)."""
        existing = SingletonMeta.get_instance(cls)
        if existing is not None and existing._config is not None:
            existing._config.on_changed.disconnect(existing._on_config_changed)
        SingletonMeta.reset(cls)

    # --- Configuration ---

    def configure(self, config: ConfigManager):
        """Read ``tasks.pool_size`` from ``config`` and follow its changes."""
        if self._config is not None:
            self._config.on_changed.disconnect(self._on_config_changed)
        self._config = config
        self._pool_size = config.data.tasks.pool_size
        config.on_changed.connect(self._on_config_changed)

    def _on_config_changed(self, section, key, value):
        if section == "tasks" and key == "pool_size":
            logger.debug(f"TaskRegistry: pool_size {self._pool_size} -> {value}")
            self._pool_size = value

    @property
    def pool_size(self) -> int:
        return self._pool_size

    @pool_size.setter
    def pool_size(self, value: int):
        if value < 1:
            raise ValueError(f"pool_size must be positive, got {value}")
        self._pool_size = value

    # --- Pool ---

    @property
    def tasks(self) -> FrozenSet[BaseTask]:
        """Snapshot of live tasks."""
        with self._lock:
            return frozenset(self._pool)

    @property
    def count(self) -> int:
        with self._lock:
            return len(self._pool)

    def __len__(self) -> int:
        return self.count

    def __contains__(self, task: BaseTask) -> bool:
        with self._lock:
            return task in self._pool

    def add(self, task: BaseTask):
        """
        Track ``task`` until it finishes.

        Adding a task twice is a no-op; adding a finished task leaves the
        registry unchanged.
        """
        with self._lock:
            if task in self._pool:
                return
            # Listener first: a task finishing right now is caught by the
            # is_finished check below
            task.on_end.connect(self._on_task_end)
            self._pool.add(task)
            size = len(self._pool)

        if task.is_finished:
            self.discard(task)
            return

        logger.debug(f"TaskRegistry: added {task!r} ({size} live)")
        if size > self._pool_size:
            logger.warning(f"TaskRegistry: {size} live tasks exceed pool_size {self._pool_size}")

    def discard(self, task: BaseTask):
        """Stop tracking ``task``. Unknown tasks are ignored."""
        task.on_end.disconnect(self._on_task_end)
        with self._lock:
            if task not in self._pool:
                return
            self._pool.discard(task)
            size = len(self._pool)
        logger.debug(f"TaskRegistry: removed {task!r} ({size} live)")

    def abort_all(self):
        """Abort every running task in the registry."""
        for task in self.tasks:
            if task.is_running:
                task.abort()

    def _on_task_end(self, task: BaseTask):
        self.discard(task)


def get_registry() -> TaskRegistry:
    """Return the process-wide task registry."""
    return TaskRegistry.instance()
