"""
Task primitives.

- BaseTask: lifecycle container owning one dedicated thread
- ActionTask: runs a computation for its side effects
- ResultTask: runs a computation and captures its return value
- TaskRegistry / get_registry: process-wide tracker of live tasks
"""
from .state import (
    TaskState,
    ThreadPriority,
    VALID_TRANSITIONS,
    can_transition,
    TaskError,
    TaskStateError,
    TaskAborted,
)
from .base import BaseTask
from .action import ActionTask
from .result import ResultTask
from .registry import TaskRegistry, get_registry

__all__ = [
    "TaskState",
    "ThreadPriority",
    "VALID_TRANSITIONS",
    "can_transition",
    "TaskError",
    "TaskStateError",
    "TaskAborted",
    "BaseTask",
    "ActionTask",
    "ResultTask",
    "TaskRegistry",
    "get_registry",
]
