"""
Task Lifecycle State Machine.

Defines task states, the legal transitions between them and the exceptions
raised when the lifecycle is misused.
"""
from enum import Enum, IntEnum
from typing import Dict, FrozenSet


class TaskState(Enum):
    """Task lifecycle states."""
    NOT_STARTED = "not_started"
    RUNNING = "running"
    COMPLETED = "completed"
    ABORTED = "aborted"

    @property
    def is_terminal(self) -> bool:
        return self in (TaskState.COMPLETED, TaskState.ABORTED)


class ThreadPriority(IntEnum):
    """
    Execution priority reported by a task.

    CPython threads carry no scheduling priority; the value is stored on the
    task and passed through unchanged.
    """
    LOWEST = 0
    BELOW_NORMAL = 1
    NORMAL = 2
    ABOVE_NORMAL = 3
    HIGHEST = 4


# Valid state transitions; terminal states have none
VALID_TRANSITIONS: Dict[TaskState, FrozenSet[TaskState]] = {
    TaskState.NOT_STARTED: frozenset({TaskState.RUNNING}),
    TaskState.RUNNING: frozenset({TaskState.COMPLETED, TaskState.ABORTED}),
    TaskState.COMPLETED: frozenset(),
    TaskState.ABORTED: frozenset(),
}


def can_transition(current: TaskState, target: TaskState) -> bool:
    """
    Check if a task in ``current`` may move to ``target``.

    Args:
        current: State the task is in
        target: Requested state

    Returns:
        True if transition is valid
    """
    return target in VALID_TRANSITIONS.get(current, frozenset())


class TaskError(Exception):
    """Base class for task errors."""
    pass


class TaskStateError(TaskError):
    """Raised when an operation is not allowed in the task's current state."""
    pass


class TaskAborted(BaseException):
    """
    Raised inside a task thread by ``abort()``.

    Derives from BaseException so that ``except Exception`` blocks in the
    computation cannot swallow the hard stop.
    """
    pass
