"""
threadtask - background tasks on dedicated threads.

Usage:
    from threadtask import ResultTask, get_registry

    task = ResultTask.run_new(sum, [2, 3], default=0)
    get_registry().add(task)
    task.wait()
    print(task.state, task.result)
"""
from .core import ConfigManager, Signal, get_config, set_config, setup_logging
from .tasks import (
    ActionTask,
    BaseTask,
    ResultTask,
    TaskAborted,
    TaskError,
    TaskRegistry,
    TaskState,
    TaskStateError,
    ThreadPriority,
    get_registry,
)

__version__ = "0.1.0"

__all__ = [
    "ConfigManager",
    "Signal",
    "get_config",
    "set_config",
    "setup_logging",
    "ActionTask",
    "BaseTask",
    "ResultTask",
    "TaskAborted",
    "TaskError",
    "TaskRegistry",
    "TaskState",
    "TaskStateError",
    "ThreadPriority",
    "get_registry",
]
