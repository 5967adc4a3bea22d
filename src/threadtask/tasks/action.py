"""
ActionTask - a task run for its side effects; the return value is dropped.
"""
from typing import Any

from .base import BaseTask


class ActionTask(BaseTask):
    """
    Runs a computation on a background (daemon) thread by default.

    Positional arguments are passed to the action; bind keyword arguments
    with ``functools.partial``.

    Usage:
        ActionTask.run(save_thumbnail, path, size)          # fire and forget
        task = ActionTask.run_new(save_thumbnail, path, size)
        task.wait()
    """

    def _capture(self, value: Any):
        # Return value is discarded
        pass
