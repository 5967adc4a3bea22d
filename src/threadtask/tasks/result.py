"""
ResultTask - a task whose computation produces a value.

``result`` holds ``default`` until the computation returns, then the returned
value. It is written once, under the task lock, before the state becomes
COMPLETED, so any reader that saw the task finish (``wait()``, ``on_end`` or
``on_completed``) reads the final value.
"""
from typing import Any, Callable, Generic, Optional, TypeVar, Union

from ..core.events import Signal
from .base import BaseTask
from .state import ThreadPriority

TResult = TypeVar("TResult")


class ResultTask(BaseTask, Generic[TResult]):
    """
    Runs ``func(*args)`` on a foreground thread and captures its return value.

    Signals:
        on_end: Inherited; fires first, for completion and abort alike
        on_completed: Emitted with the result on the task thread after
                      ``on_end``, only when ``func`` returned normally

    Usage:
        task = ResultTask.run_new(lambda a, b: a + b, 2, 3, default=0)
        task.wait()
        assert task.result == 5
    """

    background_default = False

    def __init__(
        self,
        func: Callable[..., TResult],
        *args: Any,
        default: Optional[TResult] = None,
        name: Optional[str] = None,
        background: Optional[bool] = None,
        priority: Union[ThreadPriority, int, None] = None,
    ):
        super().__init__(func, *args, name=name, background=background, priority=priority)
        self._result = default
        self.on_completed = Signal(f"{self.name}.on_completed")

    @property
    def result(self) -> Optional[TResult]:
        with self._lock:
            return self._result

    def _capture(self, value: TResult):
        self._result = value

    def _after_end(self, value: TResult):
        self.on_completed.emit(value)
