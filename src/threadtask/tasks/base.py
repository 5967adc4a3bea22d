"""
BaseTask - one computation on one dedicated thread.

Owns the lifecycle (NOT_STARTED -> RUNNING -> COMPLETED | ABORTED), the
one-shot ``on_end`` notification and the blocking ``wait()``.

Usage:
    task = ActionTask(download, url)
    task.on_end.connect(on_download_finished)
    task.start()
    task.wait()
"""
import ctypes
import itertools
import threading
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional, Union

from loguru import logger

from ..core.config import get_config
from ..core.events import Signal
from .state import (
    TaskAborted,
    TaskState,
    TaskStateError,
    ThreadPriority,
    can_transition,
)

_task_ids = itertools.count(1)


def _raise_in_thread(thread_id: int, exc_type: type) -> bool:
    """
    Raise ``exc_type`` asynchronously in the thread identified by ``thread_id``.

    The exception is delivered the next time that thread executes Python
    bytecode; a thread blocked in a C call is not interrupted.

    Returns:
        True if a thread state was found and flagged
    """
    modified = ctypes.pythonapi.PyThreadState_SetAsyncExc(
        ctypes.c_ulong(thread_id), ctypes.py_object(exc_type)
    )
    if modified > 1:
        # Undo: more than one thread state matched the id
        ctypes.pythonapi.PyThreadState_SetAsyncExc(ctypes.c_ulong(thread_id), None)
        raise SystemError(f"Async exception hit {modified} threads for id {thread_id}")
    return modified == 1


class BaseTask(ABC):
    """
    Lifecycle container for a computation running on its own thread.

    Subclasses decide what happens to the computation's return value
    (``_capture``) and may add notifications after ``on_end`` (``_after_end``).

    Signals:
        on_end: Emitted exactly once with the task when it first becomes
                COMPLETED or ABORTED. Runs on the task's own thread, except
                after ``abort()`` where it runs on the aborting thread.
    """

    # Thread.daemon used when the caller does not choose
    background_default = True

    def __init__(
        self,
        target: Callable[..., Any],
        *args: Any,
        name: Optional[str] = None,
        background: Optional[bool] = None,
        priority: Union[ThreadPriority, int, None] = None,
    ):
        if target is None or not callable(target):
            raise TypeError(f"{type(self).__name__} requires a callable, got {target!r}")

        settings = get_config().data.tasks
        if name is None:
            name = f"{settings.thread_name_prefix}-{next(_task_ids)}"
        if priority is None:
            priority = ThreadPriority[settings.default_priority]
        if background is None:
            background = self.background_default

        self._target = target
        self._args = args
        self._state = TaskState.NOT_STARTED
        self._exception: Optional[BaseException] = None
        self._priority = ThreadPriority(priority)

        self._lock = threading.Lock()
        self._done = threading.Event()      # set after terminal notifications
        self._entered = threading.Event()   # set once _run is executing
        self._notifier: Optional[threading.Thread] = None

        self.on_end = Signal(f"{name}.on_end")
        self.thread = threading.Thread(target=self._run, name=name, daemon=background)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r} {self._state.value}>"

    # --- Construction helpers ---

    @classmethod
    def run(cls, target: Callable[..., Any], *args: Any, **options: Any) -> None:
        """Create and start a task without keeping a handle (fire and forget)."""
        cls.run_new(target, *args, **options)

    @classmethod
    def run_new(cls, target: Callable[..., Any], *args: Any, **options: Any) -> "BaseTask":
        """Create and start a task, returning it for wait()/subscriptions."""
        task = cls(target, *args, **options)
        task.start()
        return task

    # --- State ---

    @property
    def state(self) -> TaskState:
        """Current lifecycle state."""
        return self._state

    @property
    def exception(self) -> Optional[BaseException]:
        """Exception raised by the computation, if it failed."""
        return self._exception

    @property
    def is_running(self) -> bool:
        return self._state is TaskState.RUNNING

    @property
    def is_finished(self) -> bool:
        return self._state.is_terminal

    # --- Pass-through thread configuration ---

    @property
    def is_background(self) -> bool:
        return self.thread.daemon

    @is_background.setter
    def is_background(self, value: bool):
        # threading refuses this once the thread is alive
        self.thread.daemon = value

    @property
    def name(self) -> str:
        return self.thread.name

    @name.setter
    def name(self, value: str):
        self.thread.name = value

    @property
    def priority(self) -> ThreadPriority:
        return self._priority

    @priority.setter
    def priority(self, value: Union[ThreadPriority, int]):
        self._priority = ThreadPriority(value)

    # --- Lifecycle ---

    def _transition(self, target: TaskState) -> bool:
        """Move to ``target`` if legal. Caller must hold ``_lock``."""
        if not can_transition(self._state, target):
            return False
        logger.debug(f"Task '{self.name}': {self._state.value} -> {target.value}")
        self._state = target
        return True

    def start(self):
        """
        Launch the task thread. Returns immediately.

        Raises:
            TaskStateError: If the task was already started
        """
        with self._lock:
            if not self._transition(TaskState.RUNNING):
                raise TaskStateError(f"Cannot start {self!r}: already started")
        self.thread.start()

    def abort(self):
        """
        Hard-stop the task.

        The task becomes ABORTED at once and ``on_end`` fires on the calling
        thread. ``TaskAborted`` is raised inside the task thread the next time
        it runs Python code, so a computation blocked in a C call keeps going
        until that call returns. Whatever shared state the computation was
        mutating may be left half-updated. Calling abort() on a finished task
        does nothing.

        Raises:
            TaskStateError: If the task was never started
        """
        with self._lock:
            if self._state is TaskState.NOT_STARTED:
                raise TaskStateError(f"Cannot abort {self!r}: not started")
            if not self._transition(TaskState.ABORTED):
                return

            from_inside = threading.current_thread() is self.thread
            if not from_inside:
                # The thread must be inside its run wrapper to catch TaskAborted
                self._entered.wait()
                if not _raise_in_thread(self.thread.ident, TaskAborted):
                    logger.debug(f"Task '{self.name}': thread already gone on abort")

        logger.info(f"Task '{self.name}' aborted")
        self._finish_notifications(None, succeeded=False)
        if from_inside:
            raise TaskAborted()

    def wait(self):
        """
        Block until the task is COMPLETED or ABORTED and its notifications ran.

        Returns immediately if that already happened, or when called from a
        listener while the task is dispatching its notifications.

        Raises:
            TaskStateError: If the task was not started, or the task waits
                            for itself while still running
        """
        state = self._state
        if state is TaskState.NOT_STARTED:
            raise TaskStateError(f"Cannot wait for {self!r}: not started")

        current = threading.current_thread()
        if current is self._notifier:
            return
        if current is self.thread and not state.is_terminal:
            raise TaskStateError(f"{self!r} cannot wait for itself")

        self._done.wait()

    # --- Thread side ---

    def _run(self):
        """Thread entry point."""
        try:
            self._entered.set()
            self._execute()
        except TaskAborted:
            logger.debug(f"Task '{self.name}' thread stopped by abort")

    def _execute(self):
        try:
            value = self._target(*self._args)
        except TaskAborted:
            raise
        except BaseException as e:
            # SystemExit and KeyboardInterrupt also end the task
            logger.exception(f"Task '{self.name}' failed: {e}")
            self._complete(None, e)
            return
        self._complete(value, None)

    def _complete(self, value: Any, error: Optional[BaseException]):
        """Win the RUNNING -> COMPLETED transition unless abort() got there first."""
        with self._lock:
            if not self._transition(TaskState.COMPLETED):
                return
            self._exception = error
            if error is None:
                self._capture(value)

        self._finish_notifications(value, succeeded=error is None)

    def _finish_notifications(self, value: Any, succeeded: bool):
        self._notifier = threading.current_thread()
        try:
            self.on_end.emit(self)
            if succeeded:
                self._after_end(value)
        finally:
            self._notifier = None
            self._done.set()

    @abstractmethod
    def _capture(self, value: Any):
        """Store the computation's return value. Called under ``_lock``."""

    def _after_end(self, value: Any):
        """Extra notifications after ``on_end`` for a successful run."""
        pass
