"""
Run callables on the thread that owns a Qt object.

Background tasks must not touch widgets directly; ``run_on_context`` hands
the call to the context object's thread and blocks until it has run there.
"""
import threading
from typing import Any, Callable, Optional

import shiboken6
from loguru import logger
from PySide6.QtCore import QCoreApplication, QObject, QThread, QTimer

# How often a blocked caller re-checks that the context is still alive
POLL_INTERVAL = 0.05


def _context_alive(context: QObject) -> bool:
    return QCoreApplication.instance() is not None and shiboken6.isValid(context)


def run_on_context(context: QObject, action: Callable[..., Any], *args: Any) -> Optional[Any]:
    """
    Execute ``action(*args)`` on the thread that owns ``context``.

    Runs inline when the caller already is on that thread. Otherwise the call
    is posted to the context's event loop and the caller blocks until it has
    run; an exception raised by ``action`` is re-raised in the caller.

    A context that was already destroyed (or is destroyed while we wait) is
    logged and ignored. Qt drops the posted call together with its context.

    Args:
        context: QObject whose thread should run the action (usually a widget)
        action: Callable to execute
        *args: Positional arguments for ``action``

    Returns:
        The action's return value, or None if the context is gone
    """
    if action is None or not callable(action):
        raise TypeError(f"run_on_context requires a callable, got {action!r}")
    if context is None:
        raise TypeError("run_on_context requires a context object")

    if not _context_alive(context):
        logger.warning(f"run_on_context: context disposed, dropping {action!r}")
        return None

    if context.thread() is QThread.currentThread():
        return action(*args)

    done = threading.Event()
    outcome = {}

    def call():
        try:
            outcome["value"] = action(*args)
        except Exception as e:
            outcome["error"] = e
        finally:
            done.set()

    QTimer.singleShot(0, context, call)

    while not done.wait(POLL_INTERVAL):
        if not _context_alive(context):
            logger.warning(f"run_on_context: context disposed while waiting for {action!r}")
            return None

    if "error" in outcome:
        raise outcome["error"]
    return outcome.get("value")
