"""
Synchronous multicast notification.

A small observer implementation in the spirit of Qt's Signal or C#'s event:
subscribers are called in registration order on the emitting thread, and a
failing subscriber never prevents the others from running.
"""
import threading
from typing import Callable, List

from loguru import logger


class Signal:
    """
    A simple observer pattern implementation (Synchronous).

    Safe to connect/disconnect from any thread; ``emit`` iterates over a
    snapshot so subscribers may disconnect themselves while being notified.
    """
    def __init__(self, name: str = "Signal"):
        self.name = name
        self._subscribers: List[Callable] = []
        self._lock = threading.Lock()

    def connect(self, callback: Callable):
        """Connect a callback function to this signal."""
        with self._lock:
            if callback not in self._subscribers:
                self._subscribers.append(callback)

    def disconnect(self, callback: Callable):
        """Disconnect a callback function from this signal."""
        with self._lock:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def emit(self, *args, **kwargs):
        """Broadcast arguments to all subscribers synchronously."""
        with self._lock:
            subscribers = list(self._subscribers)
        for sub in subscribers:
            try:
                sub(*args, **kwargs)
            except Exception as e:
                logger.error(f"Signal '{self.name}' error in subscriber '{sub}': {e}")
