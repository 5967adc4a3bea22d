"""
Lazily initialised process-wide instances.

``TaskRegistry`` uses this metaclass so that the first ``TaskRegistry()``
(or ``TaskRegistry.instance()``) call builds the registry and every later
call, from any thread, gets the same object.
"""

import threading
from typing import Dict, Type, TypeVar, Optional

T = TypeVar('T')


class SingletonMeta(type):
    """
    Metaclass making each class hold a single instance.

    Creation is guarded by double-checked locking, so concurrent first
    calls still construct exactly one instance.
    """

    _instances: Dict[Type, object] = {}
    _lock: threading.Lock = threading.Lock()

    def __call__(cls, *args, **kwargs):
        if cls not in cls._instances:
            with cls._lock:
                if cls not in cls._instances:
                    cls._instances[cls] = super().__call__(*args, **kwargs)
        return cls._instances[cls]

    @classmethod
    def reset(mcs, cls: Type[T]) -> None:
        """Drop the instance of ``cls``; the next call creates a fresh one (tests)."""
        with mcs._lock:
            mcs._instances.pop(cls, None)

    @classmethod
    def get_instance(mcs, cls: Type[T]) -> Optional[T]:
        """Return the existing instance of ``cls`` without creating one."""
        return mcs._instances.get(cls)  # type: ignore
