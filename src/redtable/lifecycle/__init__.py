"""
Lifecycle package for redtable.

Parses custom resource events and dispatches them to the schema differ,
statement builder and executor.
"""

from .events import EventKind, LifecycleAction, LifecycleEvent, LifecycleResult
from .dispatcher import TableLifecycleHandler, handle_event

__all__ = [
    "EventKind",
    "LifecycleAction",
    "LifecycleEvent",
    "LifecycleResult",
    "TableLifecycleHandler",
    "handle_event",
]
