"""
TaskStore — task-tracking data-access layer over a pooled relational database.

Public surface:

    TaskStore                     — the store façade (taskstore.store)
    Task, Label                   — value records (taskstore.records)
    OperationContext              — per-call tracing id / timeout
    TaskStoreError and subclasses — error taxonomy (taskstore.engine.errors)
"""

__version__ = "1.0.0"

from taskstore.engine.context import OperationContext
from taskstore.engine.errors import (
    TaskStoreConfigError,
    TaskStoreConnectionError,
    TaskStoreError,
    TaskStoreNotFoundError,
    TaskStoreQueryError,
    TaskStoreTransactionError,
)
from taskstore.records import Label, Task
from taskstore.store import TaskStore

__all__ = [
    "Label",
    "OperationContext",
    "Task",
    "TaskStore",
    "TaskStoreConfigError",
    "TaskStoreConnectionError",
    "TaskStoreError",
    "TaskStoreNotFoundError",
    "TaskStoreQueryError",
    "TaskStoreTransactionError",
]
