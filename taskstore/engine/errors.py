"""
TaskStore Error Hierarchy — Structured exceptions for the data-access layer.

Every error carries the execution_id of the operation that raised it, so a
failure can be matched with its entry in the operation log. Driver errors are
never replaced: they are chained as ``__cause__`` (``raise ... from exc``).

Hierarchy:
    TaskStoreError
    ├── TaskStoreConnectionError   — Pool cannot be established
    ├── TaskStoreQueryError        — Single-statement failure
    ├── TaskStoreNotFoundError     — Id-keyed fetch matched no row
    ├── TaskStoreTransactionError  — Bulk insert failed (rolled back)
    └── TaskStoreConfigError       — Invalid or incomplete configuration
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Dict, Optional


class TaskStoreError(Exception):
    """
    Base error for all TaskStore failures.
    All context is serializable to JSON for the operation log.
    """

    def __init__(self, message: str, **context: Any):
        self.message = message
        self.execution_id: Optional[str] = context.get("execution_id")
        self.operation: Optional[str] = context.get("operation")
        self.error_type: str = self.__class__.__name__
        self.context: Dict[str, Any] = context
        self.timestamp: str = datetime.now(timezone.utc).isoformat()
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize error to a JSON-compatible dict."""
        return {
            "error_type": self.error_type,
            "message": self.message,
            "execution_id": self.execution_id,
            "operation": self.operation,
            "timestamp": self.timestamp,
            "cause": repr(self.__cause__) if self.__cause__ is not None else None,
            "context": {
                k: str(v) for k, v in self.context.items()
                if k not in ("execution_id", "operation")
            },
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), default=str)

    def __repr__(self) -> str:
        parts = [f"{self.error_type}: {self.message}"]
        if self.operation:
            parts.append(f"operation={self.operation}")
        if self.execution_id:
            parts.append(f"execution_id={self.execution_id}")
        return " | ".join(parts)


class TaskStoreConnectionError(TaskStoreError):
    """
    The connection pool could not be established: malformed URL, unknown
    dialect, unreachable host or rejected credentials. Fatal to startup.
    """

    def __init__(self, message: str, **context: Any):
        self.url: Optional[str] = context.get("url")
        super().__init__(message, **context)

    def to_dict(self) -> Dict[str, Any]:
        d = super().to_dict()
        d["url"] = self.url
        return d


class TaskStoreQueryError(TaskStoreError):
    """
    A single statement failed: syntax, constraint violation (duplicate
    association, foreign key) or transport. These are not told apart here;
    inspect ``__cause__`` for the driver error.
    """
    pass


class TaskStoreNotFoundError(TaskStoreError):
    """An id-keyed fetch found zero rows."""

    def __init__(self, message: str, **context: Any):
        self.task_id: Optional[int] = context.get("task_id")
        super().__init__(message, **context)

    def to_dict(self) -> Dict[str, Any]:
        d = super().to_dict()
        d["task_id"] = self.task_id
        return d


class TaskStoreTransactionError(TaskStoreError):
    """
    The bulk-insert unit of work failed and was rolled back.
    ``failed_index`` is the 0-based position of the insert that failed, or
    None when begin/commit itself failed.
    """

    def __init__(self, message: str, **context: Any):
        self.failed_index: Optional[int] = context.get("failed_index")
        self.task_count: Optional[int] = context.get("task_count")
        super().__init__(message, **context)

    def to_dict(self) -> Dict[str, Any]:
        d = super().to_dict()
        d["failed_index"] = self.failed_index
        d["task_count"] = self.task_count
        return d


class TaskStoreConfigError(TaskStoreError):
    """Configuration error — invalid taskstore.yaml or missing DB* variables."""

    def __init__(self, message: str, **context: Any):
        self.missing: list = context.get("missing", [])
        super().__init__(message, **context)
