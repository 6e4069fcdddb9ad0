"""
TaskStore Logging — stdlib logger setup plus a structured JSONL operation log.

Implements:
- configure_logging: one stream handler on the "taskstore" logger (CLI use)
- FileLogger: per-object-type, per-category log files (daily files)
- Log entry builders for store operations, transactions and system events

Files: {log_dir}/{object_type}/{category}/{YYYY-MM-DD}.jsonl
"""

from __future__ import annotations

import json
import logging
import sys
import threading
from datetime import date, datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

logger = logging.getLogger("taskstore.engine.logging")

LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"

# Valid object types and their permitted categories
OBJECT_TYPE_CATEGORIES = {
    "operations": ["execution", "performance"],
    "transactions": ["execution"],
    "system": ["execution"],
}


def configure_logging(level: str = "INFO") -> logging.Logger:
    """
    Attach a single stream handler to the "taskstore" logger.
    Safe to call more than once; the handler is replaced, not duplicated.
    """
    root = logging.getLogger("taskstore")
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    for handler in list(root.handlers):
        if getattr(handler, "_taskstore_handler", False):
            root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._taskstore_handler = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    return root


class LogEntry:
    """A structured log entry destined for a specific file."""

    __slots__ = ("object_type", "category", "data")

    def __init__(self, object_type: str, category: str, data: Dict[str, Any]):
        if category not in OBJECT_TYPE_CATEGORIES.get(object_type, ()):
            raise ValueError(f"Invalid log target {object_type}/{category}")
        self.object_type = object_type
        self.category = category
        self.data = data

    def to_json(self) -> str:
        return json.dumps(self.data, default=str, separators=(",", ":"))


class FileLogger:
    """
    Writes structured JSON log entries to per-object-type, per-category files.

    Thread-safe: one lock per log target (object type and category).
    """

    def __init__(self, log_dir: str = "logs"):
        self._log_dir = Path(log_dir)
        # Fixed set of targets, so the lock map never grows
        self._file_locks: Dict[Tuple[str, str], threading.Lock] = {}
        for obj_type, categories in OBJECT_TYPE_CATEGORIES.items():
            for cat in categories:
                self._file_locks[(obj_type, cat)] = threading.Lock()
                (self._log_dir / obj_type / cat).mkdir(parents=True, exist_ok=True)

    @property
    def log_dir(self) -> Path:
        return self._log_dir

    def write(self, entry: LogEntry) -> None:
        file_path = self._resolve_path(entry.object_type, entry.category)
        with self._file_locks[(entry.object_type, entry.category)]:
            with open(file_path, "a", encoding="utf-8") as f:
                f.write(entry.to_json())
                f.write("\n")

    def _resolve_path(self, object_type: str, category: str) -> Path:
        today = date.today().isoformat()
        return self._log_dir / object_type / category / f"{today}.jsonl"

    def query(
        self,
        object_type: str,
        category: str,
        *,
        days: int = 7,
        filters: Optional[Dict[str, Any]] = None,
        limit: int = 500,
    ) -> List[Dict[str, Any]]:
        """
        Read entries back, oldest first, from the last *days* daily files.

        Args:
            object_type: "operations", "transactions" or "system".
            category: "execution" or "performance".
            days: How many daily files to look back through (today included).
            filters: Only entries whose top-level keys equal ALL these values.
            limit: Max number of entries to return.
        """
        base = self._log_dir / object_type / category
        if not base.exists():
            return []

        results: List[Dict[str, Any]] = []
        end = date.today()
        for offset in range(days - 1, -1, -1):
            file_path = base / f"{(end - timedelta(days=offset)).isoformat()}.jsonl"
            if not file_path.exists():
                continue
            try:
                with open(file_path, "r", encoding="utf-8") as f:
                    for line in f:
                        line = line.strip()
                        if not line:
                            continue
                        try:
                            data = json.loads(line)
                        except json.JSONDecodeError:
                            continue
                        if filters and not all(data.get(k) == v for k, v in filters.items()):
                            continue
                        results.append(data)
            except OSError as exc:
                logger.warning("Could not read log file %s: %s", file_path, exc)
        return results[-limit:]


# ---------------------------------------------------------------------------
# Log Entry Builders
# ---------------------------------------------------------------------------

def _base_entry(
    event: str,
    level: str,
    execution_id: Optional[str] = None,
    **extra: Any,
) -> Dict[str, Any]:
    entry: Dict[str, Any] = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "level": level,
        "event": event,
    }
    if execution_id:
        entry["execution_id"] = execution_id
    entry.update(extra)
    return entry


def log_store_operation(
    operation: str,
    execution_id: str,
    duration_ms: float,
    success: bool,
    caller: Optional[str] = None,
    error: Optional[str] = None,
    error_type: Optional[str] = None,
) -> LogEntry:
    """Build an operation log entry (one per public TaskStore call)."""
    data = _base_entry(
        event="operation_executed",
        level="INFO" if success else "ERROR",
        execution_id=execution_id,
        operation=operation,
        duration_ms=round(duration_ms, 3),
        success=success,
    )
    if caller:
        data["caller"] = caller
    if error:
        data["error"] = error
    if error_type:
        data["error_type"] = error_type
    return LogEntry("operations", "execution", data)


def log_operation_performance(
    operation: str,
    execution_id: str,
    duration_ms: float,
) -> LogEntry:
    data = _base_entry(
        event="operation_performance",
        level="INFO",
        execution_id=execution_id,
        operation=operation,
        duration_ms=round(duration_ms, 3),
    )
    return LogEntry("operations", "performance", data)


def log_transaction_event(
    event: str,
    execution_id: str,
    task_count: int,
    duration_ms: Optional[float] = None,
    failed_index: Optional[int] = None,
    error: Optional[str] = None,
) -> LogEntry:
    """Build a bulk-insert transaction entry (committed/rolled_back)."""
    level = "ERROR" if event == "rolled_back" else "INFO"
    data = _base_entry(
        event=f"transaction_{event}",
        level=level,
        execution_id=execution_id,
        task_count=task_count,
    )
    if duration_ms is not None:
        data["duration_ms"] = round(duration_ms, 3)
    if failed_index is not None:
        data["failed_index"] = failed_index
    if error:
        data["error"] = error
    return LogEntry("transactions", "execution", data)


def log_system_event(
    event: str,
    level: str = "INFO",
    details: Optional[Dict[str, Any]] = None,
) -> LogEntry:
    """Build a system event entry (store opened, store closed)."""
    data = _base_entry(event=event, level=level)
    if details:
        data["details"] = details
    return LogEntry("system", "execution", data)
