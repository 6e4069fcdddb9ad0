"""
TaskStore Operation Context — per-call tracing id and statement timeout.

Every TaskStore operation takes an optional ``ctx``. When it is omitted the
context bound to the current thread/task (contextvars) is used, and when none
is bound a fresh one is created, so every call has an execution_id.

Usage:
    from taskstore.engine.context import OperationContext, operation_scope

    with operation_scope(OperationContext(timeout_ms=500, caller="api")):
        store.tasks(author_id=7)
"""

from __future__ import annotations

import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, Dict, Generator, Optional

current_operation_context: ContextVar[Optional["OperationContext"]] = ContextVar(
    "operation_context", default=None
)


@dataclass
class OperationContext:
    """
    Per-request context carried into the store.

    timeout_ms bounds each statement on PostgreSQL (transaction-local
    statement_timeout). None leaves the server default in place.
    """

    execution_id: str = field(default_factory=lambda: f"exec_{uuid.uuid4().hex[:12]}")
    timeout_ms: Optional[int] = None
    caller: Optional[str] = None

    def __post_init__(self) -> None:
        if self.timeout_ms is not None and self.timeout_ms <= 0:
            raise ValueError(f"timeout_ms must be positive, got {self.timeout_ms}")

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for logging."""
        return {
            "execution_id": self.execution_id,
            "timeout_ms": self.timeout_ms,
            "caller": self.caller,
        }


def set_operation_context(ctx: OperationContext) -> None:
    current_operation_context.set(ctx)


def get_operation_context() -> Optional[OperationContext]:
    return current_operation_context.get()


def clear_operation_context() -> None:
    current_operation_context.set(None)


def resolve_context(ctx: Optional[OperationContext] = None) -> OperationContext:
    """Explicit ctx, else the bound one, else a fresh default."""
    if ctx is not None:
        return ctx
    bound = current_operation_context.get()
    if bound is not None:
        return bound
    return OperationContext()


@contextmanager
def operation_scope(ctx: OperationContext) -> Generator[OperationContext, None, None]:
    """Bind *ctx* for the duration of the block, restoring the previous one."""
    token = current_operation_context.set(ctx)
    try:
        yield ctx
    finally:
        current_operation_context.reset(token)
