"""Task and Label records — the flat value objects exchanged with callers."""

from __future__ import annotations

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field


class Task(BaseModel):
    """
    A task as seen by callers.

    ``id`` is assigned by storage; 0 means "not stored yet". Timestamps are
    integer epoch values with 0 meaning "not set".
    """

    model_config = ConfigDict(from_attributes=True)

    id: int = 0
    opened: int = 0
    closed: int = 0
    author_id: int = 0
    assigned_id: int = 0
    title: str = Field(default="", description="Task title")
    content: str = Field(default="", description="Task body")

    def column_values(self) -> Dict[str, Any]:
        """Every column except id (bulk insert and full update write these)."""
        return self.model_dump(exclude={"id"})


class Label(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int = 0
    name: str = ""
