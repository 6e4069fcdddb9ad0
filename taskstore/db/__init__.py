"""TaskStore database layer — base, models, sessions."""

from taskstore.db.base import Base, create_schema, create_store_engine, normalize_url
from taskstore.db.models import LabelModel, TaskLabelModel, TaskModel

__all__ = [
    "Base",
    "LabelModel",
    "TaskLabelModel",
    "TaskModel",
    "create_schema",
    "create_store_engine",
    "normalize_url",
]
