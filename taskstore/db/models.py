"""
TaskStore Models — SQLAlchemy mappings for the task-tracking schema.

Tables:
    tasks         — task rows; opened/closed/author_id/assigned_id default to 0
    labels        — label dictionary (managed outside this package)
    tasks_labels  — many-to-many association, one row per (task, label)
"""

from __future__ import annotations

from sqlalchemy import BigInteger, Column, ForeignKey, Integer, Text, text

from taskstore.db.base import Base


class TaskModel(Base):
    """A task row. ``closed == 0`` conventionally means still open."""
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, autoincrement=True)
    opened = Column(BigInteger, nullable=False, server_default=text("0"))
    closed = Column(BigInteger, nullable=False, server_default=text("0"))
    author_id = Column(Integer, nullable=False, server_default=text("0"))
    assigned_id = Column(Integer, nullable=False, server_default=text("0"))
    title = Column(Text, nullable=False)
    content = Column(Text, nullable=False, server_default=text("''"))

    def __repr__(self) -> str:
        return f"<TaskModel id={self.id} title={self.title!r}>"


class LabelModel(Base):
    __tablename__ = "labels"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False, unique=True)

    def __repr__(self) -> str:
        return f"<LabelModel id={self.id} name={self.name!r}>"


class TaskLabelModel(Base):
    """Association row; the composite key makes a (task, label) pair unique."""
    __tablename__ = "tasks_labels"

    task_id = Column(
        Integer, ForeignKey("tasks.id", ondelete="CASCADE"), primary_key=True
    )
    label_id = Column(
        Integer, ForeignKey("labels.id", ondelete="CASCADE"), primary_key=True
    )
