"""Unit tests for taskstore.records — Task / Label value records."""

import json

import pytest
from pydantic import ValidationError

from taskstore.db.models import TaskModel
from taskstore.records import Label, Task


class TestTask:
    def test_defaults(self):
        task = Task()
        assert task.id == 0
        assert task.opened == 0
        assert task.closed == 0
        assert task.title == ""

    def test_flat_serialisation(self):
        task = Task(id=1, opened=10, closed=0, author_id=2, assigned_id=3, title="t", content="c")
        assert json.loads(task.model_dump_json()) == {
            "id": 1, "opened": 10, "closed": 0, "author_id": 2,
            "assigned_id": 3, "title": "t", "content": "c",
        }

    def test_column_values_exclude_id(self):
        values = Task(id=9, title="t").column_values()
        assert "id" not in values
        assert set(values) == {"opened", "closed", "author_id", "assigned_id", "title", "content"}

    def test_from_orm_row(self):
        row = TaskModel(id=5, opened=1, closed=2, author_id=3, assigned_id=4, title="x", content="y")
        task = Task.model_validate(row)
        assert task.id == 5
        assert task.content == "y"

    def test_mutable_before_update(self):
        task = Task(title="draft")
        task.title = "final"
        assert task.title == "final"

    def test_rejects_wrong_types(self):
        with pytest.raises(ValidationError):
            Task(author_id="not a number")


class TestLabel:
    def test_fields(self):
        label = Label(id=1, name="bug")
        assert label.model_dump() == {"id": 1, "name": "bug"}
