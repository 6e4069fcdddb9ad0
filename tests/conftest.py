"""
TaskStore Test Suite — Shared fixtures and configuration.

Unit tests run against a temporary SQLite file database carrying the same
schema as production. Live PostgreSQL tests live in tests/integration/.

Run:  pytest tests/ -v
"""

from __future__ import annotations

import logging

import pytest
from sqlalchemy.orm import Session

from taskstore.db.base import create_schema, create_store_engine
from taskstore.db.models import LabelModel
from taskstore.engine.context import clear_operation_context
from taskstore.engine.logging import FileLogger
from taskstore.records import Task
from taskstore.store import TaskStore

ENV_VARS = ("DBUSER", "DBPASS", "DBHOST", "DBPORT", "DBNAME", "TASKSTORE_DATABASE_URL")


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch):
    """Keep the caller's DB* variables and bound context out of every test."""
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    clear_operation_context()
    yield
    clear_operation_context()
    # configure_logging binds sys.stderr, which pytest swaps per test
    root = logging.getLogger("taskstore")
    for handler in list(root.handlers):
        if getattr(handler, "_taskstore_handler", False):
            root.removeHandler(handler)
    root.setLevel(logging.NOTSET)


@pytest.fixture
def db_url(tmp_path):
    """URL of an empty SQLite file database."""
    return f"sqlite:///{tmp_path / 'tasks.db'}"


@pytest.fixture
def schema_url(db_url):
    """Database with the task schema and two labels: 1=bug, 2=feature."""
    engine = create_store_engine(db_url)
    create_schema(engine)
    with Session(engine) as session:
        session.add_all([LabelModel(id=1, name="bug"), LabelModel(id=2, name="feature")])
        session.commit()
    engine.dispose()
    return db_url


@pytest.fixture
def store(schema_url):
    s = TaskStore(schema_url)
    yield s
    s.close()


@pytest.fixture
def file_logger(tmp_path):
    return FileLogger(log_dir=str(tmp_path / "logs"))


@pytest.fixture
def logged_store(schema_url, file_logger):
    s = TaskStore(schema_url, file_logger=file_logger)
    yield s
    s.close()


@pytest.fixture
def sample_tasks():
    """Three tasks by two authors, all fields set."""
    return [
        Task(opened=100, closed=0, author_id=1, assigned_id=2, title="Fix login", content="500 on submit"),
        Task(opened=200, closed=250, author_id=2, assigned_id=1, title="Write docs", content="API guide"),
        Task(opened=300, closed=0, author_id=1, assigned_id=3, title="Add labels", content="many-to-many"),
    ]


@pytest.fixture
def seeded_store(store, sample_tasks):
    store.create_tasks(sample_tasks)
    return store


@pytest.fixture
def project_root(tmp_path):
    """A directory holding a taskstore.yaml pointing at a SQLite database."""
    root = tmp_path / "project"
    root.mkdir()
    (root / "taskstore.yaml").write_text(
        "name: TestStore\n"
        "environment: dev\n"
        "database:\n"
        "  user: test\n"
        "  password: secret\n"
        "  host: db.local\n"
        "  port: 6543\n"
        "  name: tasks_test\n"
        "  pool_size: 3\n"
        "logging:\n"
        "  level: debug\n",
        encoding="utf-8",
    )
    return root
