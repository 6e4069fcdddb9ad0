"""End-to-end TaskStore behaviour against PostgreSQL."""

import threading

import pytest
from sqlalchemy import text

from taskstore.engine.context import OperationContext, operation_scope
from taskstore.engine.errors import (
    TaskStoreConnectionError,
    TaskStoreNotFoundError,
    TaskStoreQueryError,
    TaskStoreTransactionError,
)
from taskstore.records import Task
from taskstore.store import TaskStore

pytestmark = pytest.mark.integration


def _tasks(n, author_id=1):
    return [
        Task(opened=i, author_id=author_id, assigned_id=2, title=f"task {i}", content="c")
        for i in range(n)
    ]


class TestConnect:
    def test_ping(self, pg_store):
        assert pg_store.ping() is True

    def test_postgres_scheme_accepted(self, pg_schema):
        url = "postgres://" + pg_schema.split("://", 1)[1]
        with TaskStore(url) as store:
            assert store.tasks() == []

    def test_bad_password(self, pg_schema):
        from sqlalchemy.engine import make_url

        url = make_url(pg_schema).set(password="definitely-wrong")
        with pytest.raises(TaskStoreConnectionError) as exc_info:
            TaskStore(url.render_as_string(hide_password=False))
        assert "definitely-wrong" not in str(exc_info.value.to_dict())


class TestCrud:
    def test_new_task_ids_increase(self, pg_store):
        first = pg_store.new_task(Task(title="a", content=""))
        second = pg_store.new_task(Task(title="b", content=""))
        assert 0 < first < second

    def test_new_task_ignores_other_fields(self, pg_store):
        task_id = pg_store.new_task(Task(opened=9, author_id=4, title="t", content="c"))
        stored = pg_store.get_task_by_id(task_id)
        assert stored.opened == 0
        assert stored.author_id == 0

    def test_update_and_delete(self, pg_store):
        task_id = pg_store.new_task(Task(title="t", content="c"))
        pg_store.update_task(Task(id=task_id, opened=5, closed=6, author_id=7, assigned_id=8,
                                  title="t2", content="c2"))
        assert pg_store.get_task_by_id(task_id).model_dump() == {
            "id": task_id, "opened": 5, "closed": 6, "author_id": 7, "assigned_id": 8,
            "title": "t2", "content": "c2",
        }
        pg_store.delete_task(task_id)
        with pytest.raises(TaskStoreNotFoundError):
            pg_store.get_task_by_id(task_id)

    def test_filters(self, pg_store):
        pg_store.create_tasks(_tasks(2, author_id=1) + _tasks(1, author_id=2))
        assert len(pg_store.tasks()) == 3
        assert len(pg_store.get_tasks_by_author(2)) == 1
        assert pg_store.tasks(author_id=0) == pg_store.tasks()


class TestBulkInsert:
    def test_rollback_leaves_nothing(self, pg_store):
        batch = _tasks(3)
        broken = Task.model_construct(
            id=0, opened=0, closed=0, author_id=0, assigned_id=0, title=None, content="",
        )
        with pytest.raises(TaskStoreTransactionError) as exc_info:
            pg_store.create_tasks(batch[:2] + [broken] + batch[2:])
        assert exc_info.value.failed_index == 2
        assert pg_store.tasks() == []

    def test_concurrent_batches(self, pg_store):
        errors = []

        def worker(author_id):
            try:
                pg_store.create_tasks(_tasks(5, author_id=author_id))
            except Exception as exc:  # collected for the assertion below
                errors.append(exc)

        threads = [threading.Thread(target=worker, args=(a,)) for a in (1, 2, 3, 4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert errors == []
        assert len(pg_store.tasks()) == 20


class TestLabels:
    def test_attach_query_detach(self, pg_store):
        a = pg_store.new_task(Task(title="a", content=""))
        b = pg_store.new_task(Task(title="b", content=""))
        pg_store.add_label_to_task(b, 1)
        pg_store.add_label_to_task(a, 1)
        assert [t.id for t in pg_store.get_tasks_by_label(1)] == [a, b]
        pg_store.remove_label_from_task(a, 1)
        assert [t.id for t in pg_store.get_tasks_by_label(1)] == [b]

    def test_duplicate_pair_rejected(self, pg_store):
        task_id = pg_store.new_task(Task(title="a", content=""))
        pg_store.add_label_to_task(task_id, 1)
        with pytest.raises(TaskStoreQueryError):
            pg_store.add_label_to_task(task_id, 1)

    def test_unknown_label_rejected(self, pg_store):
        task_id = pg_store.new_task(Task(title="a", content=""))
        with pytest.raises(TaskStoreQueryError):
            pg_store.add_label_to_task(task_id, 999)

    def test_delete_task_cascades_to_labels(self, pg_store):
        task_id = pg_store.new_task(Task(title="a", content=""))
        pg_store.add_label_to_task(task_id, 2)
        pg_store.delete_task(task_id)
        assert pg_store.get_tasks_by_label(2) == []


class TestStatementTimeout:
    def test_timeout_is_transaction_local(self, pg_store):
        ctx = OperationContext(timeout_ms=1500)
        with pg_store._operation("show", ctx) as session:
            assert session.execute(text("SHOW statement_timeout")).scalar() == "1500ms"
        with pg_store._operation("show", None) as session:
            assert session.execute(text("SHOW statement_timeout")).scalar() != "1500ms"

    def test_slow_statement_cancelled(self, pg_store):
        with pytest.raises(TaskStoreQueryError):
            with pg_store._operation("sleep", OperationContext(timeout_ms=50)) as session:
                session.execute(text("SELECT pg_sleep(2)"))

    def test_bound_context_applies(self, pg_store):
        with operation_scope(OperationContext(timeout_ms=50, caller="worker")):
            with pytest.raises(TaskStoreQueryError) as exc_info:
                with pg_store._operation("sleep", None) as session:
                    session.execute(text("SELECT pg_sleep(2)"))
        assert exc_info.value.operation == "sleep"
