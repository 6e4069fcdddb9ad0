"""
TaskStore Session Management.

Each store operation runs inside ``session_scope``: one Session, one
transaction, commit on success, rollback on any exception, and the
connection always handed back to the pool.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Generator

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker


def make_session_factory(engine: Engine) -> sessionmaker:
    """
    Session factory for a store engine.

    expire_on_commit=False keeps loaded attributes readable after commit;
    rows are converted to records inside the scope regardless.
    """
    return sessionmaker(bind=engine, expire_on_commit=False)


@contextmanager
def session_scope(factory: sessionmaker) -> Generator[Session, None, None]:
    """
    Context manager for store sessions with auto-commit/rollback.

    Usage:
        with session_scope(factory) as session:
            session.add(TaskModel(title="x", content="y"))
    """
    session = factory()
    try:
        yield session
        session.commit()
    except BaseException:
        session.rollback()
        raise
    finally:
        session.close()
