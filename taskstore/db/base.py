"""
TaskStore Database Base — declarative base and pooled engine factory.

Provides:
- Base: SQLAlchemy declarative base for the task tables
- normalize_url: accept ``postgres://`` and pin PostgreSQL URLs to psycopg2
- create_store_engine: pooled engine with per-dialect connection setup
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import DeclarativeBase

# Driver shipped with the package (psycopg2-binary)
POSTGRES_DRIVER_SCHEME = "postgresql+psycopg2"


class Base(DeclarativeBase):
    """SQLAlchemy declarative base for all TaskStore models."""
    pass


def normalize_url(url: str) -> str:
    """
    Pin PostgreSQL URLs that name no driver to psycopg2.

    ``postgres://`` and ``postgresql://`` both become ``postgresql+psycopg2://``;
    URLs with an explicit driver and other dialects pass through.
    """
    for scheme in ("postgres://", "postgresql://"):
        if url.startswith(scheme):
            return POSTGRES_DRIVER_SCHEME + "://" + url[len(scheme):]
    return url


def create_store_engine(
    url: str,
    pool_size: int = 10,
    max_overflow: int = 20,
    pool_timeout: int = 30,
    pool_recycle: int = 1800,
    pool_pre_ping: bool = True,
    **kwargs: Any,
) -> Engine:
    """
    Create the pooled engine behind a TaskStore.

    Pool sizing only applies to server databases. SQLite gets the dialect's
    default pool and ``PRAGMA foreign_keys=ON`` on every new connection, so
    association constraints behave as they do on PostgreSQL.

    Raises whatever SQLAlchemy raises for a malformed URL or unknown dialect
    (ArgumentError / NoSuchModuleError); the caller classifies it.
    """
    url = normalize_url(url)
    backend = make_url(url).get_backend_name()

    if backend == "sqlite":
        engine = create_engine(url, pool_pre_ping=pool_pre_ping, **kwargs)

        @event.listens_for(engine, "connect")
        def enable_foreign_keys(dbapi_conn, connection_record):
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return engine

    return create_engine(
        url,
        pool_size=pool_size,
        max_overflow=max_overflow,
        pool_timeout=pool_timeout,
        pool_recycle=pool_recycle,
        pool_pre_ping=pool_pre_ping,
        **kwargs,
    )


def create_schema(engine: Engine) -> None:
    """
    Create the task tables if they do not exist (dev/test bootstrap only).
    Production databases are provisioned outside this package.
    """
    from taskstore.db import models  # noqa: F401  registers tables on Base

    Base.metadata.create_all(engine)
