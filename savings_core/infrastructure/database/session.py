"""Database engine and session management with connection pooling"""

from contextlib import contextmanager
from functools import lru_cache
from typing import Iterator

from sqlalchemy import Engine, create_engine, event
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session, sessionmaker

from savings_core.config import settings


def _begin_immediate(engine: Engine) -> None:
    """
    Make every SQLite transaction take the write lock up front.

    SQLite has one writer at a time; BEGIN IMMEDIATE makes concurrent
    sequence upserts queue on the busy timeout instead of failing on lock
    upgrade.
    """

    @event.listens_for(engine, "connect")
    def _disable_pysqlite_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def create_db_engine(database_url: str) -> Engine:
    """Create an engine; pooled for server databases, write-serialised for SQLite"""
    if make_url(database_url).get_backend_name() == "sqlite":
        engine = create_engine(database_url, connect_args={"check_same_thread": False, "timeout": 30})
        _begin_immediate(engine)
        return engine

    # Recycle pooled connections to avoid stale ones
    return create_engine(
        database_url,
        pool_pre_ping=True,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_recycle=settings.db_pool_recycle_seconds,
    )


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    return create_db_engine(settings.database_url)


@lru_cache(maxsize=1)
def get_session_factory() -> sessionmaker:
    return sessionmaker(autoflush=False, bind=get_engine())


@contextmanager
def get_db() -> Iterator[Session]:
    """Session scoped to one unit of work"""
    db = get_session_factory()()
    try:
        yield db
    finally:
        db.close()
