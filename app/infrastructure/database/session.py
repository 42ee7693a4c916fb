"""Async SQLAlchemy engine and session management."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from app.core.config import DatabaseSettings, get_settings
from app.infrastructure.database.base import Base

logger = logging.getLogger(__name__)

_engine: AsyncEngine | None = None
AsyncSessionFactory: async_sessionmaker[AsyncSession] | None = None


def _is_memory_database(database: str | None) -> bool:
    return database in (None, "", ":memory:") or (database or "").startswith("file::memory:")


def _enable_sqlite_locking(engine: AsyncEngine) -> None:
    """Make SQLite transactions take the database write lock up front.

    SQLite ignores ``FOR UPDATE``; issuing ``BEGIN IMMEDIATE`` makes every
    transaction hold the write lock from its first statement, so locking reads
    still serialize against each other.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection: Any, connection_record: Any) -> None:
        # let the begin listener below own BEGIN instead of the driver
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn: Any) -> None:
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def build_engine(database: DatabaseSettings, *, debug: bool = False) -> AsyncEngine:
    url = make_url(database.url)
    is_sqlite = url.get_backend_name() == "sqlite"

    engine_kwargs: dict[str, Any] = {
        "echo": database.echo or debug,
        "pool_pre_ping": database.pool_pre_ping,
    }
    # in-memory SQLite runs on a single static connection, there is no pool to size
    if not (is_sqlite and _is_memory_database(url.database)):
        if database.pool_size is not None:
            engine_kwargs["pool_size"] = database.pool_size
        if database.max_overflow is not None:
            engine_kwargs["max_overflow"] = database.max_overflow
        engine_kwargs["pool_timeout"] = database.pool_timeout
        engine_kwargs["pool_recycle"] = database.pool_recycle
    if is_sqlite:
        engine_kwargs["connect_args"] = {"timeout": database.sqlite_busy_timeout}

    engine = create_async_engine(url, **engine_kwargs)
    if is_sqlite:
        _enable_sqlite_locking(engine)
    return engine


def isolation_level_for(engine: AsyncEngine, configured: str | None) -> str | None:
    """Return the isolation level transactions should request on ``engine``."""
    if engine.dialect.name == "sqlite":
        return None
    return configured


def make_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


def get_engine() -> AsyncEngine:
    global _engine, AsyncSessionFactory
    if _engine is None:
        settings = get_settings()
        _engine = build_engine(settings.database, debug=settings.debug)
        AsyncSessionFactory = make_session_factory(_engine)
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    if AsyncSessionFactory is None:
        get_engine()

    assert AsyncSessionFactory is not None  # for mypy
    return AsyncSessionFactory


async def init_db(engine: AsyncEngine | None = None) -> None:
    """Create database tables in development mode (migrations preferred)."""
    # 延迟导入模型，避免循环依赖
    from app.db import models  # noqa: F401

    engine = engine or get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine() -> None:
    global _engine, AsyncSessionFactory
    if _engine is not None:
        await _engine.dispose()
        logger.info("database engine disposed")
    _engine = None
    AsyncSessionFactory = None
