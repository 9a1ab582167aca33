"""
Database connection and session management.

Creates the async SQLAlchemy engine and session factory used by the bot.
"""

from typing import Any

from loguru import logger
from sqlalchemy import event
from sqlalchemy.engine.url import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from app.config.settings import settings


def _enable_sqlite_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    """SQLite leaves foreign keys off unless enabled per connection."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(database_url: str, echo: bool = False, **kwargs: Any) -> AsyncEngine:
    """
    Create async engine for the given URL.

    Args:
        database_url: SQLAlchemy URL (postgresql+asyncpg or sqlite+aiosqlite)
        echo: Log SQL statements
        **kwargs: Extra create_async_engine arguments

    Returns:
        Configured async engine
    """
    url = make_url(database_url)

    if url.drivername.startswith("sqlite"):
        engine = create_async_engine(database_url, echo=echo, **kwargs)
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        logger.debug("Using SQLite database (development mode)")
        return engine

    kwargs.setdefault("pool_pre_ping", True)
    kwargs.setdefault("pool_recycle", 3600)
    return create_async_engine(database_url, echo=echo, **kwargs)


def build_session_maker(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory with objects kept usable after commit."""
    return async_sessionmaker(
        bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


engine = build_engine(settings.database_url, echo=settings.database_echo)
async_session_maker = build_session_maker(engine)
