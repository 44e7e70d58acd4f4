"""
Database connection and session management.

Provides connection pooling and session management for both async
(FastAPI) and sync (scripts) contexts.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import create_engine, event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import AsyncAdaptedQueuePool, QueuePool, StaticPool

from handpicked.config import get_config
from handpicked.database.models.base import Base

logger = logging.getLogger(__name__)

# Async engine and session factory (for FastAPI)
_async_engine = None
_async_session_factory = None

# Sync engine (for scripts)
_sync_engine = None
_sync_session_factory = None

_pool_stats = {
    "connections_created": 0,
    "connections_checked_out": 0,
}


def _get_async_url(url: str) -> str:
    """Convert sync database URL to async variant."""
    if url.startswith("sqlite:///"):
        return url.replace("sqlite:///", "sqlite+aiosqlite:///")
    elif url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://")
    return url


def _get_pool_kwargs(url: str, is_production: bool = False, use_async: bool = True) -> dict:
    """Get pool configuration for the database type.

    Async engines need the asyncio-adapted queue pool; QueuePool is sync only.
    """
    # SQLite with aiosqlite needs StaticPool for single connection reuse
    if "sqlite" in url:
        return {
            "poolclass": StaticPool,
            "connect_args": {"check_same_thread": False},
        }

    return {
        "poolclass": AsyncAdaptedQueuePool if use_async else QueuePool,
        "pool_size": 10,
        "max_overflow": 20,
        "pool_timeout": 30,
        "pool_recycle": 1800 if is_production else 3600,
        "pool_pre_ping": True,
    }


async def init_db(is_production: bool = False) -> None:
    """
    Initialize the database connection and create tables.

    Args:
        is_production: Use production pool settings
    """
    global _async_engine, _async_session_factory

    config = get_config()
    async_url = _get_async_url(config.database.url)
    pool_kwargs = _get_pool_kwargs(async_url, is_production)

    _async_engine = create_async_engine(
        async_url,
        echo=config.database.echo,
        **pool_kwargs,
    )

    @event.listens_for(_async_engine.sync_engine, "connect")
    def on_connect(dbapi_conn, connection_record):
        _pool_stats["connections_created"] += 1
        if "sqlite" in async_url:
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.close()

    @event.listens_for(_async_engine.sync_engine, "checkout")
    def on_checkout(dbapi_conn, connection_record, connection_proxy):
        _pool_stats["connections_checked_out"] += 1

    _async_session_factory = async_sessionmaker(
        _async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with _async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    logger.info(f"Database initialized: {_async_engine.url.render_as_string(hide_password=True)}")


def init_sync_db() -> None:
    """Initialize synchronous database connection (for scripts)."""
    global _sync_engine, _sync_session_factory

    config = get_config()
    pool_kwargs = _get_pool_kwargs(config.database.url, use_async=False)

    _sync_engine = create_engine(
        config.database.url,
        echo=config.database.echo,
        **pool_kwargs,
    )

    _sync_session_factory = sessionmaker(
        _sync_engine,
        class_=Session,
        expire_on_commit=False,
    )

    Base.metadata.create_all(_sync_engine)


@asynccontextmanager
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Get an async database session."""
    if _async_session_factory is None:
        await init_db()

    async with _async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions."""
    async with get_session() as session:
        yield session


def get_sync_session() -> Session:
    """Get a synchronous database session."""
    if _sync_session_factory is None:
        init_sync_db()
    return _sync_session_factory()


def get_pool_stats() -> dict:
    """Get connection pool statistics."""
    stats = dict(_pool_stats)

    if _async_engine is not None:
        pool = _async_engine.sync_engine.pool
        if hasattr(pool, "checkedout"):
            stats["checked_out"] = pool.checkedout()
        if hasattr(pool, "size"):
            stats["pool_size"] = pool.size()

    return stats


async def close_db() -> None:
    """Close database connections and cleanup."""
    global _async_engine, _async_session_factory

    if _async_engine is not None:
        await _async_engine.dispose()
        _async_engine = None
        _async_session_factory = None
        logger.info("Database connections closed")
