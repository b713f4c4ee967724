"""
Database connection and session management.

Provides the async engine and session factory used by the metadata store.
"""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from openshelf.config import get_config
from openshelf.database.models import Base

logger = logging.getLogger(__name__)

# Async engine and session factory
_async_engine: Optional[AsyncEngine] = None
_async_session_factory: Optional[async_sessionmaker[AsyncSession]] = None


def _get_async_url(url: str) -> str:
    """Convert sync database URL to async variant."""
    if url.startswith("sqlite:///"):
        return url.replace("sqlite:///", "sqlite+aiosqlite:///")
    elif url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://")
    return url


def _get_pool_kwargs(url: str) -> dict:
    """Get pool configuration for the database type."""
    # SQLite with aiosqlite needs StaticPool for single connection reuse
    if "sqlite" in url:
        return {
            "poolclass": StaticPool,
            "connect_args": {"check_same_thread": False},
        }

    return {
        "pool_size": 5,
        "max_overflow": 10,
        "pool_timeout": 30,
        "pool_recycle": 3600,
        "pool_pre_ping": True,
    }


async def init_db(database_url: Optional[str] = None, echo: Optional[bool] = None) -> AsyncEngine:
    """
    Initialize the database connection and create tables.

    Args:
        database_url: Override for the configured database URL.
        echo: Override for SQL echo logging.

    Returns:
        The async engine.
    """
    global _async_engine, _async_session_factory

    config = get_config()
    async_url = _get_async_url(database_url or config.database.url)

    _async_engine = create_async_engine(
        async_url,
        echo=config.database.echo if echo is None else echo,
        **_get_pool_kwargs(async_url),
    )
    _async_session_factory = async_sessionmaker(
        _async_engine,
        expire_on_commit=False,
    )

    async with _async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    logger.info(f"Database initialized: {_async_engine.url.render_as_string(hide_password=True)}")
    return _async_engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """
    Get the async session factory.

    Raises:
        RuntimeError: If init_db() has not been awaited.
    """
    if _async_session_factory is None:
        raise RuntimeError("Database not initialized; call init_db() first")
    return _async_session_factory


async def close_db() -> None:
    """Close all database connections."""
    global _async_engine, _async_session_factory

    if _async_engine is not None:
        await _async_engine.dispose()
        logger.info("Database connections closed")

    _async_engine = None
    _async_session_factory = None
