"""
Metadata store.

Persists string documents under global keys. The store itself is a plain
read/write contract: read-modify-write sequences are the caller's
responsibility and are not transactional across calls.
"""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from openshelf.database.connection import get_session_factory
from openshelf.database.models import GlobalValue

logger = logging.getLogger(__name__)


class MetadataStore:
    """Global key-value store backed by the ``global_values`` table."""

    def __init__(self, session_factory: Optional[async_sessionmaker[AsyncSession]] = None):
        """
        Args:
            session_factory: Session factory to use. Defaults to the one
                created by ``init_db()``, resolved on first use.
        """
        self._session_factory = session_factory

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        if self._session_factory is None:
            self._session_factory = get_session_factory()
        return self._session_factory

    async def get_global_value(self, key: str) -> Optional[str]:
        """Return the value stored under ``key``, or None."""
        async with self.session_factory() as session:
            row = await session.get(GlobalValue, key)
            return row.value if row is not None else None

    async def set_global_value(self, key: str, value: str) -> None:
        """Insert or replace the value stored under ``key``."""
        async with self.session_factory() as session:
            try:
                await session.merge(GlobalValue(key=key, value=value))
                await session.commit()
            except Exception:
                await session.rollback()
                raise

        logger.debug(f"Stored global value {key!r} ({len(value)} chars)")

    async def delete_global_value(self, key: str) -> bool:
        """Remove ``key``. Returns True if it existed."""
        async with self.session_factory() as session:
            row = await session.get(GlobalValue, key)
            if row is None:
                return False
            await session.delete(row)
            await session.commit()
            return True
