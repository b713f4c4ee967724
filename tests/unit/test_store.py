"""
Unit tests for the metadata store and the index read path.
"""

from unittest.mock import AsyncMock

import pytest

from openshelf.cache.metainfo import MetaInfoCache
from openshelf.database import connection
from openshelf.database.store import MetadataStore
from openshelf.index.models import MetaInfo
from openshelf.index.reader import MetaInfoReader, load_meta_info
from tests.fixtures.factories import MetaInfoFactory


@pytest.mark.unit
class TestConnection:
    """Tests for engine and session factory setup."""

    def test_async_url_conversion(self):
        assert connection._get_async_url("sqlite:///./a.db") == "sqlite+aiosqlite:///./a.db"
        assert connection._get_async_url("postgresql://u@h/db") == "postgresql+asyncpg://u@h/db"
        assert connection._get_async_url("sqlite+aiosqlite:///x.db") == "sqlite+aiosqlite:///x.db"

    def test_session_factory_requires_init(self):
        with pytest.raises(RuntimeError):
            connection.get_session_factory()

    @pytest.mark.asyncio
    async def test_init_and_close(self):
        await connection.init_db("sqlite:///:memory:")
        try:
            store = MetadataStore()
            await store.set_global_value("k", "v")
            assert await store.get_global_value("k") == "v"
        finally:
            await connection.close_db()

        with pytest.raises(RuntimeError):
            connection.get_session_factory()


@pytest.mark.unit
class TestMetadataStore:
    """Tests for MetadataStore."""

    @pytest.mark.asyncio
    async def test_missing_key(self, store: MetadataStore):
        assert await store.get_global_value("video.metainfo") is None

    @pytest.mark.asyncio
    async def test_set_and_get(self, store: MetadataStore):
        await store.set_global_value("video.metainfo", '{"folders": {}}')

        assert await store.get_global_value("video.metainfo") == '{"folders": {}}'

    @pytest.mark.asyncio
    async def test_overwrite(self, store: MetadataStore):
        await store.set_global_value("key", "first")
        await store.set_global_value("key", "second")

        assert await store.get_global_value("key") == "second"

    @pytest.mark.asyncio
    async def test_delete(self, store: MetadataStore):
        await store.set_global_value("key", "value")

        assert await store.delete_global_value("key") is True
        assert await store.delete_global_value("key") is False
        assert await store.get_global_value("key") is None


@pytest.mark.unit
class TestLoadMetaInfo:
    """Tests for load_meta_info."""

    @pytest.mark.asyncio
    async def test_absent(self, store: MetadataStore):
        assert await load_meta_info(store) is None

    @pytest.mark.asyncio
    async def test_stored_document(self, store: MetadataStore):
        meta_info = MetaInfoFactory.create_for_names(["A", "B"])
        await store.set_global_value("video.metainfo", meta_info.to_json())

        assert await load_meta_info(store) == meta_info

    @pytest.mark.asyncio
    async def test_invalid_json_is_absent(self, store: MetadataStore):
        await store.set_global_value("video.metainfo", "{broken")

        assert await load_meta_info(store) is None

    @pytest.mark.asyncio
    async def test_store_error_is_absent(self):
        broken_store = AsyncMock(spec=MetadataStore)
        broken_store.get_global_value.side_effect = RuntimeError("database is locked")

        assert await load_meta_info(broken_store) is None


@pytest.mark.unit
class TestMetaInfoReader:
    """Tests for MetaInfoReader."""

    @pytest.mark.asyncio
    async def test_nothing_stored(self, store: MetadataStore, cache: MetaInfoCache):
        reader = MetaInfoReader(store, cache)

        assert await reader.get("/media") is None

    @pytest.mark.asyncio
    async def test_reads_store_and_populates_cache(self, store: MetadataStore, cache: MetaInfoCache):
        meta_info = MetaInfoFactory.create_for_names(["A"])
        await store.set_global_value("video.metainfo", meta_info.to_json())
        reader = MetaInfoReader(store, cache)

        loaded = await reader.get("/media")

        assert loaded == meta_info
        assert await cache.get("/media") is loaded

    @pytest.mark.asyncio
    async def test_cache_hit_skips_store(self, cache: MetaInfoCache):
        cached = MetaInfo.empty()
        await cache.set("/media", cached)
        store = AsyncMock(spec=MetadataStore)
        reader = MetaInfoReader(store, cache)

        assert await reader.get("/media") is cached
        store.get_global_value.assert_not_called()
