"""
OpenShelf Test Configuration

Shared fixtures and configuration for all tests.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import AsyncGenerator, Generator
from unittest.mock import MagicMock

import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# Add project root to path
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

import openshelf.config as config_module
from openshelf.cache.metainfo import MetaInfoCache
from openshelf.config import OpenShelfConfig
from openshelf.database.models import Base
from openshelf.database.store import MetadataStore
from openshelf.tasks.scan_task import ScanTaskTracker


# ============ Database Fixtures ============


@pytest.fixture(scope="function")
async def session_factory() -> AsyncGenerator[async_sessionmaker, None]:
    """Create a session factory bound to an in-memory SQLite database."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture(scope="function")
async def store(session_factory) -> MetadataStore:
    """Metadata store backed by the in-memory database."""
    return MetadataStore(session_factory)


# ============ Pipeline Fixtures ============


@pytest.fixture
def cache() -> MetaInfoCache:
    return MetaInfoCache(ttl=300)


@pytest.fixture
def tracker() -> ScanTaskTracker:
    return ScanTaskTracker(retention_seconds=3600)


@pytest.fixture
def refresh_config() -> OpenShelfConfig:
    """Configuration with OpenList and TMDB fully set up."""
    return OpenShelfConfig(
        openlist={
            "enabled": True,
            "url": "http://openlist.local:5244",
            "username": "admin",
            "password": "secret",
            "root_path": "/media",
        },
        tmdb={"api_key": "tmdb-test-key"},
        refresh={"item_delay_seconds": 0},
    )


@pytest.fixture
def config_updater() -> MagicMock:
    """Stand-in for ConfigUpdater that records refresh stats."""
    return MagicMock()


# ============ Temporary File Fixtures ============


@pytest.fixture(scope="function")
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture(scope="function")
def temp_config_file(temp_dir: Path) -> Path:
    """Create a temporary config file."""
    config_file = temp_dir / "config.yaml"
    config_content = """
openlist:
  enabled: true
  url: "http://openlist.local:5244"
  username: "admin"
  password: "secret"
  root_path: "/media"

tmdb:
  api_key: "tmdb-test-key"
  language: "en-US"

database:
  url: "sqlite:///:memory:"

logging:
  level: "DEBUG"
  format: "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
"""
    config_file.write_text(config_content)
    return config_file


# ============ Logging Fixtures ============


@pytest.fixture
def restore_root_logger() -> Generator[logging.Logger, None, None]:
    """Put the root logger back the way it was after setup_logging() runs."""
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level

    yield root_logger

    for handler in root_logger.handlers:
        if handler not in handlers:
            handler.close()
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)


# ============ Environment Fixtures ============


@pytest.fixture(autouse=True)
def clean_environment():
    """Clean environment variables and cached config for each test."""
    # Save current environment
    original_env = os.environ.copy()

    # Remove OpenShelf-specific vars
    for key in list(os.environ.keys()):
        if key.startswith("OPENSHELF_"):
            del os.environ[key]

    config_module._config = None
    config_module._config_path = None

    yield

    # Restore original environment
    os.environ.clear()
    os.environ.update(original_env)

    config_module._config = None
    config_module._config_path = None


# ============ Markers ============


def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "network: Network access required")
