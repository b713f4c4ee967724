"""Database models, connection management and the global value store."""

from openshelf.database.connection import close_db, get_session_factory, init_db
from openshelf.database.models import Base, GlobalValue
from openshelf.database.store import MetadataStore

__all__ = [
    "Base",
    "GlobalValue",
    "MetadataStore",
    "close_db",
    "get_session_factory",
    "init_db",
]
