"""Persisted metadata index: data model and folder keys."""

from openshelf.index.keys import generate_folder_key
from openshelf.index.models import FolderInfo, MetaInfo, RemoteFolder

__all__ = [
    "FolderInfo",
    "MetaInfo",
    "RemoteFolder",
    "generate_folder_key",
]
