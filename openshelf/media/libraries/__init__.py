"""
Remote media libraries.

Supports:
- OpenList / AList
"""

from openshelf.media.libraries.base import ListData, ListResponse, RemoteEntry, RemoteLister
from openshelf.media.libraries.openlist import OpenListClient

__all__ = [
    "ListData",
    "ListResponse",
    "OpenListClient",
    "RemoteEntry",
    "RemoteLister",
]
