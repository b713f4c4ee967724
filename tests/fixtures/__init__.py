"""
Test Fixtures

Shared test data and mock responses.
"""

from .factories import (
    FolderInfoFactory,
    ListPageFactory,
    MetaInfoFactory,
)

__all__ = [
    "FolderInfoFactory",
    "ListPageFactory",
    "MetaInfoFactory",
]
