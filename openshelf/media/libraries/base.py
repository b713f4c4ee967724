"""
Base remote library classes.

A remote library exposes a paginated directory listing that the refresh
pipeline walks to discover top-level media folders.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from openshelf.index.models import RemoteFolder

logger = logging.getLogger(__name__)

SUCCESS_CODE = 200


@dataclass
class RemoteEntry:
    """A single file or directory in a listing page."""

    name: str
    is_dir: bool
    size: int = 0
    modified: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RemoteEntry":
        return cls(
            name=str(data.get("name", "")),
            is_dir=bool(data.get("is_dir", False)),
            size=int(data.get("size") or 0),
            modified=data.get("modified"),
        )

    def to_folder(self) -> RemoteFolder:
        return RemoteFolder(name=self.name, is_dir=self.is_dir)


@dataclass
class ListData:
    """Payload of one listing page."""

    total: int = 0
    content: List[RemoteEntry] = field(default_factory=list)


@dataclass
class ListResponse:
    """One listing page response."""

    code: int
    message: str = ""
    data: ListData = field(default_factory=ListData)

    @property
    def is_success(self) -> bool:
        return self.code == SUCCESS_CODE

    @classmethod
    def error(cls, code: int, message: str) -> "ListResponse":
        return cls(code=code, message=message)


class RemoteLister(ABC):
    """
    Abstract base class for remote directory listings.

    Implementations report failures through ``ListResponse.code`` rather
    than raising.
    """

    @abstractmethod
    async def list_directory(
        self,
        path: str,
        page: int = 1,
        per_page: int = 100,
        refresh: bool = False,
    ) -> ListResponse:
        """
        List one page of a remote directory.

        Args:
            path: Directory path on the remote storage.
            page: 1-based page number.
            per_page: Page size.
            refresh: Ask the backend to bypass its own listing cache.

        Returns:
            ListResponse for the page.
        """
        pass

    async def close(self) -> None:
        """Release any network resources."""
