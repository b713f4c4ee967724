"""
Index data model.

``MetaInfo`` is the persisted index the browsing front end reads: one
``FolderInfo`` per top-level folder on the remote storage, keyed by the
folder key. It is stored as a single JSON document without a schema
version, so ``from_dict`` checks field presence instead of trusting the
payload.
"""

import json
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

MEDIA_TYPE_MOVIE = "movie"
MEDIA_TYPE_TV = "tv"


def now_ms() -> int:
    """Current time as epoch milliseconds."""
    return int(time.time() * 1000)


@dataclass
class RemoteFolder:
    """A directory entry returned by the remote listing."""

    name: str
    is_dir: bool = True


@dataclass
class FolderInfo:
    """Catalog metadata resolved for one remote folder."""

    folder_name: str
    tmdb_id: int = 0
    title: str = ""
    overview: str = ""
    poster_path: Optional[str] = None
    release_date: str = ""
    vote_average: float = 0
    media_type: str = MEDIA_TYPE_MOVIE

    # TV only, set when a season was parsed from the folder name
    season_number: Optional[int] = None
    season_name: Optional[str] = None

    last_updated: int = field(default_factory=now_ms)
    failed: bool = False

    @classmethod
    def placeholder(cls, folder_name: str) -> "FolderInfo":
        """Entry kept for a folder that has no usable catalog match."""
        return cls(
            folder_name=folder_name,
            tmdb_id=0,
            title=folder_name,
            overview="",
            poster_path=None,
            release_date="",
            vote_average=0,
            media_type=MEDIA_TYPE_MOVIE,
            failed=True,
        )

    @property
    def is_tv(self) -> bool:
        return self.media_type == MEDIA_TYPE_TV

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the persisted JSON layout."""
        data: Dict[str, Any] = {
            "folderName": self.folder_name,
            "tmdb_id": self.tmdb_id,
            "title": self.title,
            "poster_path": self.poster_path,
            "release_date": self.release_date,
            "overview": self.overview,
            "vote_average": self.vote_average,
            "media_type": self.media_type,
        }
        if self.season_number is not None:
            data["season_number"] = self.season_number
        if self.season_name is not None:
            data["season_name"] = self.season_name
        data["last_updated"] = self.last_updated
        data["failed"] = self.failed
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FolderInfo":
        """
        Build from a persisted entry.

        Raises:
            ValueError: If the entry has no usable folder name.
        """
        folder_name = data.get("folderName")
        if not isinstance(folder_name, str) or not folder_name:
            raise ValueError("entry has no folderName")

        failed = bool(data.get("failed", False))
        season_number = data.get("season_number")

        info = cls(
            folder_name=folder_name,
            tmdb_id=int(data.get("tmdb_id") or 0),
            title=data.get("title") or folder_name,
            overview=data.get("overview") or "",
            poster_path=data.get("poster_path"),
            release_date=data.get("release_date") or "",
            vote_average=data.get("vote_average") or 0,
            media_type=data.get("media_type") or MEDIA_TYPE_MOVIE,
            season_number=int(season_number) if season_number is not None else None,
            season_name=data.get("season_name"),
            last_updated=int(data.get("last_updated") or 0),
            failed=failed,
        )
        if failed:
            # A failed entry never carries catalog identity
            info.tmdb_id = 0
            info.overview = ""
        return info


@dataclass
class MetaInfo:
    """The full persisted index for all scanned folders."""

    folders: Dict[str, FolderInfo] = field(default_factory=dict)
    last_refresh: int = field(default_factory=now_ms)

    @classmethod
    def empty(cls) -> "MetaInfo":
        return cls()

    def name_index(self) -> Dict[str, str]:
        """Reverse index from folder name to folder key."""
        return {info.folder_name: key for key, info in self.folders.items()}

    def find_key(self, folder_name: str) -> Optional[str]:
        """Key of the entry for ``folder_name``, if any."""
        for key, info in self.folders.items():
            if info.folder_name == folder_name:
                return key
        return None

    @property
    def failed_count(self) -> int:
        return sum(1 for info in self.folders.values() if info.failed)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "folders": {key: info.to_dict() for key, info in self.folders.items()},
            "last_refresh": self.last_refresh,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MetaInfo":
        """
        Build from a persisted document.

        Malformed folder entries are skipped rather than failing the load.
        """
        if not isinstance(data, dict):
            raise ValueError("metainfo document must be an object")

        raw_folders = data.get("folders")
        folders: Dict[str, FolderInfo] = {}
        if isinstance(raw_folders, dict):
            for key, entry in raw_folders.items():
                if not isinstance(entry, dict):
                    logger.warning(f"Skipping malformed metainfo entry {key!r}")
                    continue
                try:
                    folders[str(key)] = FolderInfo.from_dict(entry)
                except (TypeError, ValueError) as e:
                    logger.warning(f"Skipping malformed metainfo entry {key!r}: {e}")

        last_refresh = data.get("last_refresh")
        return cls(
            folders=folders,
            last_refresh=int(last_refresh) if isinstance(last_refresh, (int, float)) else now_ms(),
        )

    @classmethod
    def from_json(cls, content: str) -> "MetaInfo":
        """
        Parse a serialized document.

        Raises:
            ValueError: If the content is not valid JSON or not an object.
        """
        return cls.from_dict(json.loads(content))
