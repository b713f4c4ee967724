"""
Base metadata provider classes.

Abstract interface for catalog search used by the library refresh.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, List, Optional

from openshelf.errors import Result

logger = logging.getLogger(__name__)


@dataclass
class SearchMatch:
    """Best catalog match for a folder title."""

    id: int
    title: str
    media_type: str  # "movie" or "tv"
    poster_path: Optional[str] = None
    release_date: str = ""
    overview: str = ""
    vote_average: float = 0

    @property
    def year(self) -> Optional[int]:
        """Release year parsed from ``release_date``."""
        if len(self.release_date) >= 4 and self.release_date[:4].isdigit():
            return int(self.release_date[:4])
        return None


@dataclass
class SeasonDetails:
    """Season-level data for a TV match."""

    season_number: int
    name: str
    poster_path: Optional[str] = None
    overview: Optional[str] = None
    air_date: Optional[str] = None


class MetadataSearchProvider(ABC):
    """
    Abstract base class for catalog search providers.

    Implementations return ``Result`` values instead of raising on
    transport or API failures.
    """

    def __init__(self, api_key: str, proxy: Optional[str] = None, language: str = "zh-CN"):
        """
        Initialize the provider.

        Args:
            api_key: API key for the service.
            proxy: Optional HTTP proxy URL.
            language: Preferred language for metadata.
        """
        self.api_key = api_key
        self.proxy = proxy
        self.language = language

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name."""
        pass

    @abstractmethod
    async def search(self, query: str, year: Optional[int] = None) -> Result[SearchMatch]:
        """
        Find the best movie or TV match for a title.

        Args:
            query: Cleaned title.
            year: Optional release year hint.

        Returns:
            Result holding the best SearchMatch.
        """
        pass

    @abstractmethod
    async def get_tv_season_details(
        self, tv_id: int, season_number: int
    ) -> Result[SeasonDetails]:
        """
        Get details for one season of a TV show.

        Args:
            tv_id: Provider-specific show ID.
            season_number: Season number.

        Returns:
            Result holding SeasonDetails.
        """
        pass

    async def close(self) -> None:
        """Release any network resources."""

    @staticmethod
    def pick_best_match(
        candidates: List[SearchMatch], year: Optional[int] = None
    ) -> Optional[SearchMatch]:
        """
        Choose the best candidate.

        If a year is given, the first candidate released that year wins;
        otherwise the first candidate is the best match.
        """
        if not candidates:
            return None

        if year:
            for candidate in candidates:
                if candidate.year == year:
                    return candidate

        return candidates[0]

    @staticmethod
    def _clean_text(value: Any) -> str:
        return value if isinstance(value, str) else ""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} proxy={self.proxy!r} language={self.language!r}>"


__all__ = ["MetadataSearchProvider", "SearchMatch", "SeasonDetails"]
