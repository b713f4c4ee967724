"""
TMDB (The Movie Database) metadata provider.

Searches movies and TV shows and fetches season details from TMDB API v3.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

import aiohttp

from openshelf.errors import ErrorKind, Result
from openshelf.index.models import MEDIA_TYPE_MOVIE, MEDIA_TYPE_TV
from openshelf.media.providers.base import MetadataSearchProvider, SearchMatch, SeasonDetails

logger = logging.getLogger(__name__)


class TMDBProvider(MetadataSearchProvider):
    """
    The Movie Database (TMDB) metadata provider.

    Requires a TMDB API key (v3).
    Get one at: https://www.themoviedb.org/settings/api
    """

    BASE_URL = "https://api.themoviedb.org/3"

    def __init__(
        self,
        api_key: str,
        proxy: Optional[str] = None,
        language: str = "zh-CN",
        include_adult: bool = False,
        timeout: float = 30.0,
    ):
        """
        Initialize TMDB provider.

        Args:
            api_key: TMDB API key (v3).
            proxy: Optional HTTP proxy for all TMDB requests.
            language: Language for metadata (e.g., "zh-CN").
            include_adult: Include adult content in searches.
            timeout: Total request timeout in seconds.
        """
        super().__init__(api_key, proxy, language)
        self.include_adult = include_adult
        self.timeout = timeout
        self._session: Optional[aiohttp.ClientSession] = None

    @property
    def name(self) -> str:
        return "TMDB"

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Get or create HTTP session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout)
            )
        return self._session

    async def _request(
        self, endpoint: str, params: Optional[Dict[str, Any]] = None
    ) -> Result[Dict[str, Any]]:
        """Make API request to TMDB."""
        session = await self._ensure_session()

        url = f"{self.BASE_URL}{endpoint}"
        request_params = {
            "api_key": self.api_key,
            "language": self.language,
        }
        if params:
            request_params.update(params)

        try:
            async with session.get(url, params=request_params, proxy=self.proxy) as response:
                if response.status == 200:
                    data = await response.json()
                    if not isinstance(data, dict):
                        return Result.err(ErrorKind.INVALID_RESPONSE, "expected a JSON object")
                    return Result.ok(data)
                elif response.status == 401:
                    logger.error("TMDB API key invalid")
                    return Result.err(ErrorKind.UNAUTHORIZED, "TMDB API key invalid")
                elif response.status == 404:
                    logger.debug(f"TMDB resource not found: {endpoint}")
                    return Result.err(ErrorKind.NOT_FOUND, f"not found: {endpoint}")
                logger.warning(f"TMDB API error: HTTP {response.status}")
                return Result.err(ErrorKind.HTTP_ERROR, f"HTTP {response.status}")
        except aiohttp.ContentTypeError as e:
            logger.error(f"TMDB returned a non-JSON body: {e}")
            return Result.err(ErrorKind.INVALID_RESPONSE, str(e))
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"TMDB request failed: {e}")
            return Result.err(ErrorKind.NETWORK_ERROR, str(e) or e.__class__.__name__)

    async def search(self, query: str, year: Optional[int] = None) -> Result[SearchMatch]:
        """Search TMDB for movies and TV shows using multi-search."""
        logger.debug(f"TMDB search: {query} (year={year})")

        params: Dict[str, Any] = {
            "query": query,
            "include_adult": str(self.include_adult).lower(),
        }

        response = await self._request("/search/multi", params)
        if not response.is_ok:
            return Result.err(response.kind, response.message)

        candidates = self._parse_search_results(response.value.get("results"))
        best = self.pick_best_match(candidates, year)
        if best is None:
            return Result.err(ErrorKind.NOT_FOUND, f"no TMDB match for {query!r}")

        return Result.ok(best)

    async def get_tv_season_details(
        self, tv_id: int, season_number: int
    ) -> Result[SeasonDetails]:
        """Get details for one season of a TV show."""
        response = await self._request(f"/tv/{tv_id}/season/{season_number}")
        if not response.is_ok:
            return Result.err(response.kind, response.message)

        data = response.value
        try:
            details = SeasonDetails(
                season_number=int(data.get("season_number", season_number)),
                name=self._clean_text(data.get("name")) or f"Season {season_number}",
                poster_path=data.get("poster_path") or None,
                overview=data.get("overview") or None,
                air_date=data.get("air_date") or None,
            )
        except (TypeError, ValueError) as e:
            return Result.err(ErrorKind.INVALID_RESPONSE, f"bad season payload: {e}")

        return Result.ok(details)

    def _parse_search_results(self, results: Any) -> List[SearchMatch]:
        """Keep movie and TV hits from a multi-search payload."""
        if not isinstance(results, list):
            return []

        matches = []
        for item in results[:20]:
            if not isinstance(item, dict):
                continue
            media_type = item.get("media_type")
            if media_type not in (MEDIA_TYPE_MOVIE, MEDIA_TYPE_TV):
                continue
            try:
                matches.append(self._parse_search_result(item))
            except (KeyError, TypeError, ValueError) as e:
                logger.debug(f"Error parsing search result: {e}")

        return matches

    def _parse_search_result(self, data: Dict[str, Any]) -> SearchMatch:
        """Parse a movie or TV search hit."""
        return SearchMatch(
            id=int(data["id"]),
            title=self._clean_text(data.get("title")) or self._clean_text(data.get("name")),
            media_type=data["media_type"],
            poster_path=data.get("poster_path"),
            release_date=(
                self._clean_text(data.get("release_date"))
                or self._clean_text(data.get("first_air_date"))
            ),
            overview=self._clean_text(data.get("overview")),
            vote_average=data.get("vote_average") or 0,
        )

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
