"""
Metadata providers for folder matching.

Supports:
- TMDB (The Movie Database)
"""

from openshelf.media.providers.base import MetadataSearchProvider, SearchMatch, SeasonDetails
from openshelf.media.providers.tmdb import TMDBProvider

__all__ = [
    "MetadataSearchProvider",
    "SearchMatch",
    "SeasonDetails",
    "TMDBProvider",
]
