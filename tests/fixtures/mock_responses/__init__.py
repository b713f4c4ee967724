"""
Mock API Responses

Pre-defined mock responses for external service testing.
"""

from .openlist_responses import (
    OPENLIST_EMPTY_DIR,
    OPENLIST_LIST_ROOT,
    OPENLIST_LOGIN_FAILED,
    OPENLIST_LOGIN_SUCCESS,
)
from .tmdb_responses import (
    TMDB_MULTI_SEARCH,
    TMDB_MULTI_SEARCH_EMPTY,
    TMDB_MULTI_SEARCH_PERSON_ONLY,
    TMDB_TV_SEASON_DETAILS,
)

__all__ = [
    "OPENLIST_EMPTY_DIR",
    "OPENLIST_LIST_ROOT",
    "OPENLIST_LOGIN_FAILED",
    "OPENLIST_LOGIN_SUCCESS",
    "TMDB_MULTI_SEARCH",
    "TMDB_MULTI_SEARCH_EMPTY",
    "TMDB_MULTI_SEARCH_PERSON_ONLY",
    "TMDB_TV_SEASON_DETAILS",
]
