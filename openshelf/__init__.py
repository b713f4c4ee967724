"""
OpenShelf - OpenList media library indexer

Walks an OpenList (AList) storage root, matches each top-level folder
against TMDB, and keeps an incrementally updated metadata index for a
browsing front end:
- Paginated remote listing
- Season/year aware title parsing
- Placeholder entries for unmatched folders
- Background scans with progress tracking
"""

__version__ = "1.0.0"

from openshelf.config import get_config, load_config

__all__ = [
    "__version__",
    "get_config",
    "load_config",
]
