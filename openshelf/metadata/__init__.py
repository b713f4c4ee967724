"""Library refresh pipeline."""

from openshelf.metadata.refresh_task import LibraryRefresher, ScanPhase

__all__ = ["LibraryRefresher", "ScanPhase"]
