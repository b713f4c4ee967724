"""Scan task tracking."""

from openshelf.tasks.scan_task import ScanCounts, ScanTask, ScanTaskStatus, ScanTaskTracker

__all__ = ["ScanCounts", "ScanTask", "ScanTaskStatus", "ScanTaskTracker"]
