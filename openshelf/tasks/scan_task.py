"""
Scan task tracking.

Keeps the externally observable progress/result record of each library
refresh. Observers poll ``get()``; the refresh pipeline pushes progress
and the terminal state.
"""

import logging
import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from threading import Lock
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


class ScanTaskStatus(str, Enum):
    """Status of a scan task."""
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class ScanCounts:
    """Outcome counts of a finished scan."""
    total: int = 0
    new: int = 0
    existing: int = 0
    errors: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "total": self.total,
            "new": self.new,
            "existing": self.existing,
            "errors": self.errors,
        }


@dataclass
class ScanTask:
    """Progress record for one refresh invocation."""

    task_id: str
    status: ScanTaskStatus = ScanTaskStatus.RUNNING
    current: int = 0
    total: int = 0
    current_item: Optional[str] = None
    result: Optional[ScanCounts] = None
    error_message: Optional[str] = None

    created_at: float = field(default_factory=time.time)
    updated_at: float = field(default_factory=time.time)
    completed_at: Optional[float] = None

    @property
    def is_terminal(self) -> bool:
        return self.status in (ScanTaskStatus.COMPLETED, ScanTaskStatus.FAILED)

    @property
    def percent_complete(self) -> float:
        if self.total == 0:
            return 0.0
        return self.current / self.total * 100

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "task_id": self.task_id,
            "status": self.status.value,
            "current": self.current,
            "total": self.total,
            "current_item": self.current_item,
            "result": self.result.to_dict() if self.result else None,
            "error_message": self.error_message,
            "created_at": datetime.fromtimestamp(self.created_at).isoformat(),
            "completed_at": (
                datetime.fromtimestamp(self.completed_at).isoformat()
                if self.completed_at else None
            ),
        }


class ScanTaskTracker:
    """
    In-process registry of scan tasks.

    Terminal tasks are kept for ``retention_seconds`` so that clients can
    read the final result, then removed by ``cleanup_old()``.
    """

    def __init__(self, retention_seconds: int = 3600):
        self.retention_seconds = retention_seconds
        self._tasks: Dict[str, ScanTask] = {}
        self._lock = Lock()

    def create(self) -> str:
        """Register a new running task and return its id."""
        task_id = str(uuid.uuid4())
        with self._lock:
            self._tasks[task_id] = ScanTask(task_id=task_id)
        logger.debug(f"Scan task created: {task_id}")
        return task_id

    def get(self, task_id: str) -> Optional[ScanTask]:
        with self._lock:
            return self._tasks.get(task_id)

    def list_tasks(self) -> List[ScanTask]:
        with self._lock:
            return sorted(self._tasks.values(), key=lambda t: t.created_at, reverse=True)

    def update_progress(
        self,
        task_id: str,
        current: int,
        total: int,
        current_item: Optional[str] = None,
    ) -> None:
        with self._lock:
            task = self._tasks.get(task_id)
            if task is None:
                logger.debug(f"Progress for unknown scan task ignored: {task_id}")
                return
            if task.is_terminal:
                return
            task.current = current
            task.total = total
            task.current_item = current_item
            task.updated_at = time.time()

    def complete(self, task_id: str, result: ScanCounts) -> None:
        with self._lock:
            task = self._tasks.get(task_id)
            if task is None:
                logger.debug(f"Completion for unknown scan task ignored: {task_id}")
                return
            task.status = ScanTaskStatus.COMPLETED
            task.result = result
            task.current_item = None
            task.completed_at = task.updated_at = time.time()

        logger.info(f"Scan task completed: {task_id} {result.to_dict()}")

    def fail(self, task_id: str, message: str) -> None:
        with self._lock:
            task = self._tasks.get(task_id)
            if task is None:
                logger.debug(f"Failure for unknown scan task ignored: {task_id}")
                return
            task.status = ScanTaskStatus.FAILED
            task.error_message = message
            task.completed_at = task.updated_at = time.time()

        logger.error(f"Scan task failed: {task_id}: {message}")

    def cleanup_old(self) -> int:
        """Remove terminal tasks older than the retention window."""
        cutoff = time.time() - self.retention_seconds
        with self._lock:
            stale_ids = [
                task_id for task_id, task in self._tasks.items()
                if task.is_terminal and (task.completed_at or task.created_at) < cutoff
            ]
            for task_id in stale_ids:
                del self._tasks[task_id]

        if stale_ids:
            logger.debug(f"Removed {len(stale_ids)} old scan tasks")
        return len(stale_ids)
