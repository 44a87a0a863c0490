"""
Task Registry
-------------

Every background coroutine of the dashboard (count-up runs, the live
refresh loop, notification and ripple timers, the API server) is started
through ``create_tracked_task`` and lands here with a category and a
human description. The /system endpoints, the Socket.IO ``tasks:*``
events and the shutdown coordinator all read from this one registry.
"""

from __future__ import annotations

import asyncio
import itertools
import traceback
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum, auto
from typing import Any, Callable, Coroutine, Dict, Iterable, List, Optional

from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.TASK)


class TaskCategory(Enum):
    """What a background task belongs to."""
    API = auto()
    ANIMATION = auto()
    REFRESH = auto()
    NOTIFICATION = auto()
    INTERACTION = auto()
    SYSTEM = auto()
    BACKGROUND = auto()
    GENERAL = auto()


# finished without error, these are forgotten at once
SHORT_LIVED = frozenset({
    TaskCategory.ANIMATION,
    TaskCategory.INTERACTION,
    TaskCategory.NOTIFICATION,
})

HISTORY_LIMIT = 200

@dataclass(frozen=True)
class TaskInfo:
    id: int
    category: TaskCategory
    description: str
    created_at: str
    created_timestamp: float
    origin: str                 # "file:line in function" of the caller
    created_by: Optional[str] = None


@dataclass
class TaskRecord:
    task: asyncio.Task
    info: TaskInfo
    cancelled: bool = False
    finished_with_error: Optional[BaseException] = None
    finished_return: Optional[Any] = None
    finished_at: Optional[str] = None

    @property
    def status(self) -> str:
        if not self.task.done():
            return "running"
        if self.cancelled:
            return "cancelled"
        return "failed" if self.finished_with_error is not None else "completed"

    def to_dict(self) -> Dict[str, Any]:
        error = self.finished_with_error
        return {
            "id": self.info.id,
            "category": self.info.category.name,
            "description": self.info.description,
            "created_at": self.info.created_at,
            "created_by": self.info.created_by,
            "origin": self.info.origin,
            "status": self.status,
            "finished_at": self.finished_at,
            "error": f"{type(error).__name__}: {error}" if error else None,
        }


def _caller_origin() -> str:
    """Where the function calling this one was itself called from."""
    frames = traceback.extract_stack(limit=3)
    if len(frames) < 3:
        return "unknown"
    frame = frames[0]
    return f"{frame.filename}:{frame.lineno} in {frame.name}"


class TaskRegistry:
    """
    Process-wide record of tracked tasks.

    Records are kept after their task finishes so failures stay visible to
    the health check. Completed or cancelled count-ups, ripples and
    notifications are dropped as they finish, and at most ``history_limit``
    finished records are kept. Tests reset the singleton by clearing
    ``_instance``.
    """

    _instance: Optional["TaskRegistry"] = None

    def __init__(self, history_limit: int = HISTORY_LIMIT) -> None:
        self.history_limit = history_limit
        self._records: Dict[int, TaskRecord] = {}
        self._by_task: Dict[asyncio.Task, TaskRecord] = {}
        self._ids = itertools.count(1)

    @classmethod
    def instance(cls) -> "TaskRegistry":
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def register(
        self,
        task: asyncio.Task,
        category: TaskCategory,
        description: str,
        created_by: Optional[str] = None,
        origin: Optional[str] = None,
    ) -> int:
        now = datetime.now(timezone.utc)
        info = TaskInfo(
            id=next(self._ids),
            category=category,
            description=description,
            created_at=now.isoformat(),
            created_timestamp=now.timestamp(),
            origin=origin or _caller_origin(),
            created_by=created_by,
        )
        record = TaskRecord(task=task, info=info)
        self._records[info.id] = record
        self._by_task[task] = record

        log.debug(f"#{info.id} {category.name} started", description=description)
        task.add_done_callback(self._finished)
        return info.id

    def _finished(self, task: asyncio.Task) -> None:
        record = self._by_task.get(task)
        if record is None:
            return
        record.finished_at = datetime.now(timezone.utc).isoformat()
        tag = f"#{record.info.id} {record.info.category.name}"

        if task.cancelled():
            record.cancelled = True
            log.debug(f"{tag} cancelled")
        elif task.exception() is None:
            record.finished_return = task.result()
            log.debug(f"{tag} done")
        else:
            exc = task.exception()
            record.finished_with_error = exc
            log.error(
                f"{tag} failed: {exc}",
                description=record.info.description,
                error_type=type(exc).__name__,
                origin=record.info.origin,
            )

        if record.finished_with_error is None and record.info.category in SHORT_LIVED:
            self._forget(record)
        self._trim_history()

    def _forget(self, record: TaskRecord) -> None:
        self._records.pop(record.info.id, None)
        self._by_task.pop(record.task, None)

    def _trim_history(self) -> None:
        finished = [r for r in self._records.values() if r.task.done()]
        for record in finished[:max(0, len(finished) - self.history_limit)]:
            self._forget(record)

    def get_record(self, task: asyncio.Task) -> Optional[TaskRecord]:
        return self._by_task.get(task)

    def _select(self, keep: Callable[[TaskRecord], bool]) -> List[TaskRecord]:
        return [r for r in self._records.values() if keep(r)]

    def list_all(self) -> List[TaskRecord]:
        return list(self._records.values())

    def active(self) -> List[TaskRecord]:
        return self._select(lambda r: not r.task.done())

    def failed(self) -> List[TaskRecord]:
        return self._select(lambda r: r.finished_with_error is not None)

    def cancelled(self) -> List[TaskRecord]:
        return self._select(lambda r: r.cancelled)

    def summary(self) -> str:
        """One-line count for logs, e.g. ``Tasks: total=4, running=2, failed=0, cancelled=1``."""
        return (
            f"Tasks: total={len(self._records)}, running={len(self.active())}, "
            f"failed={len(self.failed())}, cancelled={len(self.cancelled())}"
        )

    def get_tasks_for_shutdown(self, exclude: Optional[Iterable[asyncio.Task]] = None) -> List[asyncio.Task]:
        """Unfinished tasks, minus ``exclude`` (usually the task running the shutdown)."""
        skip = set(exclude or ())
        pending = [r.task for r in self.active() if r.task not in skip]
        log.debug(f"{len(pending)} task(s) left to cancel")
        return pending


def create_tracked_task(
    coro: Coroutine,
    *,
    category: TaskCategory,
    description: str,
    created_by: Optional[str] = None,
    loop: Optional[asyncio.AbstractEventLoop] = None
) -> asyncio.Task:
    """``loop.create_task`` plus registration; the task is named after ``description``."""
    loop = loop or asyncio.get_running_loop()
    task = loop.create_task(coro, name=description)
    TaskRegistry.instance().register(
        task,
        category,
        description,
        created_by=created_by,
        origin=_caller_origin(),
    )
    return task
