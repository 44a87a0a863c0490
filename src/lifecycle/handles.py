"""
Disposable handles for scheduled work.

Every periodic or timed operation (count-up animation, jitter refresh,
notification dismissal, ripple cleanup) hands back a ScheduledHandle. The
owner releases it explicitly; a HandleGroup releases everything it holds
when its scope ends.

Example:
    async with HandleGroup("dashboard") as handles:
        handles.add(animator.animate_to("avgTemp"))
        handles.add(refresher.start(targets))
        ...
    # every handle released here, even on error
"""

from __future__ import annotations

import asyncio
import contextlib
from typing import Any, List, Optional

from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.TASK)


class ScheduledHandle:
    """Ownership of one scheduled asyncio task."""

    def __init__(self, task: asyncio.Task, description: str):
        self._task = task
        self.description = description

    @property
    def task(self) -> asyncio.Task:
        return self._task

    @property
    def done(self) -> bool:
        return self._task.done()

    async def wait(self) -> Any:
        """Wait for natural completion and return the task result."""
        return await self._task

    async def release(self) -> None:
        """Cancel the task (if still running) and wait until it is gone."""
        if not self._task.done():
            self._task.cancel()
            log.debug(f"Released handle: {self.description}")
        with contextlib.suppress(asyncio.CancelledError):
            await self._task

    def __repr__(self):
        state = "done" if self.done else "running"
        return f"ScheduledHandle({self.description!r}, {state})"


class HandleGroup:
    """
    Collection of handles released together.

    Finished handles are pruned on every add() so the group does not grow
    with completed animations.
    """

    def __init__(self, name: str = "handles"):
        self.name = name
        self._handles: List[ScheduledHandle] = []
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def add(self, handle: Optional[ScheduledHandle]) -> Optional[ScheduledHandle]:
        """
        Take ownership of a handle. None (nothing scheduled) is ignored.

        Raises:
            RuntimeError: the group was already released; the handle's task
                is cancelled so it does not outlive the group
        """
        if handle is None:
            return None
        if self._closed:
            handle.task.cancel()
            raise RuntimeError(f"HandleGroup '{self.name}' already released")

        self._handles = [h for h in self._handles if not h.done]
        self._handles.append(handle)
        return handle

    def active(self) -> List[ScheduledHandle]:
        return [h for h in self._handles if not h.done]

    def __len__(self):
        return len(self.active())

    async def release_all(self) -> None:
        """Release every handle; the group refuses new handles afterwards."""
        self._closed = True
        handles, self._handles = self._handles, []

        running = [h for h in handles if not h.done]
        if running:
            log.info(f"Releasing {len(running)} handles", group=self.name)

        for handle in handles:
            await handle.release()

    async def __aenter__(self) -> "HandleGroup":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.release_all()
