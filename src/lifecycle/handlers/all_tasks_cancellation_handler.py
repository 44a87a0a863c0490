import asyncio
from typing import Iterable, Optional

from utils.logger import get_logger, LogCategory
from lifecycle.task_registry import TaskRegistry

log = get_logger().for_category(LogCategory.SHUTDOWN)


class AllTasksCancellationHandler:
    """
    Last step (priority 30): cancels whatever tracked task is still
    running, except the one executing the shutdown and ``exclude_tasks``.
    """

    shutdown_priority = 30

    def __init__(self, exclude_tasks: Optional[Iterable[asyncio.Task]] = None):
        self.exclude_tasks = list(exclude_tasks or ())

    async def shutdown(self) -> None:
        keep = [*self.exclude_tasks, asyncio.current_task()]
        leftovers = TaskRegistry.instance().get_tasks_for_shutdown(exclude=[t for t in keep if t is not None])
        if not leftovers:
            return

        log.info(f"Cancelling {len(leftovers)} leftover task(s)")
        for task in leftovers:
            task.cancel(msg="shutdown")
        await asyncio.gather(*leftovers, return_exceptions=True)
