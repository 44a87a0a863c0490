"""
Lifecycle: tracked tasks, cancellable handles for scheduled work, and the
ordered shutdown that releases them.

    from lifecycle import ShutdownCoordinator, TaskRegistry, HandleGroup
    from lifecycle.handlers import DashboardShutdownHandler
"""

from .shutdown_coordinator import ShutdownCoordinator
from .task_registry import TaskRegistry, TaskCategory, TaskInfo, create_tracked_task
from .handles import ScheduledHandle, HandleGroup
from .shutdown_protocol import IShutdownHandler
from . import handlers

__all__ = [
    "ShutdownCoordinator",
    "TaskRegistry",
    "TaskCategory",
    "TaskInfo",
    "create_tracked_task",
    "ScheduledHandle",
    "HandleGroup",
    "IShutdownHandler",
    "handlers",
]
