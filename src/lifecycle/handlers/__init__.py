"""Shutdown steps registered with the ShutdownCoordinator, by descending priority."""

from .dashboard_shutdown_handler import DashboardShutdownHandler
from .api_server_shutdown_handler import APIServerShutdownHandler
from .all_tasks_cancellation_handler import AllTasksCancellationHandler

__all__ = [
    "DashboardShutdownHandler",
    "APIServerShutdownHandler",
    "AllTasksCancellationHandler",
]
