from __future__ import annotations

from typing import TYPE_CHECKING

from utils.logger import get_logger, LogCategory

if TYPE_CHECKING:
    from controllers.dashboard_controller import DashboardController

log = get_logger().for_category(LogCategory.SHUTDOWN)


class DashboardShutdownHandler:
    """
    Releases everything the controller scheduled: count-up runs, the live
    refresh loop, notification and ripple timers. Priority 80, first.
    """

    shutdown_priority = 80

    def __init__(self, controller: "DashboardController"):
        self.controller = controller

    async def shutdown(self) -> None:
        pending = len(self.controller.running())
        await self.controller.shutdown()
        log.info("Dashboard timers released", released=pending)
