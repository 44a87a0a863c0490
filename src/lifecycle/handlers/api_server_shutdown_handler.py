from __future__ import annotations

from typing import TYPE_CHECKING

from utils.logger import get_logger, LogCategory

if TYPE_CHECKING:
    from lifecycle.api_server_wrapper import APIServerWrapper

log = get_logger().for_category(LogCategory.SHUTDOWN)


class APIServerShutdownHandler:
    """Stops Uvicorn once the dashboard has pushed its final state (priority 60)."""

    shutdown_priority = 60

    def __init__(self, api_wrapper: "APIServerWrapper"):
        self.api_wrapper = api_wrapper

    async def shutdown(self) -> None:
        if self.api_wrapper.is_running:
            log.info(f"Closing API on {self.api_wrapper.url}")
            await self.api_wrapper.stop()
        else:
            log.debug("API server was not running")
