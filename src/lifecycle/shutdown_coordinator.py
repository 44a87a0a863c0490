"""
Shutdown coordinator

Waits for SIGINT/SIGTERM, a programmatic request or the failure of a
critical task, then runs every registered shutdown handler once, highest
``shutdown_priority`` first. Each handler is time-boxed; one that fails or
hangs is logged and the sequence moves on.

    coordinator = ShutdownCoordinator()
    coordinator.register(DashboardShutdownHandler(controller))
    coordinator.register(APIServerShutdownHandler(api_server))
    coordinator.setup_signal_handlers(loop)
    await coordinator.wait_for_shutdown()
    await coordinator.shutdown_all()
"""

import asyncio
import signal
from typing import List, Optional, Set

from lifecycle.shutdown_protocol import IShutdownHandler
from lifecycle.task_registry import TaskRegistry, TaskCategory
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.SHUTDOWN)

# a failed task in one of these stops the dashboard
CRITICAL_CATEGORIES: Set[TaskCategory] = {TaskCategory.API, TaskCategory.REFRESH}


class ShutdownCoordinator:

    def __init__(self, timeout_per_handler: float = 5.0, total_timeout: float = 15.0):
        self._handlers: List[IShutdownHandler] = []
        self._event: Optional[asyncio.Event] = None
        self._reason: Optional[str] = None
        self._timeout_per_handler = timeout_per_handler
        self._total_timeout = total_timeout

    @property
    def shutdown_reason(self) -> Optional[str]:
        """Signal name, requested reason or ``"Task failure: <description>"``."""
        return self._reason

    def register(self, handler: IShutdownHandler) -> None:
        missing = [attr for attr in ("shutdown_priority", "shutdown") if not hasattr(handler, attr)]
        if missing:
            raise ValueError(f"{type(handler).__name__} is not a shutdown handler, missing: {', '.join(missing)}")
        self._handlers.append(handler)
        log.debug(f"{type(handler).__name__} registered", priority=handler.shutdown_priority)

    def get_handler(self, handler_type: type) -> Optional[IShutdownHandler]:
        return next((h for h in self._handlers if isinstance(h, handler_type)), None)

    def setup_signal_handlers(self, loop: asyncio.AbstractEventLoop) -> None:
        self._event = asyncio.Event()
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, self._on_signal, sig)
        log.info("Listening for SIGINT and SIGTERM")

    def _on_signal(self, sig: signal.Signals) -> None:
        log.info(f"{sig.name} received, shutting down")
        self._trigger(sig.name)

    def _trigger(self, reason: str) -> None:
        if self._event is None:
            self._event = asyncio.Event()
        self._reason = reason
        self._event.set()

    def request_shutdown(self, reason: str) -> None:
        self._trigger(reason)

    def _failed_critical_task(self) -> Optional[str]:
        for record in TaskRegistry.instance().failed():
            if record.info.category in CRITICAL_CATEGORIES:
                return record.info.description
        return None

    async def wait_for_shutdown(self, poll_interval: float = 0.2) -> None:
        """
        Block until a signal, ``request_shutdown`` or a failed critical task.

        Raises:
            RuntimeError: setup_signal_handlers() was not called
        """
        if self._event is None:
            raise RuntimeError("Call setup_signal_handlers() first")

        while not self._event.is_set():
            failed = self._failed_critical_task()
            if failed:
                log.error(f"Critical task failed: {failed}")
                self._reason = f"Task failure: {failed}"
                return
            try:
                await asyncio.wait_for(self._event.wait(), timeout=poll_interval)
            except asyncio.TimeoutError:
                pass

    async def _run_handler(self, handler: IShutdownHandler) -> None:
        name = type(handler).__name__
        try:
            await asyncio.wait_for(handler.shutdown(), timeout=self._timeout_per_handler)
        except asyncio.TimeoutError:
            log.error(f"{name} did not finish within {self._timeout_per_handler}s")
        except asyncio.CancelledError:
            log.warn(f"Shutdown cancelled while in {name}")
            raise
        except Exception as e:
            log.error(f"{name} failed during shutdown: {e}", error_type=type(e).__name__)
        else:
            log.debug(f"{name} done")

    async def shutdown_all(self) -> None:
        log.info("Shutting down", reason=self._reason or "unknown")

        loop = asyncio.get_running_loop()
        deadline = loop.time() + self._total_timeout
        ordered = sorted(self._handlers, key=lambda h: h.shutdown_priority, reverse=True)

        for handler in ordered:
            if loop.time() > deadline:
                skipped = ", ".join(type(h).__name__ for h in ordered[ordered.index(handler):])
                log.error(f"Shutdown took longer than {self._total_timeout}s", skipped=skipped)
                break
            await self._run_handler(handler)

        log.info("Shutdown complete")
