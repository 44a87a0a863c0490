from __future__ import annotations

import asyncio
import contextlib
from typing import Any, Optional

import uvicorn

from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.API)


class APIServerWrapper:
    """
    Uvicorn serving the FastAPI + Socket.IO app from inside our own event
    loop. Uvicorn's signal handlers are disabled; the ShutdownCoordinator
    stops the server through ``stop()``.

    ``start()`` returns only after ``stop()``, so run it as a tracked task.
    """

    def __init__(self, app: Any, host: str = "0.0.0.0", port: int = 8000):
        self.app = app
        self.host = host
        self.port = port
        self._server: Optional[uvicorn.Server] = None
        self._serve_task: Optional[asyncio.Task] = None
        self._stopped = asyncio.Event()

    @property
    def url(self) -> str:
        return f"http://{self.host}:{self.port}"

    @property
    def is_running(self) -> bool:
        return self._serve_task is not None and not self._serve_task.done()

    @property
    def server(self) -> Optional[uvicorn.Server]:
        return self._server

    def _build_server(self) -> uvicorn.Server:
        server = uvicorn.Server(uvicorn.Config(
            app=self.app,
            host=self.host,
            port=self.port,
            loop="asyncio",
            log_level="warning",
            access_log=False,
            server_header=False,
        ))
        server.install_signal_handlers = lambda: None  # type: ignore[method-assign]
        return server

    async def _wait_until_started(self, timeout: float) -> None:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        while loop.time() < deadline:
            if self._server is not None and self._server.started:
                log.info(f"API listening on {self.url}")
                return
            if self._serve_task.done():
                # bind failed; re-raise what serve() raised
                await self._serve_task
                return
            await asyncio.sleep(0.05)
        log.warn(f"API server not up after {timeout}s, still waiting in background")

    async def start(self, *, wait_started_timeout: float = 5.0) -> None:
        if self.is_running:
            raise RuntimeError("API server already started")

        self._stopped.clear()
        self._server = self._build_server()
        self._serve_task = asyncio.create_task(self._server.serve(), name="uvicorn-serve")
        try:
            await self._wait_until_started(wait_started_timeout)
            await self._stopped.wait()
        except asyncio.CancelledError:
            await self.stop()
            raise

    async def stop(self, *, shutdown_timeout: float = 2.0) -> None:
        self._stopped.set()
        if self._server is None:
            log.debug("API server already stopped")
            return

        self._server.should_exit = True
        self._server.force_exit = True

        task = self._serve_task
        if task is not None and not task.done():
            try:
                await asyncio.wait_for(asyncio.shield(task), timeout=shutdown_timeout)
            except asyncio.TimeoutError:
                log.warn(f"Uvicorn still running after {shutdown_timeout}s, cancelling it")
                task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await task

        self._server = None
        self._serve_task = None
        log.info(f"API server on port {self.port} stopped")
