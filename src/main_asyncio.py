"""
Entry point of the environmental dashboard runtime.

Loads the configuration, builds the dashboard services, serves the API and
Socket.IO endpoint, starts the page (live refresh, reveal timers) and then
waits for Ctrl+C, SIGTERM or a failed critical task before shutting down.
"""

import sys

# log lines carry status symbols; make sure a non-UTF-8 console accepts them
for _stream in (sys.stdout, sys.stderr):
    if hasattr(_stream, "reconfigure") and (_stream.encoding or "").lower() != "utf-8":
        _stream.reconfigure(encoding="utf-8")  # type: ignore[union-attr]

import asyncio
from typing import Optional

from utils.logger import get_logger, configure_logger
from models.config import DashboardConfig
from models.enums import LogCategory, LogLevel

from api.main import create_app
from api.dependencies import set_service_container, set_dashboard_controller
from api.socketio.server import create_socketio_server, wrap_app_with_socketio
from api.socketio.registry import register_socketio
from controllers.dashboard_controller import DashboardController
from dashboard.bootstrap import build_services
from managers import ConfigManager
from services import EventBus
from services.middleware import log_middleware
from services.service_container import ServiceContainer

from lifecycle import ShutdownCoordinator
from lifecycle.api_server_wrapper import APIServerWrapper
from lifecycle.handlers import (
    AllTasksCancellationHandler,
    APIServerShutdownHandler,
    DashboardShutdownHandler,
)
from lifecycle.task_registry import create_tracked_task, TaskCategory

log = get_logger().for_category(LogCategory.SYSTEM)


def _apply_logging(settings: DashboardConfig) -> None:
    name = settings.logging.level.upper()
    if name not in LogLevel.__members__:
        log.warn(f"Unknown log level '{settings.logging.level}', using INFO")
        name = "INFO"
    configure_logger(LogLevel[name], settings.logging.use_colors)


def _start_api(
    settings: DashboardConfig,
    services: ServiceContainer,
    controller: DashboardController,
) -> Optional[APIServerWrapper]:
    if not settings.api.enabled:
        log.info("API disabled in configuration")
        return None

    sio = create_socketio_server(settings.api.cors_origins)
    register_socketio(sio, services, controller)
    app = wrap_app_with_socketio(create_app(cors_origins=settings.api.cors_origins), sio)

    wrapper = APIServerWrapper(app, host=settings.api.host, port=settings.api.port)
    create_tracked_task(
        wrapper.start(),
        category=TaskCategory.API,
        description="FastAPI/Uvicorn Server",
        created_by="main"
    )
    return wrapper


async def main():
    config_manager = ConfigManager()
    settings = config_manager.load()
    _apply_logging(settings)

    log.info("Starting environmental dashboard")

    event_bus = EventBus()
    event_bus.add_middleware(log_middleware)

    services = build_services(config_manager, event_bus)
    controller = DashboardController(services)
    set_service_container(services)
    set_dashboard_controller(controller)

    api = _start_api(settings, services, controller)
    await controller.start()

    # dashboard timers stop before the server so clients get the final state
    coordinator = ShutdownCoordinator()
    coordinator.register(DashboardShutdownHandler(controller))
    if api is not None:
        coordinator.register(APIServerShutdownHandler(api))
    coordinator.register(AllTasksCancellationHandler())
    coordinator.setup_signal_handlers(asyncio.get_running_loop())

    log.info("Dashboard running, Ctrl+C to stop")
    await coordinator.wait_for_shutdown()
    await coordinator.shutdown_all()
    log.info("Dashboard stopped", reason=coordinator.shutdown_reason)


def run() -> None:
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        log.info("Interrupted")
    except Exception as e:
        log.error(f"Fatal error: {e}", error_type=type(e).__name__)
        sys.exit(1)


if __name__ == "__main__":
    run()
