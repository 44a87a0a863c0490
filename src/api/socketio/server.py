"""
Socket.IO server construction.

The AsyncServer wraps the FastAPI app so HTTP routes and the /socket.io
endpoint share one Uvicorn server and one event loop.
"""

from typing import List

from fastapi import FastAPI
from socketio import AsyncServer, ASGIApp

from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.SOCKETIO)

# seconds; a browser tab in the background may stall timers for a while
PING_INTERVAL = 25
PING_TIMEOUT = 60


def create_socketio_server(cors_origins: List[str]) -> AsyncServer:
    # Socket.IO takes "*" as a plain string, not inside a list
    allowed = "*" if "*" in cors_origins else list(cors_origins)
    sio = AsyncServer(
        async_mode="asgi",
        cors_allowed_origins=allowed,
        ping_interval=PING_INTERVAL,
        ping_timeout=PING_TIMEOUT,
        logger=False,
        engineio_logger=False,
    )
    log.debug("Socket.IO server created", origins=allowed)
    return sio


def wrap_app_with_socketio(app: FastAPI, socketio_server: AsyncServer) -> ASGIApp:
    """ASGI app serving Socket.IO at /socket.io and everything else from ``app``."""
    return ASGIApp(socketio_server, other_asgi_app=app)
