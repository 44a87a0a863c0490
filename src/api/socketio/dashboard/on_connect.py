from typing import Any, Dict

from lifecycle.task_registry import TaskRegistry
from services.service_container import ServiceContainer
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.SOCKETIO)


def build_snapshot(services: ServiceContainer) -> Dict[str, Any]:
    """Everything a freshly opened page needs to draw itself."""
    notifications = services.notifications.visible
    return {
        "elements": services.view.snapshot(),
        "charts": [chart.to_dict() for chart in services.charts.values()],
        "map": services.map_model.to_dict(),
        "notifications": [{"id": nid, "message": text} for nid, text in notifications.items()],
    }


def register_on_connect(sio, services: ServiceContainer):
    """A connecting client gets ``dashboard:snapshot`` and then ``tasks:all``."""

    @sio.event
    async def connect(sid, environ, auth=None):
        log.info(f"{sid} connected", address=environ.get("REMOTE_ADDR", "unknown"))
        await sio.emit("dashboard:snapshot", build_snapshot(services), room=sid)
        tasks = [r.to_dict() for r in TaskRegistry.instance().list_all()]
        await sio.emit("tasks:all", {"tasks": tasks}, room=sid)

    @sio.event
    async def disconnect(sid, reason=None):
        log.info(f"{sid} disconnected", reason=reason or "client left")
