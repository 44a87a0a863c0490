from typing import Any, Callable, Dict, List

from lifecycle.task_registry import TaskRecord, TaskRegistry
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.SOCKETIO)


def _stats(registry: TaskRegistry) -> Dict[str, Any]:
    active = registry.active()
    per_category: Dict[str, int] = {}
    for record in active:
        per_category[record.info.category.name] = per_category.get(record.info.category.name, 0) + 1
    return {
        "summary": registry.summary(),
        "total": len(registry.list_all()),
        "active": len(active),
        "failed": len(registry.failed()),
        "cancelled": len(registry.cancelled()),
        "active_by_category": per_category,
    }


def register_tasks(sio):
    """
    ``tasks_get_all`` / ``tasks_get_active`` / ``tasks_get_stats`` requests,
    answered to the asking client only. Lets a debug panel watch count-up
    runs and refresh timers come and go.
    """

    def records(select: Callable[[TaskRegistry], List[TaskRecord]]) -> List[Dict[str, Any]]:
        return [r.to_dict() for r in select(TaskRegistry.instance())]

    @sio.event
    async def tasks_get_all(sid: str):
        await sio.emit("tasks.snapshot", records(TaskRegistry.list_all), room=sid)

    @sio.event
    async def tasks_get_active(sid: str):
        await sio.emit("tasks.active", records(TaskRegistry.active), room=sid)

    @sio.event
    async def tasks_get_stats(sid: str):
        stats = _stats(TaskRegistry.instance())
        log.debug(f"{sid} asked for task stats", summary=stats["summary"])
        await sio.emit("tasks.stats", stats, room=sid)
