"""
System endpoints - background task introspection, configuration, health

Every count-up run, the live refresh loop and each notification/ripple
timer is a tracked task, so these endpoints show what the dashboard is
currently doing.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends

from api.dependencies import get_service_container
from lifecycle.shutdown_coordinator import CRITICAL_CATEGORIES
from lifecycle.task_registry import TaskRecord, TaskRegistry
from services.service_container import ServiceContainer
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.API)

router = APIRouter(prefix="/system", tags=["System"])


def _counts(registry: TaskRegistry) -> Dict[str, int]:
    return {
        "total": len(registry.list_all()),
        "active": len(registry.active()),
        "failed": len(registry.failed()),
        "cancelled": len(registry.cancelled()),
    }


def _by_category(records: List[TaskRecord]) -> Dict[str, int]:
    grouped: Dict[str, int] = {}
    for record in records:
        name = record.info.category.name
        grouped[name] = grouped.get(name, 0) + 1
    return grouped


@router.get("/tasks/summary")
async def get_task_summary() -> Dict[str, Any]:
    """Task counters, plus running tasks per category (ANIMATION, REFRESH, ...)."""
    registry = TaskRegistry.instance()
    return {
        "summary": registry.summary(),
        **_counts(registry),
        "active_by_category": _by_category(registry.active()),
    }


@router.get("/tasks")
async def get_all_tasks(status: Optional[str] = None) -> Dict[str, Any]:
    """
    Every tracked task since startup.

    **Query:** `status` keeps only running, completed, failed or cancelled tasks.
    """
    records = TaskRegistry.instance().list_all()
    if status:
        records = [r for r in records if r.status == status]
    return {"count": len(records), "tasks": [r.to_dict() for r in records]}


@router.get("/tasks/active")
async def get_active_tasks() -> Dict[str, Any]:
    """Running tasks, oldest first, with how long each has been running."""
    now = datetime.now(timezone.utc).timestamp()
    records = sorted(TaskRegistry.instance().active(), key=lambda r: r.info.created_timestamp)

    tasks = [
        {
            "id": r.info.id,
            "category": r.info.category.name,
            "description": r.info.description,
            "created_at": r.info.created_at,
            "running_for_seconds": round(now - r.info.created_timestamp, 2),
        }
        for r in records
    ]
    return {"count": len(tasks), "tasks": tasks}


@router.get("/config")
async def get_config(services: ServiceContainer = Depends(get_service_container)) -> Dict[str, Any]:
    """Effective configuration after YAML includes and defaults."""
    return services.config_manager.settings.to_dict()


@router.get("/health")
async def health_check() -> Dict[str, Any]:
    """
    "unhealthy" when a critical task (API server, live refresh) has failed,
    "degraded" when any other task has, "healthy" otherwise.
    """
    registry = TaskRegistry.instance()
    failed = registry.failed()
    critical = [r for r in failed if r.info.category in CRITICAL_CATEGORIES]

    if critical:
        status, reason = "unhealthy", f"Critical task failed: {critical[0].info.description}"
    elif failed:
        status, reason = "degraded", f"{len(failed)} background task(s) have failed"
    else:
        status, reason = "healthy", None

    if reason:
        log.warn(f"Health check: {reason}")

    return {
        "status": status,
        "reason": reason,
        "tasks": _counts(registry),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
