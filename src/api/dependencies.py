"""
API Dependencies - service container access for FastAPI endpoints

main_asyncio.py (or a test fixture) builds the ServiceContainer and the
DashboardController and hands them over through the set_* functions;
routes receive them with Depends(get_*). Until then every route that
needs them answers 503.
"""

from __future__ import annotations

from typing import Optional, TYPE_CHECKING

from api.middleware.error_handler import ServiceUnavailableError
from services.service_container import ServiceContainer

if TYPE_CHECKING:
    from controllers.dashboard_controller import DashboardController


_service_container: Optional[ServiceContainer] = None
_dashboard_controller: Optional["DashboardController"] = None


def set_service_container(services: Optional[ServiceContainer]) -> None:
    """Pass None to clear."""
    global _service_container
    _service_container = services


def set_dashboard_controller(controller: Optional["DashboardController"]) -> None:
    global _dashboard_controller
    _dashboard_controller = controller


async def get_service_container() -> ServiceContainer:
    if _service_container is None:
        raise ServiceUnavailableError("Service container")
    return _service_container


async def get_dashboard_controller() -> "DashboardController":
    if _dashboard_controller is None:
        raise ServiceUnavailableError("Dashboard controller")
    return _dashboard_controller
