"""Service Container - Dependency injection container for all core services"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, TYPE_CHECKING

from managers.config_manager import ConfigManager
from models.enums import ChartID
from services.dashboard_view import DashboardView
from services.event_bus import EventBus
from services.notification_service import NotificationService
from services.visibility_tracker import VisibilityTracker

if TYPE_CHECKING:
    from dashboard.charts import ChartModel
    from dashboard.map_overlays import MapModel


@dataclass
class ServiceContainer:
    """
    Centralized dependency injection container for the dashboard services.

    Aggregates the page state (view, charts, map), the collaborators the
    environment talks to (visibility, notifications) and the infrastructure
    (event bus, configuration). Controllers and API endpoints receive the
    container instead of reaching into each other.

    Usage:
        services = build_services(config_manager, event_bus)

        controller = DashboardController(services)

        @router.get("/elements")
        async def list_elements(services: ServiceContainer = Depends(get_service_container)):
            return services.view.snapshot()
    """

    event_bus: EventBus
    config_manager: ConfigManager
    view: DashboardView
    charts: Dict[ChartID, "ChartModel"]
    map_model: "MapModel"
    visibility: VisibilityTracker
    notifications: NotificationService
