"""Assembly of the dashboard services from configuration."""

import random
from datetime import date
from typing import Optional

from dashboard.charts import build_charts
from dashboard.layout import build_view
from dashboard.map_overlays import build_map
from managers.config_manager import ConfigManager
from services.event_bus import EventBus
from services.notification_service import NotificationService
from services.service_container import ServiceContainer
from services.visibility_tracker import VisibilityTracker


def build_services(
    config_manager: ConfigManager,
    event_bus: Optional[EventBus] = None,
    rng: Optional[random.Random] = None,
    today: Optional[date] = None,
) -> ServiceContainer:
    event_bus = event_bus or EventBus()
    settings = config_manager.settings
    return ServiceContainer(
        event_bus=event_bus,
        config_manager=config_manager,
        view=build_view(event_bus),
        charts=build_charts(event_bus, rng, today),
        map_model=build_map(event_bus),
        visibility=VisibilityTracker(event_bus),
        notifications=NotificationService(event_bus, settings.interaction.notification_ms),
    )
