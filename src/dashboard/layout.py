"""
Dashboard page layout

The initial set of display elements: the KPI tiles of the monitoring
panel, the story-page counters and the cards that fade in on scroll.
Initial texts are the values the page is served with; counters read
their final value back from them.
"""

from typing import List, Optional

from dashboard.interactions import OVERLAY_REST_BACKGROUND
from models.display import DisplayElement
from services.dashboard_view import DashboardView
from services.event_bus import EventBus

GROUP_KPI = "kpi"
GROUP_COUNTER = "counter"
GROUP_REVEAL = "reveal"
GROUP_STATUS = "status"
GROUP_CONTAINER = "container"
GROUP_OVERLAY = "overlay"

LAST_UPDATE_ID = "lastUpdate"
MAP_CONTAINER_ID = "mapContainer"
HERO_VISUAL_ID = "heroVisual"
STORY_MAP_ID = "storyMap"

# project card -> its image overlay
PROJECT_OVERLAYS = {
    "projectQuilombola": "projectQuilombolaOverlay",
}

# element id -> fixed decimals (None: keep the precision displayed)
KPI_DECIMALS = {
    "avgTemp": None,
    "avgNDVI": 2,
    "totalPrecipitation": None,
    "surveyedArea": None,
}

STORY_MAP_TEXT = "Território Quilombola | 380 hectares mapeados | 12 famílias envolvidas"


def default_elements() -> List[DisplayElement]:
    return [
        # Monitoring panel
        DisplayElement(LAST_UPDATE_ID, "", GROUP_STATUS),
        DisplayElement("avgTemp", "24.5", GROUP_KPI),
        DisplayElement("avgNDVI", "0.78", GROUP_KPI),
        DisplayElement("totalPrecipitation", "1165", GROUP_KPI),
        DisplayElement("surveyedArea", "745", GROUP_KPI),
        DisplayElement(MAP_CONTAINER_ID, "", GROUP_CONTAINER, {"opacity": "1"}),

        # Story page
        DisplayElement(HERO_VISUAL_ID, "", GROUP_CONTAINER),
        DisplayElement(STORY_MAP_ID, STORY_MAP_TEXT, GROUP_CONTAINER),
        DisplayElement("statArea", "380", GROUP_COUNTER),
        DisplayElement("statFamilies", "12", GROUP_COUNTER),
        DisplayElement("statResolution", "5cm", GROUP_COUNTER),
        DisplayElement("statImages", "2,500+", GROUP_COUNTER),
        DisplayElement("serviceMonitoring", "Monitoramento Ambiental", GROUP_REVEAL),
        DisplayElement("serviceDrone", "Mapeamento com Drones", GROUP_REVEAL),
        DisplayElement("impactCommunity", "Impacto nas Comunidades", GROUP_REVEAL),
        DisplayElement("projectQuilombola", "Território Quilombola", GROUP_REVEAL),
        DisplayElement(
            "projectQuilombolaOverlay", "", GROUP_OVERLAY, {"background": OVERLAY_REST_BACKGROUND}
        ),
        DisplayElement("techSentinel", "Sentinel-2", GROUP_REVEAL),
    ]


def build_view(event_bus: Optional[EventBus] = None) -> DashboardView:
    return DashboardView(event_bus, default_elements())
