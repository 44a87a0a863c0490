"""
Dashboard page content: layout, charts, map, surveys and interaction helpers
"""

from dashboard.charts import ChartModel, build_charts, temperature_series, ndvi_series
from dashboard.map_overlays import MapModel, MapOverlay, build_map, layer_name
from dashboard.surveys import DroneSurvey, list_surveys, get_survey
from dashboard.layout import build_view, default_elements

__all__ = [
    "ChartModel",
    "build_charts",
    "temperature_series",
    "ndvi_series",
    "MapModel",
    "MapOverlay",
    "build_map",
    "layer_name",
    "DroneSurvey",
    "list_surveys",
    "get_survey",
    "build_view",
    "default_elements",
]
