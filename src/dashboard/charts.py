"""
Chart models

Chart configurations are Chart.js-shaped dictionaries handed to the
browser as-is. ChartModel wraps one configuration and offers the two
operations the dashboard needs: replace a series (or the labels) and
re-render, which here means publishing a ChartUpdatedEvent.
"""

from __future__ import annotations

import copy
import math
import random
from datetime import date, timedelta
from typing import Any, Dict, List, Optional, Sequence, Tuple

from models.enums import ChartID, NDVIRegion
from models.events import ChartUpdatedEvent
from services.event_bus import EventBus
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.CHART)

MONTH_LABELS = ["Jan", "Fev", "Mar", "Abr", "Mai", "Jun", "Jul", "Ago", "Set", "Out", "Nov", "Dez"]

MAX_PERIOD_DAYS = 365

# (satellite, drone) monthly NDVI per region
NDVI_SERIES: Dict[NDVIRegion, Tuple[List[float], List[float]]] = {
    NDVIRegion.ALL: (
        [0.65, 0.68, 0.72, 0.75, 0.71, 0.68, 0.66, 0.69, 0.73, 0.76, 0.74, 0.70],
        [0.67, 0.70, 0.74, 0.77, 0.73, 0.70, 0.68, 0.71, 0.75, 0.78, 0.76, 0.72],
    ),
    NDVIRegion.NORTH: (
        [0.70, 0.73, 0.77, 0.80, 0.76, 0.73, 0.71, 0.74, 0.78, 0.81, 0.79, 0.75],
        [0.72, 0.75, 0.79, 0.82, 0.78, 0.75, 0.73, 0.76, 0.80, 0.83, 0.81, 0.77],
    ),
    NDVIRegion.SOUTH: (
        [0.60, 0.63, 0.67, 0.70, 0.66, 0.63, 0.61, 0.64, 0.68, 0.71, 0.69, 0.65],
        [0.62, 0.65, 0.69, 0.72, 0.68, 0.65, 0.63, 0.66, 0.70, 0.73, 0.71, 0.67],
    ),
    NDVIRegion.CENTER: (
        [0.55, 0.58, 0.62, 0.65, 0.61, 0.58, 0.56, 0.59, 0.63, 0.66, 0.64, 0.60],
        [0.57, 0.60, 0.64, 0.67, 0.63, 0.60, 0.58, 0.61, 0.65, 0.68, 0.66, 0.62],
    ),
}

PRECIPITATION_MM = [180, 145, 120, 85, 45, 25, 15, 30, 65, 110, 155, 190]


class ChartModel:
    """
    One chart handed to the charting collaborator.

    Example:
        chart = ChartModel(ChartID.NDVI, build_ndvi_config(), bus)
        chart.replace_series(0, [0.7] * 12)
        await chart.update()
    """

    def __init__(self, chart_id: ChartID, config: Dict[str, Any], event_bus: Optional[EventBus] = None):
        self.chart_id = chart_id
        self.config = config
        self.event_bus = event_bus

    @property
    def labels(self) -> List[str]:
        return self.config["data"]["labels"]

    @property
    def datasets(self) -> List[Dict[str, Any]]:
        return self.config["data"]["datasets"]

    def series(self, index: int) -> List[float]:
        return self.datasets[index]["data"]

    def replace_labels(self, labels: Sequence[str]) -> None:
        self.config["data"]["labels"] = list(labels)

    def replace_series(self, index: int, data: Sequence[float]) -> None:
        if not 0 <= index < len(self.datasets):
            raise IndexError(f"{self.chart_id.value} chart has no dataset #{index}")
        self.datasets[index]["data"] = list(data)

    async def update(self, mode: str = "active") -> None:
        """Re-render: publish the current labels and series."""
        log.debug(f"Chart '{self.chart_id.value}' updated", points=len(self.labels))
        if self.event_bus:
            await self.event_bus.publish(
                ChartUpdatedEvent(
                    self.chart_id,
                    list(self.labels),
                    [{"label": d["label"], "data": list(d["data"])} for d in self.datasets],
                    mode,
                )
            )

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.chart_id.value, "config": copy.deepcopy(self.config)}


# ---------------------------------------------------------------------------
# Temperature
# ---------------------------------------------------------------------------

def _day_label(day: date) -> str:
    return day.strftime("%d/%m")


def _label_stride(days: int) -> int:
    if days <= 30:
        return 1
    if days <= 90:
        return 3
    return 10


def temperature_series(
    days: int,
    rng: Optional[random.Random] = None,
    today: Optional[date] = None,
    *,
    amplitude: float = 4.0,
    frequency: float = 0.1,
    noise: float = 3.0,
    drone_noise: float = 1.5,
) -> Tuple[List[str], List[float], List[float]]:
    """
    Simulated daily surface temperature for the last ``days`` days.

    Base curve: 24 + sin(i * frequency) * amplitude + uniform noise. The drone
    series adds its own noise on top. Long periods are thinned to every
    3rd (<= 90 days) or 10th day, keeping labels and points aligned.

    Returns:
        (labels, satellite, drone), oldest first
    """
    if days < 1 or days > MAX_PERIOD_DAYS:
        raise ValueError(f"Period must be 1..{MAX_PERIOD_DAYS} days, got {days}")

    rng = rng or random.Random()
    today = today or date.today()
    stride = _label_stride(days)

    labels: List[str] = []
    satellite: List[float] = []
    drone: List[float] = []

    for i in range(days - 1, -1, -1):
        base = 24 + math.sin(i * frequency) * amplitude + (rng.random() - 0.5) * noise
        drone_temp = base + (rng.random() - 0.5) * drone_noise
        if i % stride:
            continue
        labels.append(_day_label(today - timedelta(days=i)))
        satellite.append(round(base, 1))
        drone.append(round(drone_temp, 1))

    return labels, satellite, drone


def build_temperature_config(rng: Optional[random.Random] = None, today: Optional[date] = None) -> Dict[str, Any]:
    labels, satellite, drone = temperature_series(
        30, rng, today, amplitude=3.0, frequency=0.2, noise=2.0, drone_noise=1.0
    )
    return {
        "type": "line",
        "data": {
            "labels": labels,
            "datasets": [
                {
                    "label": "Temperatura Satélite",
                    "data": satellite,
                    "borderColor": "#4f46e5",
                    "backgroundColor": "rgba(79, 70, 229, 0.1)",
                    "borderWidth": 2,
                    "fill": True,
                    "tension": 0.4,
                },
                {
                    "label": "Temperatura Drone",
                    "data": drone,
                    "borderColor": "#06b6d4",
                    "backgroundColor": "rgba(6, 182, 212, 0.1)",
                    "borderWidth": 2,
                    "fill": False,
                    "tension": 0.4,
                    "borderDash": [5, 5],
                },
            ],
        },
        "options": {
            "responsive": True,
            "maintainAspectRatio": False,
            "plugins": {
                "legend": {"position": "top"},
                "tooltip": {"mode": "index", "intersect": False},
            },
            "scales": {
                "y": {"beginAtZero": False, "title": {"display": True, "text": "Temperatura (°C)"}},
            },
            "interaction": {"mode": "nearest", "axis": "x", "intersect": False},
        },
    }


# ---------------------------------------------------------------------------
# NDVI
# ---------------------------------------------------------------------------

def resolve_region(region: NDVIRegion | str) -> NDVIRegion:
    """Unknown region names fall back to ALL."""
    if isinstance(region, NDVIRegion):
        return region
    try:
        return NDVIRegion(region)
    except ValueError:
        log.debug(f"Unknown NDVI region '{region}', using '{NDVIRegion.ALL.value}'")
        return NDVIRegion.ALL


def ndvi_series(region: NDVIRegion | str) -> Tuple[List[float], List[float]]:
    """Monthly (satellite, drone) NDVI for a region."""
    satellite, drone = NDVI_SERIES[resolve_region(region)]
    return list(satellite), list(drone)


def build_ndvi_config(region: NDVIRegion = NDVIRegion.ALL) -> Dict[str, Any]:
    satellite, drone = ndvi_series(region)
    return {
        "type": "bar",
        "data": {
            "labels": list(MONTH_LABELS),
            "datasets": [
                {
                    "label": "NDVI Satélite",
                    "data": satellite,
                    "backgroundColor": "rgba(34, 197, 94, 0.7)",
                    "borderColor": "#22c55e",
                    "borderWidth": 1,
                },
                {
                    "label": "NDVI Drone (Alta Resolução)",
                    "data": drone,
                    "backgroundColor": "rgba(6, 182, 212, 0.7)",
                    "borderColor": "#06b6d4",
                    "borderWidth": 1,
                },
            ],
        },
        "options": {
            "responsive": True,
            "maintainAspectRatio": False,
            "plugins": {"legend": {"position": "top"}},
            "scales": {
                "y": {"beginAtZero": True, "max": 1, "title": {"display": True, "text": "Índice NDVI"}},
            },
        },
    }


# ---------------------------------------------------------------------------
# Precipitation
# ---------------------------------------------------------------------------

def build_precipitation_config() -> Dict[str, Any]:
    return {
        "type": "line",
        "data": {
            "labels": list(MONTH_LABELS),
            "datasets": [
                {
                    "label": "Precipitação (mm)",
                    "data": list(PRECIPITATION_MM),
                    "borderColor": "#06b6d4",
                    "backgroundColor": "rgba(6, 182, 212, 0.1)",
                    "borderWidth": 3,
                    "fill": True,
                    "tension": 0.4,
                }
            ],
        },
        "options": {
            "responsive": True,
            "maintainAspectRatio": False,
            "plugins": {"legend": {"display": False}},
            "scales": {
                "y": {"beginAtZero": True, "title": {"display": True, "text": "Precipitação (mm)"}},
            },
        },
    }


def build_charts(
    event_bus: Optional[EventBus] = None,
    rng: Optional[random.Random] = None,
    today: Optional[date] = None,
) -> Dict[ChartID, ChartModel]:
    """All three dashboard charts, keyed by id."""
    charts = {
        ChartID.TEMPERATURE: ChartModel(ChartID.TEMPERATURE, build_temperature_config(rng, today), event_bus),
        ChartID.NDVI: ChartModel(ChartID.NDVI, build_ndvi_config(), event_bus),
        ChartID.PRECIPITATION: ChartModel(ChartID.PRECIPITATION, build_precipitation_config(), event_bus),
    }
    log.info(f"Charts built: {', '.join(c.value for c in charts)}")
    return charts
