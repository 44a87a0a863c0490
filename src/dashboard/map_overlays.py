"""
Map model

Overlays (drone survey polygons, weather stations, satellite coverage)
are described as plain data for the browser's map widget. Switching the
active layer publishes a MapLayerChangedEvent.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from models.enums import MapLayer, OverlayKind, StationStatus
from models.events import MapLayerChangedEvent
from services.event_bus import EventBus
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.MAP)

Coord = Tuple[float, float]

MAP_CENTER: Coord = (-19.9167, -43.9345)
MAP_ZOOM = 10
TILE_URL = "https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png"
TILE_ATTRIBUTION = "© OpenStreetMap contributors"

LAYER_NAMES: Dict[MapLayer, str] = {
    MapLayer.SATELLITE: "Imagem de Satélite",
    MapLayer.NDVI: "Índice de Vegetação (NDVI)",
    MapLayer.TEMPERATURE: "Temperatura de Superfície",
    MapLayer.DRONE: "Levantamento com Drone",
}

STATION_COLORS: Dict[StationStatus, str] = {
    StationStatus.ONLINE: "#22c55e",
    StationStatus.MAINTENANCE: "#f59e0b",
}

STATION_LABELS: Dict[StationStatus, str] = {
    StationStatus.ONLINE: "Online",
    StationStatus.MAINTENANCE: "Manutenção",
}


@dataclass(frozen=True)
class DroneArea:
    name: str
    coords: Tuple[Coord, ...]
    area: str
    resolution: str
    date: str


@dataclass(frozen=True)
class WeatherStation:
    name: str
    coords: Coord
    status: StationStatus


DRONE_AREAS: Tuple[DroneArea, ...] = (
    DroneArea(
        "Área de Reflorestamento - Norte",
        ((-19.85, -43.95), (-19.85, -43.90), (-19.80, -43.90), (-19.80, -43.95)),
        "245 ha", "5 cm/pixel", "15/09/2025",
    ),
    DroneArea(
        "Monitoramento Erosão - Sul",
        ((-19.98, -43.88), (-19.98, -43.83), (-19.93, -43.83), (-19.93, -43.88)),
        "180 ha", "3 cm/pixel", "22/09/2025",
    ),
    DroneArea(
        "Área Urbana - Centro",
        ((-19.92, -43.94), (-19.92, -43.89), (-19.87, -43.89), (-19.87, -43.94)),
        "320 ha", "8 cm/pixel", "28/09/2025",
    ),
)

WEATHER_STATIONS: Tuple[WeatherStation, ...] = (
    WeatherStation("Estação Norte", (-19.85, -43.92), StationStatus.ONLINE),
    WeatherStation("Estação Sul", (-19.95, -43.85), StationStatus.ONLINE),
    WeatherStation("Estação Centro", (-19.90, -43.91), StationStatus.ONLINE),
    WeatherStation("Estação Oeste", (-19.88, -43.98), StationStatus.MAINTENANCE),
)

SATELLITE_COVERAGE: Tuple[Coord, Coord] = ((-20.1, -44.1), (-19.7, -43.7))

_POPUP_OPEN = '<div style="font-family: Inter, sans-serif;">'
_POPUP_TITLE = '<h4 style="margin: 0 0 8px 0; color: #1e293b;">{}</h4>'
_POPUP_LINE = '<p style="margin: 4px 0; font-size: 0.9rem;">{}</p>'


def popup_html(title: str, lines: Sequence[str]) -> str:
    body = "".join(_POPUP_LINE.format(line) for line in lines)
    return f"{_POPUP_OPEN}{_POPUP_TITLE.format(title)}{body}</div>"


@dataclass
class MapOverlay:
    id: int
    kind: OverlayKind
    coords: Any
    style: Dict[str, Any] = field(default_factory=dict)
    name: str = ""
    popup: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "kind": self.kind.value,
            "name": self.name,
            "coords": self.coords,
            "style": dict(self.style),
            "popup": self.popup,
        }


class MapModel:
    """
    Map widget state: view, tile layer, overlays and selected layer.
    """

    def __init__(
        self,
        event_bus: Optional[EventBus] = None,
        center: Coord = MAP_CENTER,
        zoom: int = MAP_ZOOM,
        tile_url: str = TILE_URL,
    ):
        self.event_bus = event_bus
        self.center = center
        self.zoom = zoom
        self.tile_url = tile_url
        self.layer = MapLayer.SATELLITE
        self._overlays: List[MapOverlay] = []
        self._ids = itertools.count(1)

    @property
    def overlays(self) -> List[MapOverlay]:
        return list(self._overlays)

    def add_overlay(
        self,
        kind: OverlayKind,
        coords: Any,
        style: Optional[Dict[str, Any]] = None,
        name: str = "",
    ) -> MapOverlay:
        overlay = MapOverlay(next(self._ids), kind, coords, dict(style or {}), name)
        self._overlays.append(overlay)
        return overlay

    def bind_popup(self, overlay: MapOverlay, html: str) -> MapOverlay:
        overlay.popup = html
        return overlay

    def overlays_of(self, kind: OverlayKind) -> List[MapOverlay]:
        return [o for o in self._overlays if o.kind == kind]

    async def select_layer(self, layer: MapLayer | str) -> MapLayer:
        """
        Switch the active layer.

        Raises:
            ValueError: if layer is not a known layer name
        """
        new_layer = layer if isinstance(layer, MapLayer) else MapLayer(layer)
        old_layer = self.layer
        self.layer = new_layer
        log.info(f"Switching to {new_layer.value} layer", previous=old_layer.value)

        if self.event_bus:
            await self.event_bus.publish(MapLayerChangedEvent(old_layer, new_layer))
        return new_layer

    def to_dict(self) -> Dict[str, Any]:
        return {
            "center": list(self.center),
            "zoom": self.zoom,
            "tiles": {"url": self.tile_url, "attribution": TILE_ATTRIBUTION},
            "layer": self.layer.value,
            "layer_name": layer_name(self.layer),
            "overlays": [o.to_dict() for o in self._overlays],
        }


def layer_name(layer: MapLayer | str) -> str:
    """Display name of a layer; unknown names are returned unchanged."""
    try:
        return LAYER_NAMES[MapLayer(layer)]
    except ValueError:
        return str(layer)


def add_drone_survey_areas(model: MapModel) -> List[MapOverlay]:
    overlays = []
    for area in DRONE_AREAS:
        overlay = model.add_overlay(
            OverlayKind.POLYGON,
            [list(c) for c in area.coords],
            {"color": "#06b6d4", "fillColor": "#06b6d4", "fillOpacity": 0.3, "weight": 2},
            name=area.name,
        )
        model.bind_popup(overlay, popup_html(area.name, [
            f"<strong>Área:</strong> {area.area}",
            f"<strong>Resolução:</strong> {area.resolution}",
            f"<strong>Último voo:</strong> {area.date}",
        ]))
        overlays.append(overlay)
    return overlays


def add_weather_stations(model: MapModel) -> List[MapOverlay]:
    overlays = []
    for station in WEATHER_STATIONS:
        color = STATION_COLORS[station.status]
        overlay = model.add_overlay(
            OverlayKind.CIRCLE_MARKER,
            list(station.coords),
            {
                "radius": 8,
                "fillColor": color,
                "color": "#fff",
                "weight": 2,
                "opacity": 1,
                "fillOpacity": 0.8,
            },
            name=station.name,
        )
        status = f'<span style="color: {color}; font-weight: 600;">{STATION_LABELS[station.status]}</span>'
        model.bind_popup(overlay, popup_html(station.name, [f"Status: {status}"]))
        overlays.append(overlay)
    return overlays


def add_satellite_coverage(model: MapModel) -> MapOverlay:
    overlay = model.add_overlay(
        OverlayKind.RECTANGLE,
        [list(c) for c in SATELLITE_COVERAGE],
        {
            "color": "#4f46e5",
            "fillColor": "#4f46e5",
            "fillOpacity": 0.1,
            "weight": 2,
            "dashArray": "10, 10",
        },
        name="Cobertura Satelital",
    )
    return model.bind_popup(overlay, popup_html("Cobertura Satelital", [
        "Landsat 8/9 e Sentinel-2",
        "Resolução: 10-30m",
        "Frequência: 5-16 dias",
    ]))


def build_map(event_bus: Optional[EventBus] = None) -> MapModel:
    model = MapModel(event_bus)
    add_drone_survey_areas(model)
    add_weather_stations(model)
    add_satellite_coverage(model)
    log.info("Map initialized", center=model.center, zoom=model.zoom, overlays=len(model.overlays))
    return model
