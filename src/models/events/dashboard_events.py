from dataclasses import dataclass
from typing import Any, Dict, List

from models.events.base import Event
from models.events.types import EventType
from models.events.sources import EventSource
from models.enums import ChartID, MapLayer


@dataclass(init=False)
class ChartUpdatedEvent(Event):
    chart_id: ChartID
    labels: List[str]
    datasets: List[Dict[str, Any]]
    mode: str

    def __init__(self, chart_id: ChartID, labels: List[str], datasets: List[Dict[str, Any]], mode: str = "active"):
        super().__init__(
            type=EventType.CHART_UPDATED,
            source=EventSource.CHART,
        )
        self.chart_id = chart_id
        self.labels = labels
        self.datasets = datasets
        self.mode = mode


@dataclass(init=False)
class MapLayerChangedEvent(Event):
    old: MapLayer
    new: MapLayer

    def __init__(self, old: MapLayer, new: MapLayer):
        super().__init__(
            type=EventType.MAP_LAYER_CHANGED,
            source=EventSource.MAP,
        )
        self.old = old
        self.new = new


@dataclass(init=False)
class NotificationShownEvent(Event):
    notification_id: int
    message: str

    def __init__(self, notification_id: int, message: str):
        super().__init__(
            type=EventType.NOTIFICATION_SHOWN,
            source=EventSource.NOTIFICATION,
        )
        self.notification_id = notification_id
        self.message = message


@dataclass(init=False)
class NotificationDismissedEvent(Event):
    notification_id: int

    def __init__(self, notification_id: int):
        super().__init__(
            type=EventType.NOTIFICATION_DISMISSED,
            source=EventSource.NOTIFICATION,
        )
        self.notification_id = notification_id
