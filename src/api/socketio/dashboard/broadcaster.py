from models.events import (
    EventType,
    ChartUpdatedEvent,
    DisplayStyleChangedEvent,
    DisplayTextChangedEvent,
    ElementAddedEvent,
    ElementRemovedEvent,
    MapLayerChangedEvent,
    NotificationDismissedEvent,
    NotificationShownEvent,
)
from dashboard.map_overlays import layer_name
from services.service_container import ServiceContainer


def register_dashboard_broadcaster(sio, services: ServiceContainer):
    """Mirror every dashboard mutation published on the bus to all clients."""
    bus = services.event_bus

    async def on_text_changed(event: DisplayTextChangedEvent):
        await sio.emit("display:update", {"id": event.element_id, "text": event.new})

    async def on_style_changed(event: DisplayStyleChangedEvent):
        await sio.emit("display:style", {"id": event.element_id, "style": event.style})

    async def on_element_added(event: ElementAddedEvent):
        await sio.emit("display:added", event.element)

    async def on_element_removed(event: ElementRemovedEvent):
        await sio.emit("display:removed", {"id": event.element_id})

    async def on_chart_updated(event: ChartUpdatedEvent):
        await sio.emit("chart:update", {
            "id": event.chart_id.value,
            "labels": event.labels,
            "datasets": event.datasets,
            "mode": event.mode,
        })

    async def on_layer_changed(event: MapLayerChangedEvent):
        await sio.emit("map:layer", {"layer": event.new.value, "name": layer_name(event.new)})

    async def on_notification_shown(event: NotificationShownEvent):
        await sio.emit("notification:show", {"id": event.notification_id, "message": event.message})

    async def on_notification_dismissed(event: NotificationDismissedEvent):
        await sio.emit("notification:dismiss", {"id": event.notification_id})

    bus.subscribe(EventType.DISPLAY_TEXT_CHANGED, on_text_changed)  # type: ignore
    bus.subscribe(EventType.DISPLAY_STYLE_CHANGED, on_style_changed)  # type: ignore
    bus.subscribe(EventType.ELEMENT_ADDED, on_element_added)  # type: ignore
    bus.subscribe(EventType.ELEMENT_REMOVED, on_element_removed)  # type: ignore
    bus.subscribe(EventType.CHART_UPDATED, on_chart_updated)  # type: ignore
    bus.subscribe(EventType.MAP_LAYER_CHANGED, on_layer_changed)  # type: ignore
    bus.subscribe(EventType.NOTIFICATION_SHOWN, on_notification_shown)  # type: ignore
    bus.subscribe(EventType.NOTIFICATION_DISMISSED, on_notification_dismissed)  # type: ignore
