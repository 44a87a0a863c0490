"""
Event system for the dashboard runtime

View mutations and collaborator updates are published as events so that
the Socket.IO bridge (and tests) can observe them without touching the
producers.
"""

# Event type, base class, and sources
from models.events.types import EventType
from models.events.base import Event
from models.events.sources import EventSource

# View events
from models.events.display_events import (
    DisplayTextChangedEvent,
    DisplayStyleChangedEvent,
    ElementAddedEvent,
    ElementRemovedEvent,
    ElementVisibleEvent,
)

# Collaborator events
from models.events.dashboard_events import (
    ChartUpdatedEvent,
    MapLayerChangedEvent,
    NotificationShownEvent,
    NotificationDismissedEvent,
)

__all__ = [
    # Type, base, and sources
    "EventType",
    "Event",
    "EventSource",

    # View
    "DisplayTextChangedEvent",
    "DisplayStyleChangedEvent",
    "ElementAddedEvent",
    "ElementRemovedEvent",
    "ElementVisibleEvent",

    # Collaborators
    "ChartUpdatedEvent",
    "MapLayerChangedEvent",
    "NotificationShownEvent",
    "NotificationDismissedEvent",
]
