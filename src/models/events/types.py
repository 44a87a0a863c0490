from enum import Enum, auto


class EventType(Enum):
    # View
    DISPLAY_TEXT_CHANGED = auto()
    DISPLAY_STYLE_CHANGED = auto()
    ELEMENT_ADDED = auto()
    ELEMENT_REMOVED = auto()

    # Environment
    ELEMENT_VISIBLE = auto()

    # Collaborators
    CHART_UPDATED = auto()
    MAP_LAYER_CHANGED = auto()

    # Notifications
    NOTIFICATION_SHOWN = auto()
    NOTIFICATION_DISMISSED = auto()

    SYSTEM_EVENT = auto()
