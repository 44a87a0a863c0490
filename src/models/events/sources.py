from enum import Enum, auto


class EventSource(Enum):
    """Event source identifiers for application events"""
    VIEW = auto()            # Display element text/style changes
    VISIBILITY = auto()      # Viewport visibility tracker
    CHART = auto()           # Chart models
    MAP = auto()             # Map model
    NOTIFICATION = auto()    # Toast notifications
    APPLICATION = auto()     # Generic application events
