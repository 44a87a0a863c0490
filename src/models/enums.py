"""
Enums for the environmental dashboard runtime
"""

from enum import Enum, auto


class LogLevel(Enum):
    """Log severity levels"""
    DEBUG = auto()
    INFO = auto()
    WARN = auto()
    ERROR = auto()


class LogCategory(Enum):
    """Log categories for grouping related events"""
    CONFIG = auto()      # Configuration loading, validation
    ANIMATION = auto()   # Counter count-up animations
    REFRESH = auto()     # Periodic jitter refresh of live values
    VISIBILITY = auto()  # Viewport visibility triggers
    CHART = auto()       # Chart series replacement
    MAP = auto()         # Map overlays and layer switches
    DASHBOARD = auto()   # Controller lifecycle, user interactions
    EVENT = auto()       # Event bus events and handling

    API = auto()
    SOCKETIO = auto()

    SYSTEM = auto()      # Startup, shutdown, errors
    SHUTDOWN = auto()
    TASK = auto()

    GENERAL = auto()    # Default general category


class ChartID(Enum):
    """Chart identifiers"""
    TEMPERATURE = "temperature"
    NDVI = "ndvi"
    PRECIPITATION = "precipitation"


class NDVIRegion(Enum):
    """Regions selectable in the NDVI chart"""
    ALL = "all"
    NORTH = "north"
    SOUTH = "south"
    CENTER = "center"


class MapLayer(Enum):
    """Base layers offered by the map layer selector"""
    SATELLITE = "satellite"
    NDVI = "ndvi"
    TEMPERATURE = "temperature"
    DRONE = "drone"


class StationStatus(Enum):
    """Weather station operating status"""
    ONLINE = "online"
    MAINTENANCE = "maintenance"


class OverlayKind(Enum):
    """Map overlay geometry kinds"""
    POLYGON = "polygon"
    CIRCLE_MARKER = "circle_marker"
    RECTANGLE = "rectangle"
