"""
Models package - Data models for the dashboard runtime
"""

from .enums import (
    LogLevel,
    LogCategory,
    ChartID,
    NDVIRegion,
    MapLayer,
    StationStatus,
    OverlayKind,
)
from .animation import AnimationTarget, JitterRefresh
from .display import DisplayElement

__all__ = [
    'LogLevel',
    'LogCategory',
    'ChartID',
    'NDVIRegion',
    'MapLayer',
    'StationStatus',
    'OverlayKind',
    'AnimationTarget',
    'JitterRefresh',
    'DisplayElement',
]
