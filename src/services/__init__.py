"""Services layer"""

from .event_bus import EventBus
from .dashboard_view import DashboardView
from .value_animator import ValueAnimator
from .jitter_refresh import JitterRefresher, jitter_tick
from .visibility_tracker import VisibilityTracker
from .notification_service import NotificationService
from .service_container import ServiceContainer

__all__ = [
    "EventBus",
    "DashboardView",
    "ValueAnimator",
    "JitterRefresher",
    "jitter_tick",
    "VisibilityTracker",
    "NotificationService",
    "ServiceContainer",
]
