"""
Notification Service

Toast notifications: shown immediately, dismissed after a fixed delay.
The dismissal timer is a tracked task owned through a ScheduledHandle.
"""

import asyncio
import itertools
from typing import Dict, Optional

from lifecycle.handles import ScheduledHandle
from lifecycle.task_registry import create_tracked_task, TaskCategory
from models.events import NotificationShownEvent, NotificationDismissedEvent
from services.event_bus import EventBus
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.DASHBOARD)

DEFAULT_NOTIFICATION_MS = 3000


class NotificationService:

    def __init__(self, event_bus: EventBus, duration_ms: int = DEFAULT_NOTIFICATION_MS):
        self.event_bus = event_bus
        self.duration_ms = duration_ms
        self._ids = itertools.count(1)
        self._visible: Dict[int, str] = {}

    @property
    def visible(self) -> Dict[int, str]:
        """Notifications currently on screen, by id"""
        return dict(self._visible)

    async def show(self, message: str, duration_ms: Optional[int] = None) -> ScheduledHandle:
        """Publish a notification and schedule its dismissal."""
        notification_id = next(self._ids)
        self._visible[notification_id] = message

        log.info(f"Notification: {message}")
        await self.event_bus.publish(NotificationShownEvent(notification_id, message))

        delay_s = (self.duration_ms if duration_ms is None else duration_ms) / 1000
        description = f"Dismiss notification {notification_id}"
        task = create_tracked_task(
            self._dismiss_later(notification_id, delay_s),
            category=TaskCategory.NOTIFICATION,
            description=description,
            created_by=self.__class__.__name__
        )
        return ScheduledHandle(task, description)

    async def dismiss(self, notification_id: int) -> bool:
        if self._visible.pop(notification_id, None) is None:
            return False
        await self.event_bus.publish(NotificationDismissedEvent(notification_id))
        return True

    async def _dismiss_later(self, notification_id: int, delay_s: float) -> None:
        await asyncio.sleep(delay_s)
        await self.dismiss(notification_id)
