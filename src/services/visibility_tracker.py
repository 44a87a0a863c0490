"""
Visibility Tracker

One-shot viewport visibility subscriptions. The hosting environment (a
browser client over Socket.IO/REST, or a test) reports how much of an
element is visible; the tracker fires each registered callback the first
time the reported ratio reaches its threshold, then forgets it.
"""

import inspect
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, List, Optional, Union

from models.events import ElementVisibleEvent
from services.event_bus import EventBus
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.VISIBILITY)

VisibilityCallback = Callable[[str], Union[None, Awaitable[None]]]

COUNTER_THRESHOLD = 0.5
REVEAL_THRESHOLD = 0.1


@dataclass
class VisibilitySubscription:
    element_id: str
    threshold: float
    callback: VisibilityCallback
    name: str = ""


class VisibilityTracker:
    """
    Example:
        tracker = VisibilityTracker()
        tracker.register_once("statArea", on_visible, threshold=0.5)
        await tracker.report("statArea", 0.3)   # nothing
        await tracker.report("statArea", 0.7)   # on_visible("statArea")
        await tracker.report("statArea", 1.0)   # nothing, already fired
    """

    def __init__(self, event_bus: Optional[EventBus] = None):
        self.event_bus = event_bus
        self._subscriptions: Dict[str, List[VisibilitySubscription]] = {}

    def register_once(
        self,
        element_id: str,
        callback: VisibilityCallback,
        threshold: float = COUNTER_THRESHOLD,
        name: str = "",
    ) -> VisibilitySubscription:
        """Arm a one-shot callback for an element."""
        if not 0.0 <= threshold <= 1.0:
            raise ValueError(f"threshold must be within [0, 1], got {threshold}")

        subscription = VisibilitySubscription(element_id, threshold, callback, name)
        self._subscriptions.setdefault(element_id, []).append(subscription)
        log.debug(f"Armed '{element_id}'", threshold=threshold, name=name or "-")
        return subscription

    def cancel(self, subscription: VisibilitySubscription) -> bool:
        subs = self._subscriptions.get(subscription.element_id, [])
        if subscription not in subs:
            return False
        subs.remove(subscription)
        if not subs:
            del self._subscriptions[subscription.element_id]
        return True

    def is_armed(self, element_id: str) -> bool:
        return bool(self._subscriptions.get(element_id))

    def armed_elements(self) -> List[str]:
        return list(self._subscriptions.keys())

    async def report(self, element_id: str, ratio: float) -> int:
        """
        Environment notification: ``ratio`` of the element is now visible.

        Returns the number of callbacks fired.
        """
        if not 0.0 <= ratio <= 1.0:
            raise ValueError(f"Visible ratio must be within [0, 1], got {ratio}")

        subs = self._subscriptions.get(element_id)
        if not subs:
            return 0

        due = [s for s in subs if ratio >= s.threshold and ratio > 0]
        if not due:
            return 0

        # Drop before calling so a callback can re-arm the element
        remaining = [s for s in subs if s not in due]
        if remaining:
            self._subscriptions[element_id] = remaining
        else:
            del self._subscriptions[element_id]

        fired = 0
        for subscription in due:
            try:
                result = subscription.callback(element_id)
                if inspect.isawaitable(result):
                    await result
                fired += 1
            except Exception as e:
                log.error(
                    f"Visibility callback '{subscription.name or '-'}' failed for '{element_id}'",
                    exception=repr(e)
                )

        log.debug(f"'{element_id}' became visible", ratio=ratio, fired=fired)

        if self.event_bus:
            await self.event_bus.publish(ElementVisibleEvent(element_id, ratio, fired))
        return fired
