"""
Event Bus - in-process pub/sub between dashboard services

The animator, refresher and notification service publish what changed on
the page; the Socket.IO broadcaster subscribes and pushes it to browsers.

    bus.subscribe(
        EventType.DISPLAY_TEXT_CHANGED,
        on_text,
        priority=10,
        filter_fn=lambda e: e.element_id == "avgNDVI",
    )
    await bus.publish(DisplayTextChangedEvent("avgNDVI", "0.78", "0.79"))
"""

import inspect
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Dict, List, Optional

from models.events import Event, EventType
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.EVENT)

Handler = Callable[[Event], object]
Middleware = Callable[[Event], Optional[Event]]


def _name(fn: Callable) -> str:
    return getattr(fn, "__qualname__", None) or repr(fn)


@dataclass(frozen=True)
class Subscription:
    handler: Handler
    priority: int = 0
    filter_fn: Optional[Callable[[Event], bool]] = None

    def accepts(self, event: Event) -> bool:
        return self.filter_fn is None or bool(self.filter_fn(event))


class EventBus:
    """
    Handlers run highest priority first, registration order among equals.
    Sync and async handlers are both accepted. A handler that raises is
    logged and skipped; the remaining handlers still run.

    Middleware sees every event before the handlers, in registration order,
    and may replace it or drop it by returning None.
    """

    def __init__(self, history_limit: int = 100):
        self._subscriptions: Dict[EventType, List[Subscription]] = {}
        self._middleware: List[Middleware] = []
        self._history: Deque[Event] = deque(maxlen=history_limit)

    def subscribe(
        self,
        event_type: EventType,
        handler: Handler,
        priority: int = 0,
        filter_fn: Optional[Callable[[Event], bool]] = None
    ) -> None:
        subs = self._subscriptions.setdefault(event_type, [])
        subs.append(Subscription(handler, priority, filter_fn))
        subs.sort(key=lambda s: -s.priority)
        log.debug(f"{_name(handler)} subscribed to {event_type.name}", priority=priority)

    def unsubscribe(self, event_type: EventType, handler: Handler) -> bool:
        """Returns whether ``handler`` was subscribed."""
        subs = self._subscriptions.get(event_type, [])
        for i, sub in enumerate(subs):
            if sub.handler is handler:
                del subs[i]
                return True
        return False

    def add_middleware(self, middleware: Middleware) -> None:
        self._middleware.append(middleware)
        log.debug(f"Middleware {_name(middleware)} added")

    def _through_middleware(self, event: Event) -> Optional[Event]:
        for middleware in self._middleware:
            event = middleware(event)
            if event is None:
                return None
        return event

    async def publish(self, event: Event) -> None:
        processed = self._through_middleware(event)
        if processed is None:
            return
        self._history.append(processed)

        # snapshot: a handler may unsubscribe while we iterate
        for sub in tuple(self._subscriptions.get(processed.type, ())):
            if not sub.accepts(processed):
                continue
            try:
                outcome = sub.handler(processed)
                if inspect.isawaitable(outcome):
                    await outcome
            except Exception as e:
                log.error(
                    f"Handler {_name(sub.handler)} failed on {processed.type.name}",
                    exception=repr(e)
                )

    def get_event_history(self, limit: int = 10) -> List[Event]:
        """Most recent events, oldest first."""
        return list(self._history)[-limit:]

    def clear_history(self) -> None:
        self._history.clear()
