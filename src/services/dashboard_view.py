"""
Dashboard View

Registry of display elements for one dashboard page. It is the only
component allowed to mutate element text or style, and every mutation is
published on the event bus so the Socket.IO bridge can mirror it.
"""

from typing import Dict, Iterable, List, Optional

from models.display import DisplayElement
from models.events import (
    DisplayTextChangedEvent,
    DisplayStyleChangedEvent,
    ElementAddedEvent,
    ElementRemovedEvent,
)
from services.event_bus import EventBus
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.DASHBOARD)


class DashboardView:
    """
    Per-view context for display elements.

    Example:
        view = DashboardView(event_bus)
        view.add(DisplayElement("avgTemp", "24.5", group="kpi"))
        await view.set_text("avgTemp", "24.6")
    """

    def __init__(self, event_bus: Optional[EventBus] = None, elements: Iterable[DisplayElement] = ()):
        self.event_bus = event_bus
        self._elements: Dict[str, DisplayElement] = {}
        for element in elements:
            self.add(element)

    def add(self, element: DisplayElement) -> DisplayElement:
        """Register an element (sync, used while building the page)."""
        if element.id in self._elements:
            raise ValueError(f"Duplicate display element id: {element.id}")
        self._elements[element.id] = element
        return element

    def get(self, element_id: str) -> Optional[DisplayElement]:
        return self._elements.get(element_id)

    def __contains__(self, element_id: str) -> bool:
        return element_id in self._elements

    def all(self) -> List[DisplayElement]:
        return list(self._elements.values())

    def by_group(self, group: str) -> List[DisplayElement]:
        return [e for e in self._elements.values() if e.group == group]

    async def set_text(self, element_id: str, text: str) -> bool:
        """
        Replace an element's text content.

        Returns False if the element no longer exists (e.g. removed ripple).
        Writing the text an element already shows publishes nothing, so
        mirrors only see real changes: a "12" counter over 60 ticks sends
        at most 13 updates.
        """
        element = self._elements.get(element_id)
        if element is None:
            log.debug(f"set_text on unknown element '{element_id}' ignored")
            return False

        old = element.text
        element.text = text
        if self.event_bus and old != text:
            await self.event_bus.publish(DisplayTextChangedEvent(element_id, old, text))
        return True

    async def set_style(self, element_id: str, **style: str) -> bool:
        """Merge inline style properties into an element."""
        element = self._elements.get(element_id)
        if element is None:
            log.debug(f"set_style on unknown element '{element_id}' ignored")
            return False

        element.style.update(style)
        if self.event_bus:
            await self.event_bus.publish(DisplayStyleChangedEvent(element_id, dict(style)))
        return True

    async def insert(self, element: DisplayElement) -> DisplayElement:
        """Add an element at runtime and announce it."""
        self.add(element)
        if self.event_bus:
            await self.event_bus.publish(ElementAddedEvent(element.to_dict()))
        return element

    async def remove(self, element_id: str) -> bool:
        element = self._elements.pop(element_id, None)
        if element is None:
            return False
        if self.event_bus:
            await self.event_bus.publish(ElementRemovedEvent(element_id))
        return True

    def snapshot(self) -> List[dict]:
        return [e.to_dict() for e in self._elements.values()]
