from dataclasses import dataclass
from typing import Any, Dict

from models.events.base import Event
from models.events.types import EventType
from models.events.sources import EventSource


@dataclass(init=False)
class DisplayTextChangedEvent(Event):
    element_id: str
    old: str
    new: str

    def __init__(self, element_id: str, old: str, new: str):
        super().__init__(
            type=EventType.DISPLAY_TEXT_CHANGED,
            source=EventSource.VIEW,
        )
        self.element_id = element_id
        self.old = old
        self.new = new


@dataclass(init=False)
class DisplayStyleChangedEvent(Event):
    element_id: str
    style: Dict[str, str]

    def __init__(self, element_id: str, style: Dict[str, str]):
        super().__init__(
            type=EventType.DISPLAY_STYLE_CHANGED,
            source=EventSource.VIEW,
        )
        self.element_id = element_id
        self.style = style


@dataclass(init=False)
class ElementAddedEvent(Event):
    element: Dict[str, Any]

    def __init__(self, element: Dict[str, Any]):
        super().__init__(
            type=EventType.ELEMENT_ADDED,
            source=EventSource.VIEW,
        )
        self.element = element


@dataclass(init=False)
class ElementRemovedEvent(Event):
    element_id: str

    def __init__(self, element_id: str):
        super().__init__(
            type=EventType.ELEMENT_REMOVED,
            source=EventSource.VIEW,
        )
        self.element_id = element_id


@dataclass(init=False)
class ElementVisibleEvent(Event):
    element_id: str
    ratio: float
    fired: int

    def __init__(self, element_id: str, ratio: float, fired: int):
        super().__init__(
            type=EventType.ELEMENT_VISIBLE,
            source=EventSource.VISIBILITY,
        )
        self.element_id = element_id
        self.ratio = ratio
        self.fired = fired
