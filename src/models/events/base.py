from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Dict

from models.events.types import EventType
from models.events.sources import EventSource

_METADATA = frozenset({"type", "source", "timestamp"})


@dataclass(init=False)
class Event:
    """
    Something that changed on the dashboard.

    Subclasses set their own payload attributes after calling
    ``super().__init__(type=..., source=...)``; ``to_data`` returns only
    that payload, which is what reaches Socket.IO clients.
    """

    type: EventType
    source: EventSource | None
    timestamp: float = field(default_factory=time.time)

    def __init__(self, *, type: EventType, source: EventSource | None):
        self.type = type
        self.source = source
        self.timestamp = time.time()

    def to_data(self) -> Dict[str, Any]:
        return {k: v for k, v in vars(self).items() if k not in _METADATA}
