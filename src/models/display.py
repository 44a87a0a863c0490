"""
Display element model

A display element is the smallest piece of the dashboard view: a KPI tile
value, a story-page counter, a card that fades in on scroll, the "last
update" stamp. The view layer mirrors these over Socket.IO; the runtime
only ever touches their text and a handful of style properties.
"""

from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass
class DisplayElement:
    """
    Attributes:
        id: Element identifier (unique per view)
        text: Current text content
        group: Logical group ("kpi", "counter", "reveal", ...)
        style: Inline style properties (opacity, transform, ...)
    """
    id: str
    text: str = ""
    group: str = ""
    style: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "group": self.group,
            "style": dict(self.style),
        }
