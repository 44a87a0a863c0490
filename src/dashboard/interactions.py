"""
Interaction helpers

Pure geometry and style computations for the page's small visual effects:
button ripples, hero parallax, scroll reveal, card hover overlays and the
"last update" stamp.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Optional

PARALLAX_RATE = -0.5
MAP_FADE_OPACITY = "0.7"
LAST_UPDATE_FORMAT = "%d/%m/%Y %H:%M"

REVEAL_HIDDEN_STYLE: Dict[str, str] = {
    "opacity": "0",
    "transform": "translateY(30px)",
    "transition": "opacity 0.6s ease, transform 0.6s ease",
}

REVEAL_SHOWN_STYLE: Dict[str, str] = {
    "opacity": "1",
    "transform": "translateY(0)",
}

OVERLAY_HOVER_BACKGROUND = "linear-gradient(to bottom, rgba(0, 0, 0, 0.3), rgba(0, 0, 0, 0.8))"
OVERLAY_REST_BACKGROUND = "linear-gradient(to bottom, transparent, rgba(0, 0, 0, 0.7))"


@dataclass(frozen=True)
class Rect:
    left: float
    top: float
    width: float
    height: float


@dataclass(frozen=True)
class Ripple:
    size: float
    x: float
    y: float

    def style(self) -> Dict[str, str]:
        return {
            "position": "absolute",
            "width": f"{self.size:g}px",
            "height": f"{self.size:g}px",
            "left": f"{self.x:g}px",
            "top": f"{self.y:g}px",
            "background": "rgba(255, 255, 255, 0.3)",
            "border-radius": "50%",
            "transform": "scale(0)",
            "animation": "ripple 0.6s ease-out",
            "pointer-events": "none",
        }


def ripple_geometry(rect: Rect, client_x: float, client_y: float) -> Ripple:
    """Square ripple centred on the click point, sized to the larger side."""
    size = max(rect.width, rect.height)
    return Ripple(
        size=size,
        x=client_x - rect.left - size / 2,
        y=client_y - rect.top - size / 2,
    )


def parallax_offset(scroll_y: float, rate: float = PARALLAX_RATE) -> float:
    return scroll_y * rate


def parallax_transform(scroll_y: float) -> str:
    offset = parallax_offset(scroll_y) + 0.0  # no "-0px" at the top of the page
    return f"translateY({offset:g}px)"


def hover_overlay_background(hovered: bool) -> str:
    return OVERLAY_HOVER_BACKGROUND if hovered else OVERLAY_REST_BACKGROUND


def format_last_update(now: Optional[datetime] = None) -> str:
    return (now or datetime.now()).strftime(LAST_UPDATE_FORMAT)
