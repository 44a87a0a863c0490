"""
EventBus middleware

Each takes an event and returns it (possibly replaced) or None to drop it.
"""

from models.events import Event, EventType
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.EVENT)

# one per animation frame
_PER_FRAME = frozenset({EventType.DISPLAY_TEXT_CHANGED, EventType.DISPLAY_STYLE_CHANGED})


def log_middleware(event: Event) -> Event:
    """Logs every event; per-frame display updates only at DEBUG."""
    origin = event.source.name if event.source else "?"
    write = log.debug if event.type in _PER_FRAME else log.info
    payload = [f"{k}: {v}" for k, v in event.to_data().items()]
    write(f"{event.type.name} <- {origin}", details=payload)
    return event
