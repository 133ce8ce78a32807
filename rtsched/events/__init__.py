"""Event exports."""

from .bus import EVENT_ID_MODES, EventBus, EventHandler, normalize_event_id_mode
from .types import EventType, SimEvent

__all__ = ["EVENT_ID_MODES", "EventBus", "EventHandler", "EventType", "SimEvent", "normalize_event_id_mode"]
