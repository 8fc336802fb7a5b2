"""Event-driven architecture components."""

from .bus import Event, EventBus, EventRecord, Subscription
from .domain import FOCUS_CHANGED, SCREEN_ACTIVATED

__all__ = [
    "Event",
    "EventBus",
    "EventRecord",
    "FOCUS_CHANGED",
    "SCREEN_ACTIVATED",
    "Subscription",
]
