from .event import Event, EventTag, build_event_slug
from .metadata import OnlineEventMetadata, OnsiteEventMetadata
from .registration import EventRegistration

__all__ = [
    "Event",
    "EventRegistration",
    "EventTag",
    "OnlineEventMetadata",
    "OnsiteEventMetadata",
    "build_event_slug",
]
