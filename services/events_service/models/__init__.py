"""Events Service models package."""

from services.events_service.models.core import Event, EventAttendee
from services.events_service.models.enums import (
    FUNDRAISER_EVENT_TYPE,
    CheckInMethod,
    EventStatus,
    RSVPStatus,
)

__all__ = [
    "CheckInMethod",
    "Event",
    "EventAttendee",
    "EventStatus",
    "FUNDRAISER_EVENT_TYPE",
    "RSVPStatus",
]
