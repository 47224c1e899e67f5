"""Events Service schemas package."""

from services.events_service.schemas.main import (
    AttendeeResponse,
    EventBase,
    EventCreate,
    EventResponse,
    EventUpdate,
    PhoneRSVPRequest,
    PhoneRSVPResponse,
    PublicRegistrationCreate,
    RegistrationResponse,
    RSVPCreate,
)

__all__ = [
    "AttendeeResponse",
    "EventBase",
    "EventCreate",
    "EventResponse",
    "EventUpdate",
    "PhoneRSVPRequest",
    "PhoneRSVPResponse",
    "PublicRegistrationCreate",
    "RegistrationResponse",
    "RSVPCreate",
]
