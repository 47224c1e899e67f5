"""Pydantic schemas for Events Service."""

import uuid
from datetime import date, datetime
from typing import Optional

from libs.common.validation import (
    PHONE_ERROR,
    ZIP_ERROR,
    is_valid_zip,
    normalize_phone,
    require_text,
)
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from services.events_service.models.enums import (
    CheckInMethod,
    EventStatus,
    RSVPStatus,
)


class EventBase(BaseModel):
    """Base event schema."""

    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    event_type: Optional[str] = None  # fundraiser/social/canvass/meeting
    event_date: datetime
    event_end_date: Optional[datetime] = None

    location: Optional[str] = None
    location_address: Optional[str] = None
    hide_address_before_rsvp: bool = False
    multiple_locations: bool = False
    location_one_name: Optional[str] = None
    location_one_address: Optional[str] = None
    location_two_name: Optional[str] = None
    location_two_address: Optional[str] = None
    location_three_name: Optional[str] = None
    location_three_address: Optional[str] = None

    rsvp_enabled: bool = True
    rsvp_deadline: Optional[datetime] = None
    max_attendees: Optional[int] = Field(None, ge=1)

    checkin_enabled: bool = False
    checkin_start_time: Optional[datetime] = None
    checkin_end_time: Optional[datetime] = None


class EventCreate(EventBase):
    """Schema for creating an event. Organisers publish on create."""

    status: EventStatus = EventStatus.PUBLISHED


class EventUpdate(BaseModel):
    """Schema for updating an event."""

    title: Optional[str] = None
    description: Optional[str] = None
    event_type: Optional[str] = None
    event_date: Optional[datetime] = None
    event_end_date: Optional[datetime] = None
    status: Optional[EventStatus] = None

    location: Optional[str] = None
    location_address: Optional[str] = None
    hide_address_before_rsvp: Optional[bool] = None
    multiple_locations: Optional[bool] = None
    location_one_name: Optional[str] = None
    location_one_address: Optional[str] = None
    location_two_name: Optional[str] = None
    location_two_address: Optional[str] = None
    location_three_name: Optional[str] = None
    location_three_address: Optional[str] = None

    rsvp_enabled: Optional[bool] = None
    rsvp_deadline: Optional[datetime] = None
    max_attendees: Optional[int] = Field(None, ge=1)

    checkin_enabled: Optional[bool] = None
    checkin_start_time: Optional[datetime] = None
    checkin_end_time: Optional[datetime] = None


class AttendeeResponse(BaseModel):
    """RSVP/attendee row as returned to organisers and the attendee."""

    id: uuid.UUID
    event_id: uuid.UUID
    member_id: Optional[uuid.UUID] = None
    guest_name: Optional[str] = None
    guest_email: Optional[str] = None
    guest_phone: Optional[str] = None
    rsvp_status: RSVPStatus
    guest_count: int
    notes: Optional[str] = None
    checked_in: bool
    checked_in_at: Optional[datetime] = None
    checked_in_by: Optional[CheckInMethod] = None
    rsvp_at: datetime
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class EventResponse(EventBase):
    """Event response schema with derived display fields."""

    id: uuid.UUID
    status: EventStatus
    attendee_count: int
    created_by: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    slug: str
    event_status: str  # upcoming/happening/past
    display_date: str  # "Today at 7:00 PM"
    short_date: str  # "Mar 6, 2026"
    time_until: str  # "in 3 days"
    attendance_percentage: int = 0
    user_attendee: Optional[AttendeeResponse] = None

    model_config = ConfigDict(from_attributes=True)


class RSVPCreate(BaseModel):
    """Schema for an authenticated RSVP."""

    guest_count: int = Field(0, ge=0, le=10)
    notes: Optional[str] = None


class PublicRegistrationCreate(BaseModel):
    """Walk-up registration form for visitors without an account.

    Address, employer and occupation are only mandatory for fundraisers;
    that rule depends on the event and is checked by the router.
    """

    name: str
    email: EmailStr
    phone: str
    date_of_birth: date
    street: str = ""
    city: str = ""
    state: str = "MO"
    zip_code: str
    employer: str = ""
    occupation: str = ""

    @field_validator("name")
    @classmethod
    def name_required(cls, v: str) -> str:
        return require_text(v, "Name is required")

    @field_validator("email")
    @classmethod
    def email_lowercase(cls, v: str) -> str:
        return v.lower()

    @field_validator("phone")
    @classmethod
    def phone_format(cls, v: str) -> str:
        require_text(v, "Phone number is required")
        digits = normalize_phone(v)
        if digits is None:
            raise ValueError(PHONE_ERROR)
        return digits

    @field_validator("zip_code")
    @classmethod
    def zip_format(cls, v: str) -> str:
        v = require_text(v, "ZIP code is required")
        if not is_valid_zip(v):
            raise ValueError(ZIP_ERROR)
        return v

    @field_validator("street", "city", "state", "employer", "occupation")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return (v or "").strip()


class RegistrationResponse(BaseModel):
    attendee: AttendeeResponse
    member_id: Optional[uuid.UUID] = None
    is_member: bool


class PhoneRSVPRequest(BaseModel):
    phone: str

    @field_validator("phone")
    @classmethod
    def phone_format(cls, v: str) -> str:
        digits = normalize_phone(v)
        if digits is None:
            raise ValueError(PHONE_ERROR)
        return digits


class PhoneRSVPResponse(BaseModel):
    """Three outcomes: registered now (success and found), already
    registered (found only), or unknown phone (neither)."""

    success: bool
    found: bool
    name: Optional[str] = None
