import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, model_validator

from libs.common.validation import PHONE_ERROR, normalize_phone
from services.events_service.schemas import AttendeeResponse


class WalkInCheckIn(BaseModel):
    """Identify a walk-in either by member id (after a kiosk lookup) or by
    the phone number on their member record."""

    member_id: Optional[uuid.UUID] = None
    phone: Optional[str] = None

    @model_validator(mode="after")
    def member_or_phone(self):
        if self.member_id is None and not self.phone:
            raise ValueError("member_id or phone is required")
        if self.phone:
            digits = normalize_phone(self.phone)
            if digits is None:
                raise ValueError(PHONE_ERROR)
            self.phone = digits
        return self


class QRCheckIn(BaseModel):
    code: str


class CheckInResponse(BaseModel):
    attendee: AttendeeResponse
    name: Optional[str] = None
    already_checked_in: bool = False
    checked_in_at: Optional[datetime] = None


class CheckInStats(BaseModel):
    event_id: uuid.UUID
    rsvp_count: int
    checked_in_count: int
    checkin_rate: int  # percent of attending RSVPs
    attendees: List[AttendeeResponse] = []
