"""Pydantic schemas for the members directory and kiosk lookup."""

import uuid
from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from libs.common.validation import PHONE_ERROR, normalize_phone


class MemberResponse(BaseModel):
    """Full member profile, returned to the member themselves."""

    id: uuid.UUID
    auth_id: Optional[str] = None
    name: str
    email: str
    phone: Optional[str] = None
    date_of_birth: Optional[date] = None
    address: Optional[str] = None
    employer: Optional[str] = None
    industry: Optional[str] = None
    date_joined: Optional[date] = None
    referral_source: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class MemberSearchResult(BaseModel):
    """Directory hit for the organiser check-in search."""

    id: uuid.UUID
    name: str
    email: str
    phone: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class PhoneLookupRequest(BaseModel):
    phone: str
    event_id: uuid.UUID

    @field_validator("phone")
    @classmethod
    def phone_format(cls, v: str) -> str:
        digits = normalize_phone(v)
        if digits is None:
            raise ValueError(PHONE_ERROR)
        return digits


class PhoneLookupPerson(BaseModel):
    id: uuid.UUID
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    occupation: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class PhoneLookupResponse(BaseModel):
    """Kiosk lookup outcome.

    When nobody matched, ``sms_sent`` reports whether a check-in link was
    texted to the number.
    """

    found: bool
    person_type: Optional[Literal["member", "donor"]] = None
    person: Optional[PhoneLookupPerson] = None
    sms_sent: bool = False
    checkin_url: Optional[str] = None
