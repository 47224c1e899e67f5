import uuid
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, field_validator

from libs.common.validation import (
    digits_only,
    format_phone,
    require_text,
)

SUBSCRIBE_PHONE_ERROR = "Please enter a valid 10-digit phone number."


class SubscriberCreate(BaseModel):
    name: str
    email: EmailStr
    phone: str
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    date_of_birth: Optional[date] = None

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
        # Stored in display form; the E.164 copy is derived from it
        if len(digits_only(v)) != 10:
            raise ValueError(SUBSCRIBE_PHONE_ERROR)
        return format_phone(v)

    @field_validator("address", "city", "state", "zip_code")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return v.strip()


class SubscriberResponse(BaseModel):
    id: uuid.UUID
    name: str
    email: str
    phone: Optional[str] = None
    phone_e164: Optional[str] = None
    source: str
    subscription_status: str
    optin_date: datetime

    model_config = ConfigDict(from_attributes=True)
