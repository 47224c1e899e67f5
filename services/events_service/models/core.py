"""Events Service models."""

import uuid
from datetime import date, datetime
from typing import Optional

from libs.common.datetime_utils import utc_now
from libs.db.base import Base
from services.events_service.models.enums import (
    CheckInMethod,
    EventStatus,
    RSVPStatus,
    enum_values,
)
from sqlalchemy import Boolean, Date, DateTime
from sqlalchemy import Enum as SAEnum
from sqlalchemy import ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column


class Event(Base):
    """Organisation events: meetings, canvasses, socials, fundraisers."""

    __tablename__ = "events"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    title: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    event_type: Mapped[Optional[str]] = mapped_column(
        String, nullable=True
    )  # fundraiser/social/canvass/meeting/...
    event_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True
    )
    event_end_date: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    status: Mapped[EventStatus] = mapped_column(
        SAEnum(
            EventStatus,
            name="event_status_enum",
            values_callable=enum_values,
            validate_strings=True,
        ),
        default=EventStatus.DRAFT,
        nullable=False,
    )

    # Location
    location: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    location_address: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    hide_address_before_rsvp: Mapped[bool] = mapped_column(Boolean, default=False)
    multiple_locations: Mapped[bool] = mapped_column(Boolean, default=False)
    location_one_name: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    location_one_address: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    location_two_name: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    location_two_address: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    location_three_name: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    location_three_address: Mapped[Optional[str]] = mapped_column(
        String, nullable=True
    )

    # RSVP
    rsvp_enabled: Mapped[bool] = mapped_column(Boolean, default=True)
    rsvp_deadline: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    max_attendees: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    attendee_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # Check-in
    checkin_enabled: Mapped[bool] = mapped_column(Boolean, default=False)
    checkin_start_time: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    checkin_end_time: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    created_by: Mapped[Optional[str]] = mapped_column(
        String, nullable=True
    )  # Supabase auth id of the organiser
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    def __repr__(self):
        return f"<Event {self.title}>"


class EventAttendee(Base):
    """An RSVP row. Members and walk-up guests share the table; guest
    contact fields are always filled so rows can be matched by email or
    phone when member_id is empty."""

    __tablename__ = "event_attendees"
    __table_args__ = (
        UniqueConstraint("event_id", "member_id", name="uq_event_attendee_member"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    event_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("events.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    member_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("members.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    # Guest contact/profile (copied from the registration form)
    guest_name: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    guest_email: Mapped[Optional[str]] = mapped_column(
        String, nullable=True, index=True
    )
    guest_phone: Mapped[Optional[str]] = mapped_column(
        String, nullable=True, index=True
    )  # 10 digits
    date_of_birth: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    address: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    city: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    state: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    zip: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    employer: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    occupation: Mapped[Optional[str]] = mapped_column(String, nullable=True)

    rsvp_status: Mapped[RSVPStatus] = mapped_column(
        SAEnum(
            RSVPStatus,
            name="rsvp_status_enum",
            values_callable=enum_values,
            validate_strings=True,
        ),
        default=RSVPStatus.ATTENDING,
        nullable=False,
    )
    guest_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    checked_in: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    checked_in_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    checked_in_by: Mapped[Optional[CheckInMethod]] = mapped_column(
        SAEnum(
            CheckInMethod,
            name="checkin_method_enum",
            values_callable=enum_values,
            validate_strings=True,
        ),
        nullable=True,
    )

    rsvp_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    def __repr__(self):
        return (
            f"<EventAttendee event={self.event_id} member={self.member_id} "
            f"status={self.rsvp_status}>"
        )
