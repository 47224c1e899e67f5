"""Business rules for events, RSVPs and public registration.

Pure functions only; routers load rows and translate the results into
HTTP responses.
"""

from datetime import date, datetime, timedelta
from typing import NamedTuple, Optional

from libs.common.config import get_settings
from libs.common.datetime_utils import (
    calculate_age,
    ensure_aware,
    format_event_date,
    format_event_date_short,
    get_event_status,
    get_time_until_event,
    utc_now,
)
from services.events_service.models import (
    FUNDRAISER_EVENT_TYPE,
    Event,
    EventStatus,
)
from services.events_service.slugs import generate_event_slug

settings = get_settings()


class Rejection(NamedTuple):
    status_code: int
    detail: str


EVENT_PASSED = Rejection(410, "This event has already passed")

ADDRESS_FIELDS = (
    "location_address",
    "location_one_address",
    "location_two_address",
    "location_three_address",
)


def rsvp_rejection(event: Event, now: Optional[datetime] = None) -> Optional[Rejection]:
    """Why an RSVP for this event cannot be accepted right now, if at all.

    RSVPs stay open until RSVP_GRACE_HOURS after the start so latecomers
    can still register at the door.
    """
    now = ensure_aware(now or utc_now())

    if event.status != EventStatus.PUBLISHED:
        return Rejection(404, "Event not found")
    if not event.rsvp_enabled:
        return Rejection(400, "RSVP is not enabled for this event")
    if ensure_aware(event.event_date) < now - timedelta(hours=settings.RSVP_GRACE_HOURS):
        return EVENT_PASSED
    if event.rsvp_deadline and ensure_aware(event.rsvp_deadline) < now:
        return Rejection(400, "The RSVP deadline for this event has passed")
    return None


def is_full(event: Event) -> bool:
    return bool(event.max_attendees) and event.attendee_count >= event.max_attendees


def checkin_rejection(
    event: Event, now: Optional[datetime] = None
) -> Optional[Rejection]:
    """Public (self and walk-in) check-in needs check-in switched on and,
    when the organiser set one, the current time inside the window."""
    now = ensure_aware(now or utc_now())

    if event.status != EventStatus.PUBLISHED or not event.checkin_enabled:
        return Rejection(403, "Check-in is not open for this event")
    if event.checkin_start_time and now < ensure_aware(event.checkin_start_time):
        return Rejection(403, "Check-in has not started yet")
    if event.checkin_end_time and now > ensure_aware(event.checkin_end_time):
        return Rejection(403, "Check-in has closed")
    return None


def is_eligible_member(
    date_of_birth: date, state: Optional[str], today: Optional[date] = None
) -> bool:
    """Membership is open to in-state residents under the age limit."""
    return (
        calculate_age(date_of_birth, today) < settings.MEMBER_MAX_AGE
        and (state or "").strip().upper() == settings.MEMBER_STATE
    )


def registration_errors(
    event_type: Optional[str],
    street: str,
    city: str,
    state: str,
    employer: str,
    occupation: str,
) -> dict[str, str]:
    """Field errors for rules that depend on the event.

    Fundraisers must collect a full address plus employer and occupation
    for contribution reporting.
    """
    if event_type != FUNDRAISER_EVENT_TYPE:
        return {}

    errors: dict[str, str] = {}
    if not street:
        errors["street"] = "Street address is required"
    if not city:
        errors["city"] = "City is required"
    if not state:
        errors["state"] = "State is required"
    if not employer:
        errors["employer"] = "Employer is required for fundraiser events"
    if not occupation:
        errors["occupation"] = "Occupation is required for fundraiser events"
    return errors


def format_mailing_address(street: str, city: str, state: str, zip_code: str) -> str:
    """"12 Main St, Columbia, MO 65201", skipping the parts left blank."""
    locality = " ".join(part for part in (state, zip_code) if part)
    return ", ".join(part for part in (street, city, locality) if part)


def attendance_percentage(count: int, capacity: Optional[int]) -> int:
    if not capacity or not count:
        return 0
    return round(count / capacity * 100)


def event_response_dict(
    event: Event,
    user_attendee=None,
    reveal_address: bool = True,
    now: Optional[datetime] = None,
) -> dict:
    """Build an EventResponse-compatible dict with derived display fields.

    Addresses are blanked when the organiser hides them until RSVP and the
    caller has not RSVP'd.
    """
    data = {
        column.name: getattr(event, column.name)
        for column in Event.__table__.columns
    }
    if event.hide_address_before_rsvp and not reveal_address:
        for field in ADDRESS_FIELDS:
            data[field] = None

    data.update(
        slug=generate_event_slug(event.title, event.event_date),
        event_status=get_event_status(event.event_date, now),
        display_date=format_event_date(event.event_date, now),
        short_date=format_event_date_short(event.event_date),
        time_until=get_time_until_event(event.event_date, now),
        attendance_percentage=attendance_percentage(
            event.attendee_count, event.max_attendees
        ),
        user_attendee=user_attendee,
    )
    return data
