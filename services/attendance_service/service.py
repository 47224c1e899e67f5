"""Check-in state transitions for attendee rows."""

from datetime import datetime
from typing import Optional

from libs.common.datetime_utils import utc_now
from services.events_service.models import CheckInMethod, EventAttendee


def mark_checked_in(
    attendee: EventAttendee,
    method: CheckInMethod,
    now: Optional[datetime] = None,
) -> bool:
    """Stamp a row as checked in. Returns False, leaving the original
    timestamp and method alone, when it was already checked in."""
    if attendee.checked_in:
        return False
    attendee.checked_in = True
    attendee.checked_in_at = now or utc_now()
    attendee.checked_in_by = method
    return True


def checkin_rate(checked_in: int, rsvps: int) -> int:
    if not rsvps:
        return 0
    return round(checked_in / rsvps * 100)
