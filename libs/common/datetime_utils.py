"""Datetime utilities for timezone-aware timestamps and event date display.

Usage:
    from libs.common.datetime_utils import utc_now

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
"""

from datetime import date, datetime, timedelta, timezone
from typing import Literal, Optional
from zoneinfo import ZoneInfo

from libs.common.config import get_settings

EventStatus = Literal["upcoming", "happening", "past"]


def utc_now() -> datetime:
    """Return timezone-aware UTC datetime.

    Always use this for timestamps in the database.
    """
    return datetime.now(timezone.utc)


def ensure_aware(value: datetime) -> datetime:
    """Treat naive datetimes (SQLite, legacy rows) as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def local_tz() -> ZoneInfo:
    return ZoneInfo(get_settings().TIMEZONE)


def to_local(value: datetime) -> datetime:
    return ensure_aware(value).astimezone(local_tz())


def _clock(value: datetime) -> str:
    # "7:05 PM"; strftime's %I is zero padded
    return value.strftime("%I:%M %p").lstrip("0")


def format_event_date(value: datetime, now: Optional[datetime] = None) -> str:
    """Long display form: "Today at 7:00 PM", "Tomorrow at 6:30 PM" or
    "Friday, March 6, 2026 at 7:00 PM" in the organisation's timezone."""
    local = to_local(value)
    today = to_local(now or utc_now()).date()

    if local.date() == today:
        return f"Today at {_clock(local)}"
    if local.date() == today + timedelta(days=1):
        return f"Tomorrow at {_clock(local)}"
    return f"{local:%A}, {local:%B} {local.day}, {local.year} at {_clock(local)}"


def format_event_date_short(value: datetime) -> str:
    """"Mar 6, 2026"."""
    local = to_local(value)
    return f"{local:%b} {local.day}, {local.year}"


def get_event_status(event_date: datetime, now: Optional[datetime] = None) -> EventStatus:
    """Classify an event start time relative to now.

    Started events are past; events later today are happening.
    """
    now = ensure_aware(now or utc_now())
    start = ensure_aware(event_date)

    if start < now:
        return "past"
    if to_local(start).date() == to_local(now).date():
        return "happening"
    return "upcoming"


def get_time_until_event(event_date: datetime, now: Optional[datetime] = None) -> str:
    """Rough relative distance: "in 3 days", "about 2 hours ago"."""
    now = ensure_aware(now or utc_now())
    delta = ensure_aware(event_date) - now
    seconds = abs(delta.total_seconds())

    minutes = round(seconds / 60)
    hours = round(seconds / 3600)
    days = round(seconds / 86400)
    if seconds < 45:
        text = "less than a minute"
    elif minutes < 45:
        text = "1 minute" if minutes == 1 else f"{minutes} minutes"
    elif hours < 24:
        text = "about 1 hour" if hours == 1 else f"about {hours} hours"
    elif days < 30:
        text = "1 day" if days == 1 else f"{days} days"
    elif days < 365:
        months = round(days / 30)
        text = "about 1 month" if months == 1 else f"{months} months"
    else:
        years = round(days / 365)
        text = "about 1 year" if years == 1 else f"about {years} years"

    return f"in {text}" if delta.total_seconds() >= 0 else f"{text} ago"


def calculate_age(date_of_birth: date, today: Optional[date] = None) -> int:
    """Whole years between a birth date and today."""
    today = today or to_local(utc_now()).date()
    age = today.year - date_of_birth.year
    if (today.month, today.day) < (date_of_birth.month, date_of_birth.day):
        age -= 1
    return age


def to_utc(value: datetime) -> datetime:
    """Normalise an incoming datetime to UTC before it is stored."""
    return ensure_aware(value).astimezone(timezone.utc)
