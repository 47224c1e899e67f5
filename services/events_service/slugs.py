"""Human-readable event URLs.

Events are shared as ``/events/<title>-MM-DD-YY``; the date suffix lets the
page resolve the slug with a one-day range query plus a title match, so the
slug never has to be stored.
"""

import re
from dataclasses import dataclass
from datetime import datetime, time
from typing import Optional

from libs.common.datetime_utils import local_tz, to_local

_SPECIAL_CHARS_RE = re.compile(r"[^\w\s-]")
_WHITESPACE_RE = re.compile(r"\s+")
_HYPHEN_RUN_RE = re.compile(r"-{2,}")
_SLUG_RE = re.compile(r"^(.+)-(\d{2})-(\d{2})-(\d{2})$")
UUID_RE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE
)


@dataclass(frozen=True)
class EventSlug:
    title_pattern: str
    date_start: datetime
    date_end: datetime


def generate_event_slug(title: str, event_date: datetime) -> str:
    """Build ``event-title-MM-DD-YY`` using the event's local calendar date."""
    title_slug = _SPECIAL_CHARS_RE.sub("", title.lower())
    title_slug = _WHITESPACE_RE.sub("-", title_slug)
    title_slug = _HYPHEN_RUN_RE.sub("-", title_slug).strip()

    local = to_local(event_date)
    return f"{title_slug}-{local:%m}-{local:%d}-{local:%y}"


def parse_event_slug(slug: str) -> Optional[EventSlug]:
    """Split a slug into a title search pattern and the day it falls on.

    Returns None for anything that is not ``<title>-MM-DD-YY`` or names an
    impossible date.
    """
    match = _SLUG_RE.match(slug)
    if not match:
        return None

    title_part, month, day, year = match.groups()
    try:
        day_start = datetime(
            2000 + int(year), int(month), int(day), tzinfo=local_tz()
        )
    except ValueError:
        return None

    return EventSlug(
        title_pattern=title_part.replace("-", " "),
        date_start=day_start,
        date_end=datetime.combine(day_start.date(), time.max, tzinfo=local_tz()),
    )


def is_uuid(value: str) -> bool:
    """Dashed 8-4-4-4-12 hex form only, the way ids appear in URLs."""
    return bool(value) and UUID_RE.match(value) is not None
