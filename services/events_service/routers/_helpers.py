"""Shared lookups for events service routers."""

import uuid
from typing import Optional

from fastapi import HTTPException
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from libs.auth.models import AuthUser
from libs.common.datetime_utils import to_utc
from libs.common.validation import phone_variants
from services.events_service.models import Event, EventAttendee, EventStatus, RSVPStatus
from services.events_service.slugs import is_uuid, parse_event_slug
from services.members_service.models import Member


async def get_event_or_404(db: AsyncSession, event_id: uuid.UUID) -> Event:
    result = await db.execute(select(Event).where(Event.id == event_id))
    event = result.scalar_one_or_none()
    if not event:
        raise HTTPException(status_code=404, detail="Event not found")
    return event


async def resolve_event(
    db: AsyncSession, id_or_slug: str, include_unpublished: bool = False
) -> Event:
    """Find an event from either its UUID or its ``title-MM-DD-YY`` slug.

    Slugs only ever resolve published events; by-id lookups also return
    drafts when ``include_unpublished`` is set (organiser views).
    """
    if is_uuid(id_or_slug):
        event = await get_event_or_404(db, uuid.UUID(id_or_slug))
        if event.status != EventStatus.PUBLISHED and not include_unpublished:
            raise HTTPException(status_code=404, detail="Event not found")
        return event

    parsed = parse_event_slug(id_or_slug)
    if parsed is None:
        raise HTTPException(status_code=404, detail="Event not found")

    result = await db.execute(
        select(Event)
        .where(
            Event.status == EventStatus.PUBLISHED,
            Event.title.ilike(f"%{parsed.title_pattern}%"),
            Event.event_date >= to_utc(parsed.date_start),
            Event.event_date <= to_utc(parsed.date_end),
        )
        .order_by(Event.event_date.asc())
        .limit(1)
    )
    event = result.scalars().first()
    if not event:
        raise HTTPException(status_code=404, detail="Event not found")
    return event


async def get_member_by_email(db: AsyncSession, email: str) -> Optional[Member]:
    """Case-insensitive email match; the oldest row wins if legacy data
    holds the same address in different cases."""
    result = await db.execute(
        select(Member)
        .where(func.lower(Member.email) == email.lower())
        .order_by(Member.created_at.asc())
        .limit(1)
    )
    return result.scalars().first()


async def get_member_for_user(
    db: AsyncSession, user: AuthUser
) -> Optional[Member]:
    """The member row behind a signed-in user, by auth id then by email."""
    result = await db.execute(
        select(Member).where(Member.auth_id == user.user_id).limit(1)
    )
    member = result.scalars().first()
    if member or not user.email:
        return member

    return await get_member_by_email(db, user.email)


async def find_existing_attendee(
    db: AsyncSession,
    event_id: uuid.UUID,
    member_id: Optional[uuid.UUID] = None,
    email: Optional[str] = None,
    phone: Optional[str] = None,
) -> Optional[EventAttendee]:
    """Match a previous RSVP row by member, guest email or guest phone.

    The most recent row wins when several match.
    """
    conditions = []
    if member_id:
        conditions.append(EventAttendee.member_id == member_id)
    if email:
        conditions.append(func.lower(EventAttendee.guest_email) == email.lower())
    variants = phone_variants(phone)
    if variants:
        conditions.append(EventAttendee.guest_phone.in_(variants))
    if not conditions:
        return None

    result = await db.execute(
        select(EventAttendee)
        .where(EventAttendee.event_id == event_id, or_(*conditions))
        .order_by(EventAttendee.created_at.desc())
        .limit(1)
    )
    return result.scalars().first()


async def refresh_attendee_count(db: AsyncSession, event: Event) -> int:
    """Recompute the denormalised count of attending rows."""
    await db.flush()
    result = await db.execute(
        select(func.count(EventAttendee.id)).where(
            EventAttendee.event_id == event.id,
            EventAttendee.rsvp_status == RSVPStatus.ATTENDING,
        )
    )
    event.attendee_count = result.scalar_one()
    return event.attendee_count


async def attendees_for_user(
    db: AsyncSession, user: Optional[AuthUser], event_ids: list[uuid.UUID]
) -> dict[uuid.UUID, EventAttendee]:
    """The caller's own RSVP rows for the given events, keyed by event id."""
    if user is None or not event_ids:
        return {}

    member = await get_member_for_user(db, user)
    conditions = []
    if member:
        conditions.append(EventAttendee.member_id == member.id)
    if user.email:
        conditions.append(func.lower(EventAttendee.guest_email) == user.email.lower())
    if not conditions:
        return {}

    result = await db.execute(
        select(EventAttendee).where(
            EventAttendee.event_id.in_(event_ids), or_(*conditions)
        )
    )
    return {row.event_id: row for row in result.scalars().all()}
