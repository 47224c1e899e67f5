"""Event browsing and organiser CRUD endpoints."""

import uuid
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import and_, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from libs.auth.dependencies import get_optional_user, require_admin
from libs.auth.models import AuthUser
from libs.common.datetime_utils import to_utc, utc_now
from libs.common.logging import get_logger
from libs.db.session import get_async_db
from services.events_service.models import Event, EventAttendee, EventStatus, RSVPStatus
from services.events_service.routers._helpers import (
    attendees_for_user,
    get_event_or_404,
    resolve_event,
)
from services.events_service.schemas import (
    AttendeeResponse,
    EventCreate,
    EventResponse,
    EventUpdate,
)
from services.events_service.service import event_response_dict

logger = get_logger(__name__)

router = APIRouter(prefix="/events", tags=["events"])

DATETIME_FIELDS = (
    "event_date",
    "event_end_date",
    "rsvp_deadline",
    "checkin_start_time",
    "checkin_end_time",
)


def _to_response(
    event: Event,
    attendee: Optional[EventAttendee] = None,
    is_admin: bool = False,
) -> EventResponse:
    has_rsvp = attendee is not None and attendee.rsvp_status == RSVPStatus.ATTENDING
    return EventResponse.model_validate(
        event_response_dict(
            event,
            user_attendee=AttendeeResponse.model_validate(attendee) if attendee else None,
            reveal_address=has_rsvp or is_admin,
        )
    )


def _normalise_datetimes(fields: dict) -> dict:
    for name in DATETIME_FIELDS:
        if fields.get(name) is not None:
            fields[name] = to_utc(fields[name])
    return fields


@router.get("/", response_model=List[EventResponse])
async def list_events(
    status: Literal["upcoming", "past", "all"] = Query(
        "upcoming", description="Time window relative to now"
    ),
    event_type: Optional[str] = Query(None, description="Filter by event type"),
    current_user: Optional[AuthUser] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_async_db),
):
    """List published events.

    Upcoming events include anything still running (end time in the future);
    past events are those both started and finished.
    """
    now = utc_now()
    query = select(Event).where(Event.status == EventStatus.PUBLISHED)

    if event_type:
        query = query.where(Event.event_type == event_type)

    if status == "upcoming":
        query = query.where(
            or_(Event.event_date >= now, Event.event_end_date >= now)
        ).order_by(Event.event_date.asc())
    elif status == "past":
        query = query.where(
            and_(
                Event.event_date < now,
                or_(Event.event_end_date < now, Event.event_end_date.is_(None)),
            )
        ).order_by(Event.event_date.desc())
    else:
        query = query.order_by(Event.event_date.asc())

    result = await db.execute(query)
    events = result.scalars().all()

    mine = await attendees_for_user(db, current_user, [e.id for e in events])
    is_admin = bool(current_user and current_user.is_admin)
    return [_to_response(e, mine.get(e.id), is_admin) for e in events]


@router.get("/{id_or_slug}", response_model=EventResponse)
async def get_event(
    id_or_slug: str,
    current_user: Optional[AuthUser] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Get a single event by UUID or by ``title-MM-DD-YY`` slug."""
    is_admin = bool(current_user and current_user.is_admin)
    event = await resolve_event(db, id_or_slug, include_unpublished=is_admin)

    mine = await attendees_for_user(db, current_user, [event.id])
    return _to_response(event, mine.get(event.id), is_admin)


@router.post("/", response_model=EventResponse, status_code=201)
async def create_event(
    event_data: EventCreate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Create a new event (admin only)."""
    fields = _normalise_datetimes(event_data.model_dump())
    event = Event(**fields, created_by=current_user.user_id)

    db.add(event)
    await db.commit()
    await db.refresh(event)

    logger.info(
        "Event created",
        extra={"extra_fields": {"event_id": str(event.id), "title": event.title}},
    )
    return _to_response(event, is_admin=True)


@router.patch("/{event_id}", response_model=EventResponse)
async def update_event(
    event_id: uuid.UUID,
    event_data: EventUpdate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Update an event (admin only)."""
    event = await get_event_or_404(db, event_id)

    update_fields = _normalise_datetimes(event_data.model_dump(exclude_unset=True))
    for field, value in update_fields.items():
        setattr(event, field, value)

    await db.commit()
    await db.refresh(event)

    return _to_response(event, is_admin=True)


@router.delete("/{event_id}", status_code=204)
async def delete_event(
    event_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Delete an event and its attendee rows (admin only)."""
    event = await get_event_or_404(db, event_id)

    # SQLite does not enforce the cascade unless foreign keys are switched on
    attendees = await db.execute(
        select(EventAttendee).where(EventAttendee.event_id == event_id)
    )
    for attendee in attendees.scalars().all():
        await db.delete(attendee)
    await db.delete(event)
    await db.commit()

    logger.info(
        "Event deleted", extra={"extra_fields": {"event_id": str(event_id)}}
    )
    return None
