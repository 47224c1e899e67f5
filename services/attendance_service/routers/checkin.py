"""Event check-in endpoints: self, walk-in, organiser QR scan and stats."""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from libs.auth.dependencies import get_current_user, require_admin
from libs.auth.models import AuthUser
from libs.common.logging import get_logger
from libs.common.validation import phone_variants
from libs.db.session import get_async_db
from services.attendance_service.schemas import (
    CheckInResponse,
    CheckInStats,
    QRCheckIn,
    WalkInCheckIn,
)
from services.attendance_service.service import checkin_rate, mark_checked_in
from services.events_service.models import (
    CheckInMethod,
    Event,
    EventAttendee,
    RSVPStatus,
)
from services.events_service.routers._helpers import (
    find_existing_attendee,
    get_event_or_404,
    get_member_for_user,
    refresh_attendee_count,
)
from services.events_service.schemas import AttendeeResponse
from services.events_service.service import checkin_rejection
from services.events_service.slugs import is_uuid
from services.members_service.models import Member
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)
router = APIRouter(prefix="/events", tags=["attendance"])


async def _checkin_open_event(db: AsyncSession, event_id: uuid.UUID) -> Event:
    event = await get_event_or_404(db, event_id)
    rejection = checkin_rejection(event)
    if rejection:
        raise HTTPException(status_code=rejection.status_code, detail=rejection.detail)
    return event


async def _attending_row(
    db: AsyncSession, event_id: uuid.UUID, member_id: uuid.UUID
) -> Optional[EventAttendee]:
    result = await db.execute(
        select(EventAttendee).where(
            EventAttendee.event_id == event_id,
            EventAttendee.member_id == member_id,
            EventAttendee.rsvp_status == RSVPStatus.ATTENDING,
        )
    )
    return result.scalar_one_or_none()


def _result(
    attendee: EventAttendee, name: Optional[str], newly_checked_in: bool
) -> CheckInResponse:
    return CheckInResponse(
        attendee=AttendeeResponse.model_validate(attendee),
        name=name or attendee.guest_name,
        already_checked_in=not newly_checked_in,
        checked_in_at=attendee.checked_in_at,
    )


def _log_checkin(event_id: uuid.UUID, attendee: EventAttendee, method: str) -> None:
    logger.info(
        "Attendee checked in",
        extra={
            "extra_fields": {
                "event_id": str(event_id),
                "attendee_id": str(attendee.id),
                "method": method,
            }
        },
    )


@router.post("/{event_id}/checkin/self", response_model=CheckInResponse)
async def self_check_in(
    event_id: uuid.UUID,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Check the signed-in attendee in against their own RSVP."""
    event = await _checkin_open_event(db, event_id)
    member = await get_member_for_user(db, current_user)

    attendee = await find_existing_attendee(
        db,
        event.id,
        member_id=member.id if member else None,
        email=current_user.email,
    )
    if not attendee or attendee.rsvp_status != RSVPStatus.ATTENDING:
        raise HTTPException(status_code=404, detail="No RSVP found for this event")

    newly = mark_checked_in(attendee, CheckInMethod.SELF)
    if newly:
        await db.commit()
        await db.refresh(attendee)
        _log_checkin(event.id, attendee, CheckInMethod.SELF.value)

    return _result(attendee, member.name if member else None, newly)


@router.post("/{event_id}/checkin/walk-in", response_model=CheckInResponse)
async def walk_in_check_in(
    event_id: uuid.UUID,
    payload: WalkInCheckIn,
    db: AsyncSession = Depends(get_async_db),
):
    """Check in a known member at the door.

    An existing RSVP row is checked in; a member without one gets a new
    attending row that is checked in immediately.
    """
    event = await _checkin_open_event(db, event_id)

    if payload.member_id:
        query = select(Member).where(Member.id == payload.member_id)
    else:
        query = select(Member).where(Member.phone.in_(phone_variants(payload.phone)))
    result = await db.execute(query.limit(1))
    member = result.scalars().first()
    if not member:
        raise HTTPException(status_code=404, detail="Member not found")

    attendee = await find_existing_attendee(db, event.id, member_id=member.id)
    if attendee and attendee.checked_in:
        return _result(attendee, member.name, newly_checked_in=False)

    if attendee:
        attendee.rsvp_status = RSVPStatus.ATTENDING
    else:
        attendee = EventAttendee(
            event_id=event.id,
            member_id=member.id,
            guest_name=member.name,
            guest_email=member.email,
            guest_phone=member.phone,
            rsvp_status=RSVPStatus.ATTENDING,
        )
        db.add(attendee)

    mark_checked_in(attendee, CheckInMethod.WALK_IN)
    await refresh_attendee_count(db, event)
    await db.commit()
    await db.refresh(attendee)

    _log_checkin(event.id, attendee, CheckInMethod.WALK_IN.value)
    return _result(attendee, member.name, newly_checked_in=True)


@router.post("/{event_id}/checkin/qr", response_model=CheckInResponse)
async def qr_check_in(
    event_id: uuid.UUID,
    payload: QRCheckIn,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Organiser scan of a member's QR code (the member id).

    Organisers may scan outside the public check-in window.
    """
    event = await get_event_or_404(db, event_id)

    code = payload.code.strip()
    if not is_uuid(code):
        raise HTTPException(status_code=400, detail="Invalid QR code format")

    result = await db.execute(select(Member).where(Member.id == uuid.UUID(code)))
    member = result.scalar_one_or_none()
    if not member:
        raise HTTPException(status_code=404, detail="Member not found")

    attendee = await _attending_row(db, event.id, member.id)
    if not attendee:
        raise HTTPException(
            status_code=404, detail="Member has not RSVPd to this event"
        )
    if not mark_checked_in(attendee, CheckInMethod.QR_CODE):
        raise HTTPException(
            status_code=409, detail=f"{member.name} already checked in"
        )

    await db.commit()
    await db.refresh(attendee)

    _log_checkin(event.id, attendee, CheckInMethod.QR_CODE.value)
    return _result(attendee, member.name, newly_checked_in=True)


@router.get("/{event_id}/checkin/stats", response_model=CheckInStats)
async def check_in_stats(
    event_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Live check-in dashboard numbers for organisers."""
    await get_event_or_404(db, event_id)

    result = await db.execute(
        select(EventAttendee)
        .where(
            EventAttendee.event_id == event_id,
            EventAttendee.rsvp_status == RSVPStatus.ATTENDING,
        )
        .order_by(EventAttendee.rsvp_at.asc())
    )
    attendees = result.scalars().all()
    checked_in = sum(1 for a in attendees if a.checked_in)

    return CheckInStats(
        event_id=event_id,
        rsvp_count=len(attendees),
        checked_in_count=checked_in,
        checkin_rate=checkin_rate(checked_in, len(attendees)),
        attendees=[AttendeeResponse.model_validate(a) for a in attendees],
    )
