"""RSVP, public registration and phone RSVP endpoints."""

import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from libs.auth.dependencies import get_current_user, require_admin
from libs.auth.models import AuthUser
from libs.common.datetime_utils import to_local, utc_now
from libs.common.logging import get_logger
from libs.common.rate_limit import public_form_limit
from libs.common.validation import normalize_phone, phone_variants
from libs.db.session import get_async_db
from services.events_service.models import Event, EventAttendee, RSVPStatus
from services.events_service.routers._helpers import (
    find_existing_attendee,
    get_event_or_404,
    get_member_by_email,
    get_member_for_user,
    refresh_attendee_count,
)
from services.events_service.schemas import (
    AttendeeResponse,
    PhoneRSVPRequest,
    PhoneRSVPResponse,
    PublicRegistrationCreate,
    RegistrationResponse,
    RSVPCreate,
)
from services.events_service.service import (
    format_mailing_address,
    is_eligible_member,
    is_full,
    registration_errors,
    rsvp_rejection,
)
from services.members_service.models import Member

logger = get_logger(__name__)

router = APIRouter(prefix="/events", tags=["rsvp"])


async def _open_event(db: AsyncSession, event_id: uuid.UUID) -> Event:
    """Load an event that is currently accepting RSVPs."""
    event = await get_event_or_404(db, event_id)
    rejection = rsvp_rejection(event)
    if rejection:
        raise HTTPException(status_code=rejection.status_code, detail=rejection.detail)
    return event


def _ensure_capacity(event: Event) -> None:
    if is_full(event):
        raise HTTPException(status_code=409, detail="This event is full")


def _reactivate(attendee: EventAttendee, guest_count: int = 0, notes=None) -> None:
    attendee.rsvp_status = RSVPStatus.ATTENDING
    attendee.guest_count = guest_count
    attendee.notes = notes
    attendee.rsvp_at = utc_now()


@router.post("/{event_id}/rsvp", response_model=AttendeeResponse)
async def create_rsvp(
    event_id: uuid.UUID,
    rsvp_data: RSVPCreate,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """RSVP the signed-in user as attending.

    A previous row for the same person (cancelled, maybe, or created as a
    guest with the same email or phone) is reactivated rather than
    duplicated.
    """
    event = await _open_event(db, event_id)
    member = await get_member_for_user(db, current_user)

    attendee = await find_existing_attendee(
        db,
        event.id,
        member_id=member.id if member else None,
        email=current_user.email,
        phone=member.phone if member else current_user.phone,
    )
    if attendee and attendee.rsvp_status == RSVPStatus.ATTENDING:
        raise HTTPException(status_code=409, detail="You're already RSVP'd")
    _ensure_capacity(event)

    if attendee:
        _reactivate(attendee, rsvp_data.guest_count, rsvp_data.notes)
        if member and attendee.member_id is None:
            attendee.member_id = member.id
    else:
        attendee = EventAttendee(
            event_id=event.id,
            member_id=member.id if member else None,
            guest_name=member.name if member else None,
            guest_email=current_user.email,
            guest_phone=member.phone if member else normalize_phone(current_user.phone),
            rsvp_status=RSVPStatus.ATTENDING,
            guest_count=rsvp_data.guest_count,
            notes=rsvp_data.notes,
        )
        db.add(attendee)

    await refresh_attendee_count(db, event)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(status_code=409, detail="You're already RSVP'd")
    await db.refresh(attendee)

    logger.info(
        "RSVP recorded",
        extra={
            "extra_fields": {
                "event_id": str(event.id),
                "attendee_id": str(attendee.id),
                "attendee_count": event.attendee_count,
            }
        },
    )
    return AttendeeResponse.model_validate(attendee)


@router.delete("/{event_id}/rsvp", response_model=AttendeeResponse)
async def cancel_rsvp(
    event_id: uuid.UUID,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Cancel the signed-in user's RSVP. The row is kept as not_attending."""
    event = await get_event_or_404(db, event_id)
    member = await get_member_for_user(db, current_user)

    attendee = await find_existing_attendee(
        db,
        event.id,
        member_id=member.id if member else None,
        email=current_user.email,
    )
    if not attendee:
        raise HTTPException(status_code=404, detail="RSVP not found")

    attendee.rsvp_status = RSVPStatus.NOT_ATTENDING
    await refresh_attendee_count(db, event)
    await db.commit()
    await db.refresh(attendee)

    return AttendeeResponse.model_validate(attendee)


async def _member_for_registration(
    db: AsyncSession, event: Event, data: PublicRegistrationCreate
) -> Optional[Member]:
    """Create (or reuse, by email) the member row for an eligible registrant."""
    member = await get_member_by_email(db, data.email)
    if member:
        return member

    member = Member(
        name=data.name,
        email=data.email,
        phone=data.phone,
        date_of_birth=data.date_of_birth,
        address=format_mailing_address(
            data.street, data.city, data.state, data.zip_code
        ),
        employer=data.employer or None,
        industry=data.occupation or None,
        date_joined=to_local(utc_now()).date(),
        referral_source=event.title,
    )
    db.add(member)
    try:
        await db.commit()
    except IntegrityError:
        # Someone registered the same email concurrently
        await db.rollback()
        member = await get_member_by_email(db, data.email)
    else:
        logger.info(
            "Member created from registration",
            extra={"extra_fields": {"member_id": str(member.id)}},
        )
    return member


@router.post(
    "/{event_id}/register", response_model=RegistrationResponse, status_code=201
)
@public_form_limit
async def register_for_event(
    request: Request,
    event_id: uuid.UUID,
    registration: PublicRegistrationCreate,
    db: AsyncSession = Depends(get_async_db),
):
    """Public registration for visitors without an account.

    Eligible registrants (in-state, under the age limit) also become
    members. An attendee row carrying the submitted details is always
    written.
    """
    event = await _open_event(db, event_id)

    errors = registration_errors(
        event.event_type,
        registration.street,
        registration.city,
        registration.state,
        registration.employer,
        registration.occupation,
    )
    if errors:
        raise HTTPException(status_code=422, detail=errors)

    attendee = await find_existing_attendee(
        db, event.id, email=registration.email, phone=registration.phone
    )
    if attendee and attendee.rsvp_status == RSVPStatus.ATTENDING:
        raise HTTPException(
            status_code=409, detail="You're already registered for this event"
        )
    _ensure_capacity(event)

    member = None
    if is_eligible_member(registration.date_of_birth, registration.state):
        member = await _member_for_registration(db, event, registration)
        # A rollback inside the member insert expires loaded rows; reload them
        event = await get_event_or_404(db, event_id)
        attendee = await find_existing_attendee(
            db,
            event.id,
            member_id=member.id,
            email=registration.email,
            phone=registration.phone,
        )
        if attendee and attendee.rsvp_status == RSVPStatus.ATTENDING:
            raise HTTPException(
                status_code=409, detail="You're already registered for this event"
            )

    profile = {
        "guest_name": registration.name,
        "guest_email": registration.email,
        "guest_phone": registration.phone,
        "date_of_birth": registration.date_of_birth,
        "address": registration.street or None,
        "city": registration.city or None,
        "state": registration.state or None,
        "zip": registration.zip_code,
        "employer": registration.employer or None,
        "occupation": registration.occupation or None,
    }
    if attendee:
        _reactivate(attendee)
        for field, value in profile.items():
            setattr(attendee, field, value)
        if member and attendee.member_id is None:
            attendee.member_id = member.id
    else:
        attendee = EventAttendee(
            event_id=event.id,
            member_id=member.id if member else None,
            rsvp_status=RSVPStatus.ATTENDING,
            **profile,
        )
        db.add(attendee)

    await refresh_attendee_count(db, event)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(
            status_code=409, detail="You're already registered for this event"
        )
    await db.refresh(attendee)

    return RegistrationResponse(
        attendee=AttendeeResponse.model_validate(attendee),
        member_id=member.id if member else None,
        is_member=member is not None,
    )


@router.post("/{event_id}/rsvp-by-phone", response_model=PhoneRSVPResponse)
@public_form_limit
async def rsvp_by_phone(
    request: Request,
    event_id: uuid.UUID,
    payload: PhoneRSVPRequest,
    db: AsyncSession = Depends(get_async_db),
):
    """One-field RSVP for people we already know.

    The phone is matched against members and then earlier attendee rows.
    Unknown numbers get ``found=false`` so the caller can show the full
    registration form.
    """
    event = await _open_event(db, event_id)
    variants = phone_variants(payload.phone)

    result = await db.execute(
        select(Member).where(Member.phone.in_(variants)).limit(1)
    )
    member = result.scalars().first()

    attendee = await find_existing_attendee(
        db, event.id, member_id=member.id if member else None, phone=payload.phone
    )

    previous = None
    if member is None and attendee is None:
        result = await db.execute(
            select(EventAttendee)
            .where(EventAttendee.guest_phone.in_(variants))
            .order_by(EventAttendee.created_at.desc())
            .limit(1)
        )
        previous = result.scalars().first()
        if previous is None:
            return PhoneRSVPResponse(success=False, found=False)

    if member:
        name, email = member.name, member.email
    else:
        known = attendee or previous
        name, email = known.guest_name, known.guest_email

    if attendee and attendee.rsvp_status == RSVPStatus.ATTENDING:
        return PhoneRSVPResponse(success=False, found=True, name=name)
    _ensure_capacity(event)

    if attendee:
        _reactivate(attendee)
    else:
        attendee = EventAttendee(
            event_id=event.id,
            member_id=member.id if member else None,
            guest_name=name,
            guest_email=email,
            guest_phone=payload.phone,
            rsvp_status=RSVPStatus.ATTENDING,
        )
        db.add(attendee)

    await refresh_attendee_count(db, event)
    await db.commit()

    return PhoneRSVPResponse(success=True, found=True, name=name)


@router.get("/{event_id}/attendees", response_model=List[AttendeeResponse])
async def list_attendees(
    event_id: uuid.UUID,
    rsvp_status: Optional[RSVPStatus] = Query(None, description="Filter by status"),
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """List attendee rows for an event (admin only)."""
    await get_event_or_404(db, event_id)

    query = select(EventAttendee).where(EventAttendee.event_id == event_id)
    if rsvp_status:
        query = query.where(EventAttendee.rsvp_status == rsvp_status)
    query = query.order_by(EventAttendee.rsvp_at.asc())

    result = await db.execute(query)
    return [AttendeeResponse.model_validate(a) for a in result.scalars().all()]
