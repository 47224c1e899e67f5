"""Members directory router: profile, organiser search and kiosk phone lookup."""

from typing import List
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException, Query, status
from libs.auth.dependencies import get_current_user, require_admin
from libs.auth.models import AuthUser
from libs.common.config import get_settings
from libs.common.logging import get_logger
from libs.common.service_client import send_checkin_sms
from libs.common.validation import phone_variants
from libs.db.session import get_async_db
from services.members_service.models import Donor, Member
from services.members_service.schemas import (
    MemberResponse,
    MemberSearchResult,
    PhoneLookupPerson,
    PhoneLookupRequest,
    PhoneLookupResponse,
)
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)
settings = get_settings()
router = APIRouter(prefix="/members", tags=["members"])

SEARCH_MIN_LENGTH = 2
SEARCH_LIMIT = 10


@router.get("/me", response_model=MemberResponse)
async def get_current_member_profile(
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Get the profile of the currently authenticated member."""
    result = await db.execute(
        select(Member).where(Member.auth_id == current_user.user_id)
    )
    member = result.scalar_one_or_none()

    if not member:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Member profile not found",
        )
    return member


@router.get("/search", response_model=List[MemberSearchResult])
async def search_members(
    q: str = Query("", description="Name or email fragment"),
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Find members by name or email for manual check-in (admin only)."""
    term = q.strip()
    if len(term) < SEARCH_MIN_LENGTH:
        return []

    pattern = f"%{term}%"
    result = await db.execute(
        select(Member)
        .where(or_(Member.name.ilike(pattern), Member.email.ilike(pattern)))
        .order_by(Member.name.asc())
        .limit(SEARCH_LIMIT)
    )
    return result.scalars().all()


@router.post("/phone-lookup", response_model=PhoneLookupResponse)
async def phone_lookup(
    payload: PhoneLookupRequest,
    db: AsyncSession = Depends(get_async_db),
):
    """Check-in kiosk lookup by phone: members first, then donors.

    Unknown numbers are texted a link to the self check-in page.
    """
    variants = phone_variants(payload.phone)

    result = await db.execute(
        select(Member).where(Member.phone.in_(variants)).limit(1)
    )
    member = result.scalars().first()
    if member:
        return PhoneLookupResponse(
            found=True,
            person_type="member",
            person=PhoneLookupPerson.model_validate(member),
        )

    result = await db.execute(select(Donor).where(Donor.phone.in_(variants)).limit(1))
    donor = result.scalars().first()
    if donor:
        return PhoneLookupResponse(
            found=True,
            person_type="donor",
            person=PhoneLookupPerson.model_validate(donor),
        )

    checkin_url = (
        f"{settings.SITE_URL.rstrip('/')}/events/{payload.event_id}/checkin"
        f"?phone={quote(payload.phone)}"
    )
    sms_sent = await send_checkin_sms(payload.phone, str(payload.event_id), checkin_url)
    logger.info(
        "Phone lookup found nobody",
        extra={
            "extra_fields": {
                "event_id": str(payload.event_id),
                "sms_sent": sms_sent,
            }
        },
    )
    return PhoneLookupResponse(found=False, sms_sent=sms_sent, checkin_url=checkin_url)
