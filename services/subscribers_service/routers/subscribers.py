"""Mailing-list sign-up endpoint."""

from fastapi import APIRouter, Depends, HTTPException, Request
from libs.common.logging import get_logger
from libs.common.rate_limit import public_form_limit
from libs.common.validation import to_e164
from libs.db.session import get_async_db
from services.subscribers_service.models import (
    DEFAULT_SOURCE,
    SUBSCRIBED,
    Subscriber,
)
from services.subscribers_service.schemas import SubscriberCreate, SubscriberResponse
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)
router = APIRouter(prefix="/subscribers", tags=["subscribers"])

ALREADY_SUBSCRIBED = "This email is already subscribed!"


@router.post("/", response_model=SubscriberResponse, status_code=201)
@public_form_limit
async def subscribe(
    request: Request,
    subscriber_in: SubscriberCreate,
    db: AsyncSession = Depends(get_async_db),
):
    """Opt a visitor in to organisation news. Emails are unique."""
    result = await db.execute(
        select(Subscriber.id).where(Subscriber.email == subscriber_in.email)
    )
    if result.scalar_one_or_none():
        raise HTTPException(status_code=409, detail=ALREADY_SUBSCRIBED)

    subscriber = Subscriber(
        **subscriber_in.model_dump(),
        phone_e164=to_e164(subscriber_in.phone),
        source=DEFAULT_SOURCE,
        subscription_status=SUBSCRIBED,
    )
    db.add(subscriber)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(status_code=409, detail=ALREADY_SUBSCRIBED)
    await db.refresh(subscriber)

    logger.info(
        "Subscriber added",
        extra={"extra_fields": {"subscriber_id": str(subscriber.id)}},
    )
    return subscriber
