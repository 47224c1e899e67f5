"""Tracking-link lifecycle: first click, form started, form completed.

Each milestone timestamp is written once; later visits leave it alone.
"""

from datetime import datetime
from typing import Optional

from libs.common.datetime_utils import utc_now
from services.analytics_service.models import TrackingLink
from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

FORM_START = "form_start"
SUBMIT_SUCCESS = "submit_success"

_FORM_MILESTONES = {
    FORM_START: "form_started_at",
    SUBMIT_SUCCESS: "form_completed_at",
}


async def record_click(
    db: AsyncSession, token: str, now: Optional[datetime] = None
) -> None:
    now = now or utc_now()
    await db.execute(
        update(TrackingLink)
        .where(TrackingLink.token == token, TrackingLink.clicked_at.is_(None))
        .values(clicked_at=now)
    )
    await db.execute(
        update(TrackingLink)
        .where(TrackingLink.token == token)
        .values(click_count=TrackingLink.click_count + 1)
    )


async def record_form_progress(
    db: AsyncSession, token: str, event_type: str, now: Optional[datetime] = None
) -> None:
    """Stamp the milestone matching a form funnel event, if it is one."""
    column_name = _FORM_MILESTONES.get(event_type)
    if column_name is None:
        return

    column = getattr(TrackingLink, column_name)
    await db.execute(
        update(TrackingLink)
        .where(TrackingLink.token == token, column.is_(None))
        .values({column_name: now or utc_now()})
    )
