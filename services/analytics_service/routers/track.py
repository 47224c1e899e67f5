"""Browser tracker endpoints.

Callers never wait on or retry these, so failures are answered with an
``{"error": ...}`` body instead of raising.
"""

import uuid
from typing import Optional
from urllib.parse import unquote

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from libs.common.logging import get_logger
from libs.common.rate_limit import get_client_ip, tracking_limit
from libs.db.session import get_async_db
from pydantic import ValidationError
from services.analytics_service.attribution import record_click, record_form_progress
from services.analytics_service.models import FormEvent, PageView
from services.analytics_service.schemas import (
    EngagementUpdate,
    FormEventCreate,
    PageViewCreate,
)
from services.analytics_service.user_agent import parse_user_agent, resolve_event_id
from services.events_service.slugs import is_uuid
from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)
router = APIRouter(prefix="/track", tags=["analytics"])

INTERNAL_ERROR = "Internal error"


def _error(message: str, status_code: int = 500) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _as_uuid(value: Optional[str]) -> Optional[uuid.UUID]:
    return uuid.UUID(value) if value and is_uuid(value) else None


def _float_header(request: Request, name: str) -> Optional[float]:
    value = request.headers.get(name)
    try:
        return float(value) if value else None
    except ValueError:
        return None


def _geo_fields(request: Request) -> dict:
    """Visitor location as reported by the edge proxy."""
    headers = request.headers
    city = headers.get("x-vercel-ip-city")
    forwarded = headers.get("x-forwarded-for")
    return {
        "ip_address": get_client_ip(request) if forwarded else None,
        "city": unquote(city) if city else None,
        "region": headers.get("x-vercel-ip-country-region") or None,
        "country": headers.get("x-vercel-ip-country") or None,
        "latitude": _float_header(request, "x-vercel-ip-latitude"),
        "longitude": _float_header(request, "x-vercel-ip-longitude"),
        "timezone": headers.get("x-vercel-ip-timezone") or None,
    }


async def _apply_engagement(db: AsyncSession, body: EngagementUpdate) -> None:
    # Zero readings are stored as missing
    await db.execute(
        update(PageView)
        .where(PageView.id == uuid.UUID(body.page_view_id))
        .values(
            duration_seconds=body.duration_seconds or None,
            scroll_depth_pct=body.scroll_depth_pct or None,
            max_scroll_y=body.max_scroll_y or None,
        )
    )
    await db.commit()


def _page_view_from(body: PageViewCreate, request: Request) -> PageView:
    ua = body.user_agent or request.headers.get("user-agent") or ""
    parsed = parse_user_agent(ua)

    return PageView(
        event_id=_as_uuid(body.event_id) or _as_uuid(resolve_event_id(body.page_path)),
        page_path=body.page_path or "/",
        page_title=body.page_title or None,
        referrer=body.referrer or None,
        utm_source=body.utm_source or None,
        utm_medium=body.utm_medium or None,
        utm_campaign=body.utm_campaign or None,
        utm_term=body.utm_term or None,
        utm_content=body.utm_content or None,
        tracking_id=body.tracking_id or None,
        visitor_id=body.visitor_id or None,
        session_id=body.session_id or None,
        user_agent=ua,
        browser=parsed.browser,
        browser_version=parsed.browser_version,
        os=parsed.os,
        os_version=parsed.os_version,
        device_type=parsed.device_type,
        screen_width=body.screen_width or None,
        screen_height=body.screen_height or None,
        viewport_width=body.viewport_width or None,
        viewport_height=body.viewport_height or None,
        color_depth=body.color_depth or None,
        pixel_ratio=body.pixel_ratio or None,
        device_memory=body.device_memory or None,
        hardware_concurrency=body.hardware_concurrency or None,
        touch_support=body.touch_support,
        max_touch_points=body.max_touch_points,
        platform=body.platform or None,
        webgl_renderer=body.webgl_renderer or None,
        pdf_viewer_enabled=body.pdf_viewer_enabled,
        language=body.language or None,
        languages=body.languages or None,
        cookie_enabled=body.cookie_enabled,
        do_not_track=body.do_not_track,
        connection_type=body.connection_type or None,
        connection_downlink=body.connection_downlink,
        **_geo_fields(request),
    )


@router.post("")
@tracking_limit
async def track_page_view(request: Request, db: AsyncSession = Depends(get_async_db)):
    """Record a page view and return its id.

    A body carrying ``page_view_id`` and ``duration_seconds`` is the
    leave-page engagement beacon and updates that view instead.
    """
    try:
        body = PageViewCreate.model_validate(await request.json())

        if body.is_engagement_beacon:
            await _apply_engagement(db, body)
            return {"ok": True}

        if body.tracking_id:
            await record_click(db, body.tracking_id)

        page_view = _page_view_from(body, request)
        db.add(page_view)
        await db.commit()
        return {"id": str(page_view.id)}
    except SQLAlchemyError as e:
        await db.rollback()
        logger.exception("Page view insert failed")
        return _error(str(e))
    except (ValueError, ValidationError):
        logger.warning("Malformed page view body", exc_info=True)
        return _error(INTERNAL_ERROR)


@router.patch("")
@tracking_limit
async def track_engagement(request: Request, db: AsyncSession = Depends(get_async_db)):
    """Update dwell time and scroll depth for a recorded page view."""
    try:
        body = EngagementUpdate.model_validate(await request.json())
        if not body.page_view_id:
            return _error("Missing page_view_id", status_code=400)

        await _apply_engagement(db, body)
        return {"ok": True}
    except SQLAlchemyError as e:
        await db.rollback()
        logger.exception("Page view update failed")
        return _error(str(e))
    except (ValueError, ValidationError):
        logger.warning("Malformed engagement body", exc_info=True)
        return _error(INTERNAL_ERROR)


@router.post("/form")
@tracking_limit
async def track_form_event(request: Request, db: AsyncSession = Depends(get_async_db)):
    """Record a form funnel step and advance the visitor's tracking link."""
    try:
        body = FormEventCreate.model_validate(await request.json())
        if not body.event_type:
            return _error("Missing event_type", status_code=400)

        db.add(
            FormEvent(
                event_id=_as_uuid(body.event_id),
                page_view_id=_as_uuid(body.page_view_id),
                visitor_id=body.visitor_id or None,
                session_id=body.session_id or None,
                tracking_id=body.tracking_id or None,
                event_type=body.event_type,
                field_name=body.field_name or None,
                field_has_value=body.field_has_value,
                form_data=body.form_data or None,
                error_message=body.error_message or None,
            )
        )
        if body.tracking_id:
            await record_form_progress(db, body.tracking_id, body.event_type)
        await db.commit()
        return {"ok": True}
    except SQLAlchemyError as e:
        await db.rollback()
        logger.exception("Form event insert failed")
        return _error(str(e))
    except (ValueError, ValidationError):
        logger.warning("Malformed form event body", exc_info=True)
        return _error(INTERNAL_ERROR)
