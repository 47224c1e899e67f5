"""Integration tests for the browser tracker endpoints."""

import uuid

import pytest
from sqlalchemy import select

from services.analytics_service.models import FormEvent, PageView
from tests.factories import TrackingLinkFactory

pytestmark = pytest.mark.integration

IPHONE_SAFARI = (
    "Mozilla/5.0 (iPhone; CPU iPhone OS 17_1_2 like Mac OS X) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/17.1.2 Mobile/15E148 Safari/604.1"
)


async def _page_view(db_session, page_view_id: str) -> PageView:
    result = await db_session.execute(
        select(PageView)
        .where(PageView.id == uuid.UUID(page_view_id))
        .execution_options(populate_existing=True)
    )
    return result.scalar_one()


class TestPageViews:
    @pytest.mark.asyncio
    async def test_records_device_and_location(self, client, db_session):
        event_id = str(uuid.uuid4())

        response = await client.post(
            "/api/v1/track",
            json={
                "page_path": f"/events/{event_id}",
                "utm_source": "instagram",
                "visitor_id": "v-1",
                "screen_width": 390,
                "languages": ["en-US", "es"],
            },
            headers={
                "user-agent": IPHONE_SAFARI,
                "x-forwarded-for": "203.0.113.9, 10.0.0.1",
                "x-vercel-ip-city": "Kansas%20City",
                "x-vercel-ip-country-region": "MO",
                "x-vercel-ip-country": "US",
                "x-vercel-ip-latitude": "39.0997",
                "x-vercel-ip-longitude": "not-a-number",
            },
        )

        assert response.status_code == 200
        view = await _page_view(db_session, response.json()["id"])
        assert str(view.event_id) == event_id
        assert view.browser == "Safari"
        assert view.os == "iOS"
        assert view.device_type == "mobile"
        assert view.ip_address == "203.0.113.9"
        assert view.city == "Kansas City"
        assert view.region == "MO"
        assert view.latitude == pytest.approx(39.0997)
        assert view.longitude is None
        assert view.languages == ["en-US", "es"]
        assert view.utm_source == "instagram"

    @pytest.mark.asyncio
    async def test_no_proxy_headers_means_no_ip(self, client, db_session):
        response = await client.post(
            "/api/v1/track", json={"page_path": "/", "user_agent": "curl/8.4.0"}
        )

        view = await _page_view(db_session, response.json()["id"])
        assert view.ip_address is None
        assert view.city is None
        assert view.event_id is None
        assert view.browser == "Unknown"

    @pytest.mark.asyncio
    async def test_engagement_beacon_updates_existing_view(self, client, db_session):
        created = await client.post("/api/v1/track", json={"page_path": "/events"})
        page_view_id = created.json()["id"]

        response = await client.post(
            "/api/v1/track",
            json={
                "page_view_id": page_view_id,
                "duration_seconds": 42,
                "scroll_depth_pct": 80,
                "max_scroll_y": 0,
            },
        )

        assert response.json() == {"ok": True}
        view = await _page_view(db_session, page_view_id)
        assert view.duration_seconds == 42
        assert view.scroll_depth_pct == 80
        assert view.max_scroll_y is None

    @pytest.mark.asyncio
    async def test_patch_engagement(self, client, db_session):
        created = await client.post("/api/v1/track", json={"page_path": "/"})
        page_view_id = created.json()["id"]

        response = await client.patch(
            "/api/v1/track", json={"page_view_id": page_view_id, "duration_seconds": 9}
        )

        assert response.json() == {"ok": True}
        assert (await _page_view(db_session, page_view_id)).duration_seconds == 9

    @pytest.mark.asyncio
    async def test_patch_requires_page_view_id(self, client):
        response = await client.patch("/api/v1/track", json={"duration_seconds": 9})

        assert response.status_code == 400
        assert response.json() == {"error": "Missing page_view_id"}

    @pytest.mark.asyncio
    async def test_malformed_body(self, client):
        response = await client.post(
            "/api/v1/track",
            content=b"{not json",
            headers={"content-type": "application/json"},
        )

        assert response.status_code == 500
        assert response.json() == {"error": "Internal error"}

    @pytest.mark.asyncio
    async def test_tracking_link_click(self, client, db_session):
        link = TrackingLinkFactory.create(token="tid-abc123")
        db_session.add(link)
        await db_session.commit()

        for _ in range(2):
            await client.post(
                "/api/v1/track", json={"page_path": "/", "tracking_id": "tid-abc123"}
            )

        await db_session.refresh(link)
        assert link.click_count == 2
        assert link.clicked_at is not None


class TestFormEvents:
    @pytest.mark.asyncio
    async def test_requires_event_type(self, client):
        response = await client.post("/api/v1/track/form", json={"field_name": "email"})

        assert response.status_code == 400
        assert response.json() == {"error": "Missing event_type"}

    @pytest.mark.asyncio
    async def test_funnel_stamps_tracking_link(self, client, db_session):
        link = TrackingLinkFactory.create(token="tid-form")
        db_session.add(link)
        await db_session.commit()
        event_id = str(uuid.uuid4())

        for event_type in ("form_start", "field_blur", "submit_success"):
            response = await client.post(
                "/api/v1/track/form",
                json={
                    "event_id": event_id,
                    "tracking_id": "tid-form",
                    "event_type": event_type,
                    "field_name": "email" if event_type == "field_blur" else None,
                    "field_has_value": event_type == "field_blur",
                },
            )
            assert response.json() == {"ok": True}

        await db_session.refresh(link)
        assert link.form_started_at is not None
        assert link.form_completed_at is not None
        assert link.form_started_at <= link.form_completed_at

        rows = (await db_session.execute(select(FormEvent))).scalars().all()
        assert sorted(r.event_type for r in rows) == [
            "field_blur",
            "form_start",
            "submit_success",
        ]
        assert all(str(r.event_id) == event_id for r in rows)
