"""Integration tests for event browsing and organiser CRUD."""

from datetime import timedelta

import pytest

from libs.common.datetime_utils import format_event_date_short, utc_now
from services.events_service.models import EventStatus
from services.events_service.slugs import generate_event_slug
from tests.factories import AttendeeFactory, EventFactory

pytestmark = pytest.mark.integration


async def _add(db_session, *rows):
    db_session.add_all(rows)
    await db_session.commit()


class TestListEvents:
    @pytest.mark.asyncio
    async def test_upcoming_is_default(self, client, db_session):
        upcoming = EventFactory.create(title="Canvass Kickoff")
        past = EventFactory.create(
            title="Winter Social", event_date=utc_now() - timedelta(days=10)
        )
        draft = EventFactory.create(title="Draft", status=EventStatus.DRAFT)
        await _add(db_session, upcoming, past, draft)

        response = await client.get("/api/v1/events/")

        assert response.status_code == 200
        titles = [e["title"] for e in response.json()]
        assert titles == ["Canvass Kickoff"]
        assert response.json()[0]["event_status"] == "upcoming"

    @pytest.mark.asyncio
    async def test_past_newest_first(self, client, db_session):
        older = EventFactory.create(title="Older", event_date=utc_now() - timedelta(days=30))
        newer = EventFactory.create(title="Newer", event_date=utc_now() - timedelta(days=3))
        await _add(db_session, older, newer, EventFactory.create(title="Soon"))

        response = await client.get("/api/v1/events/", params={"status": "past"})

        assert [e["title"] for e in response.json()] == ["Newer", "Older"]

    @pytest.mark.asyncio
    async def test_still_running_counts_as_upcoming(self, client, db_session):
        running = EventFactory.create(
            title="Day of Action",
            event_date=utc_now() - timedelta(hours=2),
            event_end_date=utc_now() + timedelta(hours=2),
        )
        await _add(db_session, running)

        response = await client.get("/api/v1/events/")

        assert [e["title"] for e in response.json()] == ["Day of Action"]

    @pytest.mark.asyncio
    async def test_filter_by_type(self, client, db_session):
        await _add(
            db_session,
            EventFactory.create(title="Gala", event_type="fundraiser"),
            EventFactory.create(title="Trivia", event_type="social"),
        )

        response = await client.get("/api/v1/events/", params={"event_type": "fundraiser"})

        assert [e["title"] for e in response.json()] == ["Gala"]

    @pytest.mark.asyncio
    async def test_signed_in_user_sees_own_rsvp(self, client, db_session, login, member_user):
        event = EventFactory.create()
        await _add(db_session, event)
        await _add(db_session, AttendeeFactory.create(event.id, guest_email=member_user.email))
        login(member_user)

        response = await client.get("/api/v1/events/")

        assert response.json()[0]["user_attendee"]["rsvp_status"] == "attending"


class TestGetEvent:
    @pytest.mark.asyncio
    async def test_by_id(self, client, db_session):
        event = EventFactory.create(max_attendees=20, attendee_count=5)
        await _add(db_session, event)

        response = await client.get(f"/api/v1/events/{event.id}")

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == str(event.id)
        assert data["attendance_percentage"] == 25
        assert data["time_until"] == "in 7 days"
        assert data["short_date"] == format_event_date_short(event.event_date)
        assert data["slug"] == generate_event_slug(event.title, event.event_date)

    @pytest.mark.asyncio
    async def test_by_slug(self, client, db_session):
        event = EventFactory.create(title="Pizza and Politics")
        await _add(db_session, event)
        slug = generate_event_slug(event.title, event.event_date)

        response = await client.get(f"/api/v1/events/{slug}")

        assert response.status_code == 200
        assert response.json()["id"] == str(event.id)

    @pytest.mark.asyncio
    async def test_slug_on_wrong_day_is_not_found(self, client, db_session):
        event = EventFactory.create(title="Pizza and Politics")
        await _add(db_session, event)
        slug = generate_event_slug(event.title, event.event_date + timedelta(days=1))

        response = await client.get(f"/api/v1/events/{slug}")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_garbage_identifier(self, client):
        response = await client.get("/api/v1/events/not-an-event")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_drafts_visible_to_admin_only(self, client, db_session, login, admin_user):
        draft = EventFactory.create(status=EventStatus.DRAFT)
        await _add(db_session, draft)

        assert (await client.get(f"/api/v1/events/{draft.id}")).status_code == 404

        login(admin_user)
        assert (await client.get(f"/api/v1/events/{draft.id}")).status_code == 200

    @pytest.mark.asyncio
    async def test_hidden_address_revealed_after_rsvp(
        self, client, db_session, login, member_user
    ):
        event = EventFactory.create(hide_address_before_rsvp=True)
        await _add(db_session, event)

        anonymous = await client.get(f"/api/v1/events/{event.id}")
        assert anonymous.json()["location_address"] is None
        assert anonymous.json()["location"] == event.location

        await _add(db_session, AttendeeFactory.create(event.id, guest_email=member_user.email))
        login(member_user)
        attending = await client.get(f"/api/v1/events/{event.id}")
        assert attending.json()["location_address"] == event.location_address


class TestOrganiserCrud:
    @pytest.mark.asyncio
    async def test_create_requires_admin(self, client, login, member_user):
        payload = {"title": "Phone Bank", "event_date": "2026-11-01T18:00:00-05:00"}

        response = await client.post("/api/v1/events/", json=payload)
        assert response.status_code in (401, 403)

        login(member_user)
        response = await client.post("/api/v1/events/", json=payload)
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_create_publishes_event(self, client, login, admin_user):
        login(admin_user)

        response = await client.post(
            "/api/v1/events/",
            json={
                "title": "Phone Bank",
                "event_type": "canvass",
                "event_date": "2026-11-01T18:00:00-05:00",
                "max_attendees": 30,
            },
        )

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "published"
        assert data["created_by"] == admin_user.user_id
        assert data["attendee_count"] == 0
        assert data["slug"] == "phone-bank-11-01-26"

    @pytest.mark.asyncio
    async def test_update(self, client, db_session, login, admin_user):
        event = EventFactory.create()
        await _add(db_session, event)
        login(admin_user)

        response = await client.patch(
            f"/api/v1/events/{event.id}",
            json={"title": "Pizza and Policy", "checkin_enabled": True},
        )

        assert response.status_code == 200
        assert response.json()["title"] == "Pizza and Policy"
        assert response.json()["checkin_enabled"] is True
        assert response.json()["location"] == event.location

    @pytest.mark.asyncio
    async def test_delete_removes_attendees(self, client, db_session, login, admin_user):
        event = EventFactory.create()
        await _add(db_session, event)
        await _add(db_session, AttendeeFactory.create(event.id))
        login(admin_user)

        response = await client.delete(f"/api/v1/events/{event.id}")
        assert response.status_code == 204

        assert (await client.get(f"/api/v1/events/{event.id}")).status_code == 404
        attendees = await client.get(f"/api/v1/events/{event.id}/attendees")
        assert attendees.status_code == 404


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")
    assert response.json() == {"status": "ok"}
