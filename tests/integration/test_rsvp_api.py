"""Integration tests for RSVPs, public registration and phone RSVP."""

from datetime import timedelta

import pytest
from sqlalchemy import select

from libs.auth.models import AuthUser
from libs.common.datetime_utils import utc_now
from services.events_service.models import EventAttendee, RSVPStatus
from services.members_service.models import Member
from tests.factories import AttendeeFactory, EventFactory, MemberFactory

pytestmark = pytest.mark.integration


async def _add(db_session, *rows):
    db_session.add_all(rows)
    await db_session.commit()


def _registration(**overrides) -> dict:
    payload = {
        "name": "Jordan Reyes",
        "email": "Jordan.Reyes@Example.com",
        "phone": "(573) 555-0199",
        "date_of_birth": "2000-04-01",
        "state": "MO",
        "zip_code": "65201",
    }
    payload.update(overrides)
    return payload


class TestRSVP:
    @pytest.mark.asyncio
    async def test_member_rsvp(self, client, db_session, login, member_user):
        event = EventFactory.create()
        member = MemberFactory.create(auth_id=member_user.user_id, name="Riley Park")
        await _add(db_session, event, member)
        login(member_user)

        response = await client.post(
            f"/api/v1/events/{event.id}/rsvp", json={"guest_count": 1}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["rsvp_status"] == "attending"
        assert data["member_id"] == str(member.id)
        assert data["guest_name"] == "Riley Park"
        assert data["guest_count"] == 1

        await db_session.refresh(event)
        assert event.attendee_count == 1

    @pytest.mark.asyncio
    async def test_duplicate_rsvp_conflicts(self, client, db_session, login, member_user):
        event = EventFactory.create()
        await _add(db_session, event)
        login(member_user)

        first = await client.post(f"/api/v1/events/{event.id}/rsvp", json={})
        second = await client.post(f"/api/v1/events/{event.id}/rsvp", json={})

        assert first.status_code == 200
        assert second.status_code == 409
        assert second.json()["detail"] == "You're already RSVP'd"

    @pytest.mark.asyncio
    async def test_cancelled_rsvp_is_reactivated(self, client, db_session, login, member_user):
        event = EventFactory.create()
        await _add(db_session, event)
        previous = AttendeeFactory.create(
            event.id,
            guest_email=member_user.email,
            rsvp_status=RSVPStatus.NOT_ATTENDING,
        )
        await _add(db_session, previous)
        login(member_user)

        response = await client.post(f"/api/v1/events/{event.id}/rsvp", json={})

        assert response.status_code == 200
        assert response.json()["id"] == str(previous.id)
        assert response.json()["rsvp_status"] == "attending"

    @pytest.mark.asyncio
    async def test_newest_matching_row_is_reactivated(
        self, client, db_session, login, member_user
    ):
        event = EventFactory.create()
        await _add(db_session, event)
        older = AttendeeFactory.create(
            event.id,
            guest_email=member_user.email,
            rsvp_status=RSVPStatus.NOT_ATTENDING,
            created_at=utc_now() - timedelta(days=5),
        )
        newer = AttendeeFactory.create(
            event.id,
            guest_email=member_user.email,
            rsvp_status=RSVPStatus.MAYBE,
            created_at=utc_now() - timedelta(days=1),
        )
        await _add(db_session, older, newer)
        login(member_user)

        response = await client.post(f"/api/v1/events/{event.id}/rsvp", json={})

        assert response.status_code == 200
        assert response.json()["id"] == str(newer.id)

    @pytest.mark.asyncio
    async def test_members_differing_only_in_email_case(
        self, client, db_session, login, member_user
    ):
        event = EventFactory.create()
        original = MemberFactory.create(
            email="Member@Example.com", created_at=utc_now() - timedelta(days=30)
        )
        duplicate = MemberFactory.create(email=member_user.email)
        await _add(db_session, event, original, duplicate)
        login(member_user)

        response = await client.post(f"/api/v1/events/{event.id}/rsvp", json={})

        assert response.status_code == 200
        assert response.json()["member_id"] == str(original.id)

    @pytest.mark.asyncio
    async def test_requires_sign_in(self, client, db_session):
        event = EventFactory.create()
        await _add(db_session, event)

        response = await client.post(f"/api/v1/events/{event.id}/rsvp", json={})

        assert response.status_code in (401, 403)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "overrides,status_code",
        [
            ({"rsvp_enabled": False}, 400),
            ({"event_date": utc_now() - timedelta(days=3)}, 410),
            ({"rsvp_deadline": utc_now() - timedelta(hours=1)}, 400),
            ({"max_attendees": 1, "attendee_count": 1}, 409),
        ],
    )
    async def test_rejections(
        self, client, db_session, login, member_user, overrides, status_code
    ):
        event = EventFactory.create(**overrides)
        await _add(db_session, event)
        login(member_user)

        response = await client.post(f"/api/v1/events/{event.id}/rsvp", json={})

        assert response.status_code == status_code

    @pytest.mark.asyncio
    async def test_unknown_event(self, client, login, member_user):
        login(member_user)
        response = await client.post(
            "/api/v1/events/00000000-0000-0000-0000-000000000000/rsvp", json={}
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_cancel(self, client, db_session, login, member_user):
        event = EventFactory.create()
        await _add(db_session, event)
        login(member_user)
        await client.post(f"/api/v1/events/{event.id}/rsvp", json={})

        response = await client.delete(f"/api/v1/events/{event.id}/rsvp")

        assert response.status_code == 200
        assert response.json()["rsvp_status"] == "not_attending"
        await db_session.refresh(event)
        assert event.attendee_count == 0

    @pytest.mark.asyncio
    async def test_cancel_without_rsvp(self, client, db_session, login, member_user):
        event = EventFactory.create()
        await _add(db_session, event)
        login(member_user)

        response = await client.delete(f"/api/v1/events/{event.id}/rsvp")

        assert response.status_code == 404


class TestPublicRegistration:
    @pytest.mark.asyncio
    async def test_eligible_registrant_becomes_member(self, client, db_session):
        event = EventFactory.create(title="Pizza and Politics")
        await _add(db_session, event)

        response = await client.post(
            f"/api/v1/events/{event.id}/register", json=_registration()
        )

        assert response.status_code == 201
        data = response.json()
        assert data["is_member"] is True
        assert data["attendee"]["guest_phone"] == "5735550199"
        assert data["attendee"]["member_id"] == data["member_id"]

        member = (
            await db_session.execute(
                select(Member).where(Member.email == "jordan.reyes@example.com")
            )
        ).scalar_one()
        assert str(member.id) == data["member_id"]
        assert member.referral_source == "Pizza and Politics"
        assert member.address == "MO 65201"

    @pytest.mark.asyncio
    async def test_ineligible_registrant_stays_guest(self, client, db_session):
        event = EventFactory.create()
        await _add(db_session, event)

        response = await client.post(
            f"/api/v1/events/{event.id}/register",
            json=_registration(date_of_birth="1975-02-10"),
        )

        assert response.status_code == 201
        assert response.json()["is_member"] is False
        assert response.json()["member_id"] is None
        members = (await db_session.execute(select(Member))).scalars().all()
        assert members == []

    @pytest.mark.asyncio
    async def test_existing_member_is_reused(self, client, db_session):
        event = EventFactory.create()
        member = MemberFactory.create(email="jordan.reyes@example.com")
        await _add(db_session, event, member)

        response = await client.post(
            f"/api/v1/events/{event.id}/register", json=_registration()
        )

        assert response.status_code == 201
        assert response.json()["member_id"] == str(member.id)

    @pytest.mark.asyncio
    async def test_existing_member_matched_case_insensitively(
        self, client, db_session, login
    ):
        event = EventFactory.create()
        member = MemberFactory.create(email="Jordan.Reyes@Example.com")
        await _add(db_session, event, member)

        response = await client.post(
            f"/api/v1/events/{event.id}/register", json=_registration()
        )

        assert response.status_code == 201
        assert response.json()["member_id"] == str(member.id)
        members = (await db_session.execute(select(Member))).scalars().all()
        assert [m.email for m in members] == ["Jordan.Reyes@Example.com"]

        # The same person signing in later still resolves to one member
        second_event = EventFactory.create()
        await _add(db_session, second_event)
        login(AuthUser(user_id="auth-jordan", email="jordan.reyes@example.com"))
        rsvp = await client.post(f"/api/v1/events/{second_event.id}/rsvp", json={})

        assert rsvp.status_code == 200
        assert rsvp.json()["member_id"] == str(member.id)

    @pytest.mark.asyncio
    async def test_registering_twice_conflicts(self, client, db_session):
        event = EventFactory.create()
        await _add(db_session, event)

        first = await client.post(f"/api/v1/events/{event.id}/register", json=_registration())
        second = await client.post(
            f"/api/v1/events/{event.id}/register", json=_registration()
        )

        assert first.status_code == 201
        assert second.status_code == 409

    @pytest.mark.asyncio
    async def test_fundraiser_requires_contribution_details(self, client, db_session):
        event = EventFactory.create(event_type="fundraiser")
        await _add(db_session, event)

        response = await client.post(
            f"/api/v1/events/{event.id}/register", json=_registration()
        )

        assert response.status_code == 422
        detail = response.json()["detail"]
        assert detail["employer"] == "Employer is required for fundraiser events"
        assert "street" in detail

    @pytest.mark.asyncio
    async def test_fundraiser_complete_form(self, client, db_session):
        event = EventFactory.create(event_type="fundraiser")
        await _add(db_session, event)

        response = await client.post(
            f"/api/v1/events/{event.id}/register",
            json=_registration(
                street="12 Main St",
                city="Columbia",
                employer="University of Missouri",
                occupation="Researcher",
            ),
        )

        assert response.status_code == 201
        member = (await db_session.execute(select(Member))).scalar_one()
        assert member.address == "12 Main St, Columbia, MO 65201"
        assert member.industry == "Researcher"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "field,value",
        [
            ("phone", "555-0199"),
            ("email", "not-an-email"),
            ("email", "x@example..com"),
            ("zip_code", "652"),
            ("name", " "),
        ],
    )
    async def test_field_validation(self, client, db_session, field, value):
        event = EventFactory.create()
        await _add(db_session, event)

        response = await client.post(
            f"/api/v1/events/{event.id}/register",
            json=_registration(**{field: value}),
        )

        assert response.status_code == 422


class TestPhoneRSVP:
    @pytest.mark.asyncio
    async def test_known_member(self, client, db_session):
        event = EventFactory.create()
        member = MemberFactory.create(name="Casey Morgan", phone="5735550111")
        await _add(db_session, event, member)

        response = await client.post(
            f"/api/v1/events/{event.id}/rsvp-by-phone", json={"phone": "(573) 555-0111"}
        )

        assert response.json() == {"success": True, "found": True, "name": "Casey Morgan"}
        row = (
            await db_session.execute(
                select(EventAttendee).where(EventAttendee.event_id == event.id)
            )
        ).scalar_one()
        assert row.member_id == member.id

    @pytest.mark.asyncio
    async def test_already_registered(self, client, db_session):
        event = EventFactory.create()
        member = MemberFactory.create(name="Casey Morgan", phone="5735550111")
        await _add(db_session, event, member)
        await _add(db_session, AttendeeFactory.create(event.id, member_id=member.id))

        response = await client.post(
            f"/api/v1/events/{event.id}/rsvp-by-phone", json={"phone": "5735550111"}
        )

        assert response.json() == {"success": False, "found": True, "name": "Casey Morgan"}

    @pytest.mark.asyncio
    async def test_previous_guest_from_another_event(self, client, db_session):
        earlier = EventFactory.create(event_date=utc_now() - timedelta(days=30))
        event = EventFactory.create()
        await _add(db_session, earlier, event)
        await _add(
            db_session,
            AttendeeFactory.create(
                earlier.id, guest_name="Drew Allen", guest_phone="5735550122"
            ),
        )

        response = await client.post(
            f"/api/v1/events/{event.id}/rsvp-by-phone", json={"phone": "573-555-0122"}
        )

        assert response.json()["success"] is True
        assert response.json()["name"] == "Drew Allen"

    @pytest.mark.asyncio
    async def test_unknown_phone(self, client, db_session):
        event = EventFactory.create()
        await _add(db_session, event)

        response = await client.post(
            f"/api/v1/events/{event.id}/rsvp-by-phone", json={"phone": "5735550999"}
        )

        assert response.status_code == 200
        assert response.json() == {"success": False, "found": False, "name": None}


class TestAttendeeList:
    @pytest.mark.asyncio
    async def test_admin_filters_by_status(self, client, db_session, login, admin_user):
        event = EventFactory.create()
        await _add(db_session, event)
        await _add(
            db_session,
            AttendeeFactory.create(event.id),
            AttendeeFactory.create(event.id, rsvp_status=RSVPStatus.NOT_ATTENDING),
        )
        login(admin_user)

        everyone = await client.get(f"/api/v1/events/{event.id}/attendees")
        attending = await client.get(
            f"/api/v1/events/{event.id}/attendees", params={"rsvp_status": "attending"}
        )

        assert len(everyone.json()) == 2
        assert len(attending.json()) == 1

    @pytest.mark.asyncio
    async def test_members_cannot_list(self, client, db_session, login, member_user):
        event = EventFactory.create()
        await _add(db_session, event)
        login(member_user)

        response = await client.get(f"/api/v1/events/{event.id}/attendees")

        assert response.status_code == 403
