"""Tests for Event CRUD, visibility, listing filters and pagination.

Covers:
- Event create / update / delete
- Authorization hook, organizer (or role admin) only
- Start must be in the future, end after start
- Unpublished / unapproved events hidden from everyone but the organizer
- Delete removes RSVPs, comments and attendee entries
- Public list filters and the pagination envelope
"""
from datetime import datetime, timedelta, timezone

import pytest

from eventhub.models.attendee import EventAttendee
from eventhub.models.comment import Comment
from eventhub.models.rsvp import RSVP
from eventhub.models.user import User, UserRole
from tests.conftest import create_test_event, event_payload, send_rsvp, signup_user


class TestEventCreate:
    """Event creation and initial state."""

    def test_create_event(self, client):
        organizer = signup_user(client, name="Organizer")
        event = create_test_event(client, organizer["headers"], title="  Dinner  ", tags=["food", " "])
        assert event["title"] == "Dinner"
        assert event["tags"] == ["food"]
        assert event["status"] == "published"
        assert event["is_approved"] is True
        assert event["organizer_id"] == organizer["user"]["user_id"]
        assert event["organizer"]["name"] == "Organizer"
        assert event["location"]["city"] == "Berlin"
        assert event["attendee_count"] == 0
        assert event["available_spots"] == 50

    def test_create_requires_auth(self, client):
        resp = client.post("/api/events/", json=event_payload())
        assert resp.status_code == 401

    def test_start_in_past_rejected(self, client):
        organizer = signup_user(client)
        resp = client.post("/api/events/", json=event_payload(start_offset_days=-1), headers=organizer["headers"])
        assert resp.status_code == 400
        assert resp.json()["message"] == "Event date must be in the future"

    def test_end_before_start_rejected(self, client):
        organizer = signup_user(client)
        resp = client.post("/api/events/", json=event_payload(duration_hours=-1), headers=organizer["headers"])
        assert resp.status_code == 400

    def test_unknown_timezone_rejected(self, client):
        organizer = signup_user(client)
        resp = client.post("/api/events/", json=event_payload(timezone="Mars/Olympus"), headers=organizer["headers"])
        assert resp.status_code == 400

    def test_capacity_bounds(self, client):
        organizer = signup_user(client)
        resp = client.post("/api/events/", json=event_payload(capacity=0), headers=organizer["headers"])
        assert resp.status_code == 400
        resp = client.post("/api/events/", json=event_payload(capacity=10001), headers=organizer["headers"])
        assert resp.status_code == 400

    def test_unknown_category_rejected(self, client):
        organizer = signup_user(client)
        resp = client.post("/api/events/", json=event_payload(category="Knitting"), headers=organizer["headers"])
        assert resp.status_code == 400


class TestEventVisibility:
    """Single-event reads."""

    def test_get_event_includes_caller_rsvp(self, client):
        organizer = signup_user(client)
        guest = signup_user(client)
        event = create_test_event(client, organizer["headers"])
        send_rsvp(client, event["event_id"], guest["headers"], status="maybe")

        resp = client.get(f"/api/events/{event['event_id']}", headers=guest["headers"])
        assert resp.status_code == 200
        assert resp.json()["user_rsvp"] == "maybe"

        anonymous = client.get(f"/api/events/{event['event_id']}")
        assert anonymous.status_code == 200
        assert anonymous.json()["user_rsvp"] is None

    def test_draft_visible_only_to_organizer(self, client):
        organizer = signup_user(client)
        other = signup_user(client)
        event = create_test_event(client, organizer["headers"], status="draft")

        assert client.get(f"/api/events/{event['event_id']}", headers=organizer["headers"]).status_code == 200
        assert client.get(f"/api/events/{event['event_id']}", headers=other["headers"]).status_code == 404
        assert client.get(f"/api/events/{event['event_id']}").status_code == 404

    def test_invalid_token_treated_as_anonymous(self, client):
        organizer = signup_user(client)
        event = create_test_event(client, organizer["headers"])
        resp = client.get(f"/api/events/{event['event_id']}", headers={"Authorization": "Bearer junk"})
        assert resp.status_code == 200

    def test_get_missing_event(self, client):
        assert client.get("/api/events/00000000-0000-0000-0000-000000000000").status_code == 404


class TestEventUpdate:
    """Partial updates and the authorization hook."""

    def test_organizer_can_update(self, client):
        organizer = signup_user(client)
        event = create_test_event(client, organizer["headers"])
        resp = client.put(f"/api/events/{event['event_id']}", json={
            "title": "Renamed",
            "capacity": 10,
            "location": {"address": "2 Side St", "city": "Munich", "country": "Germany"},
        }, headers=organizer["headers"])
        assert resp.status_code == 200
        data = resp.json()["event"]
        assert data["title"] == "Renamed"
        assert data["capacity"] == 10
        assert data["location"]["city"] == "Munich"
        assert data["description"] == event["description"]

    def test_non_organizer_forbidden(self, client):
        organizer = signup_user(client)
        other = signup_user(client)
        event = create_test_event(client, organizer["headers"])
        resp = client.put(f"/api/events/{event['event_id']}", json={"title": "Hijack"}, headers=other["headers"])
        assert resp.status_code == 403

    def test_user_with_admin_role_can_update(self, client, db):
        organizer = signup_user(client)
        moderator = signup_user(client)
        db.query(User).filter(User.user_id == moderator["user"]["user_id"]).update({User.role: UserRole.admin})
        db.commit()
        event = create_test_event(client, organizer["headers"])
        resp = client.put(f"/api/events/{event['event_id']}", json={"title": "Moderated"}, headers=moderator["headers"])
        assert resp.status_code == 200

    def test_moving_start_into_past_rejected(self, client):
        organizer = signup_user(client)
        event = create_test_event(client, organizer["headers"])
        past = (datetime.now(timezone.utc) - timedelta(days=1)).isoformat()
        resp = client.put(f"/api/events/{event['event_id']}", json={"start_time_utc": past}, headers=organizer["headers"])
        assert resp.status_code == 400

    def test_end_before_existing_start_rejected(self, client):
        organizer = signup_user(client)
        event = create_test_event(client, organizer["headers"])
        early_end = (datetime.now(timezone.utc) + timedelta(days=1)).isoformat()
        resp = client.put(f"/api/events/{event['event_id']}", json={"end_time_utc": early_end}, headers=organizer["headers"])
        assert resp.status_code == 400
        assert resp.json()["message"] == "End time must be after start time"

    @pytest.mark.parametrize("field", ["title", "capacity", "category", "tags", "status", "timezone"])
    def test_null_for_required_field_rejected(self, client, field):
        organizer = signup_user(client)
        event = create_test_event(client, organizer["headers"])
        resp = client.put(f"/api/events/{event['event_id']}", json={field: None}, headers=organizer["headers"])
        assert resp.status_code == 400
        assert resp.json()["errors"][0]["field"] == field
        fetched = client.get(f"/api/events/{event['event_id']}").json()["event"]
        assert fetched[field] == event[field]

    def test_null_clears_optional_field(self, client):
        organizer = signup_user(client)
        deadline = (datetime.now(timezone.utc) + timedelta(days=5)).isoformat()
        event = create_test_event(client, organizer["headers"], registration_deadline=deadline)
        resp = client.put(f"/api/events/{event['event_id']}", json={"registration_deadline": None}, headers=organizer["headers"])
        assert resp.status_code == 200
        assert resp.json()["event"]["registration_deadline"] is None

    def test_blank_title_rejected(self, client):
        organizer = signup_user(client)
        event = create_test_event(client, organizer["headers"])
        resp = client.put(f"/api/events/{event['event_id']}", json={"title": "   "}, headers=organizer["headers"])
        assert resp.status_code == 400
        fetched = client.get(f"/api/events/{event['event_id']}").json()["event"]
        assert fetched["title"] == event["title"]

    def test_title_is_stripped(self, client):
        organizer = signup_user(client)
        event = create_test_event(client, organizer["headers"])
        resp = client.put(f"/api/events/{event['event_id']}", json={"title": "  Trimmed  "}, headers=organizer["headers"])
        assert resp.status_code == 200
        assert resp.json()["event"]["title"] == "Trimmed"

    def test_long_tag_rejected(self, client):
        organizer = signup_user(client)
        event = create_test_event(client, organizer["headers"])
        resp = client.put(f"/api/events/{event['event_id']}", json={"tags": ["x" * 51]}, headers=organizer["headers"])
        assert resp.status_code == 400

    def test_blank_tags_dropped(self, client):
        organizer = signup_user(client)
        event = create_test_event(client, organizer["headers"])
        resp = client.put(f"/api/events/{event['event_id']}", json={"tags": [" jazz ", "  "]}, headers=organizer["headers"])
        assert resp.status_code == 200
        assert resp.json()["event"]["tags"] == ["jazz"]

    def test_window_in_same_payload_checked(self, client):
        organizer = signup_user(client)
        event = create_test_event(client, organizer["headers"])
        start = datetime.now(timezone.utc) + timedelta(days=20)
        resp = client.put(f"/api/events/{event['event_id']}", json={
            "start_time_utc": start.isoformat(),
            "end_time_utc": (start - timedelta(hours=1)).isoformat(),
        }, headers=organizer["headers"])
        assert resp.status_code == 400


class TestEventDelete:
    """Deletion and its cascade."""

    def test_delete_removes_rsvps_comments_and_attendees(self, client, db):
        organizer = signup_user(client)
        guest = signup_user(client)
        event = create_test_event(client, organizer["headers"])
        event_id = event["event_id"]
        send_rsvp(client, event_id, guest["headers"])
        top = client.post(f"/api/comments/events/{event_id}", json={"content": "Hi"}, headers=guest["headers"]).json()
        client.post(f"/api/comments/events/{event_id}", json={
            "content": "Hello back", "parent_comment_id": top["comment"]["comment_id"],
        }, headers=organizer["headers"])

        resp = client.delete(f"/api/events/{event_id}", headers=organizer["headers"])
        assert resp.status_code == 200
        assert client.get(f"/api/events/{event_id}").status_code == 404
        assert db.query(RSVP).filter(RSVP.event_id == event_id).count() == 0
        assert db.query(Comment).filter(Comment.event_id == event_id).count() == 0
        assert db.query(EventAttendee).filter(EventAttendee.event_id == event_id).count() == 0

    def test_non_organizer_cannot_delete(self, client):
        organizer = signup_user(client)
        other = signup_user(client)
        event = create_test_event(client, organizer["headers"])
        assert client.delete(f"/api/events/{event['event_id']}", headers=other["headers"]).status_code == 403


class TestEventList:
    """Public listing, filters and pagination."""

    def test_pagination_25_items_size_10(self, client):
        organizer = signup_user(client)
        for i in range(25):
            create_test_event(client, organizer["headers"], title=f"Event {i}")

        page1 = client.get("/api/events/", params={"page": 1, "size": 10}).json()
        assert len(page1["events"]) == 10
        assert page1["pagination"] == {
            "current_page": 1, "total_pages": 3, "total_items": 25, "has_next": True, "has_prev": False,
        }

        page3 = client.get("/api/events/", params={"page": 3, "size": 10}).json()
        assert len(page3["events"]) == 5
        assert page3["pagination"]["has_next"] is False
        assert page3["pagination"]["has_prev"] is True

    def test_default_page_size_is_10(self, client):
        organizer = signup_user(client)
        for i in range(12):
            create_test_event(client, organizer["headers"], title=f"Event {i}")
        data = client.get("/api/events/").json()
        assert len(data["events"]) == 10
        assert data["pagination"]["total_items"] == 12

    def test_empty_listing(self, client):
        data = client.get("/api/events/", params={"page": 2}).json()
        assert data["events"] == []
        assert data["pagination"] == {
            "current_page": 2, "total_pages": 0, "total_items": 0, "has_next": False, "has_prev": True,
        }

    def test_size_above_limit_rejected(self, client):
        assert client.get("/api/events/", params={"size": 101}).status_code == 400

    def test_only_published_and_approved_listed(self, client):
        organizer = signup_user(client)
        create_test_event(client, organizer["headers"], title="Visible")
        create_test_event(client, organizer["headers"], title="Draft", status="draft")
        titles = [e["title"] for e in client.get("/api/events/").json()["events"]]
        assert titles == ["Visible"]

    def test_filters(self, client):
        organizer = signup_user(client)
        create_test_event(client, organizer["headers"], title="Jazz Night", category="Music",
                          location={"address": "5 Canal St", "city": "Amsterdam", "country": "Netherlands"})
        create_test_event(client, organizer["headers"], title="Startup Pitch", category="Business")

        music = client.get("/api/events/", params={"category": "Music"}).json()["events"]
        assert [e["title"] for e in music] == ["Jazz Night"]

        amsterdam = client.get("/api/events/", params={"location": "amster"}).json()["events"]
        assert [e["title"] for e in amsterdam] == ["Jazz Night"]

        pitch = client.get("/api/events/", params={"search": "pitch"}).json()["events"]
        assert [e["title"] for e in pitch] == ["Startup Pitch"]

        assert client.get("/api/events/", params={"search": "100%"}).json()["events"] == []

    def test_sorting(self, client):
        organizer = signup_user(client)
        create_test_event(client, organizer["headers"], title="Later", start_offset_days=10)
        create_test_event(client, organizer["headers"], title="Sooner", start_offset_days=3)

        asc = [e["title"] for e in client.get("/api/events/").json()["events"]]
        assert asc == ["Sooner", "Later"]
        desc = client.get("/api/events/", params={"sort_by": "title", "sort_order": "desc"}).json()["events"]
        assert [e["title"] for e in desc] == ["Sooner", "Later"]

    def test_my_created_includes_drafts(self, client):
        organizer = signup_user(client)
        other = signup_user(client)
        create_test_event(client, organizer["headers"], title="Mine")
        create_test_event(client, organizer["headers"], title="Mine Draft", status="draft")
        create_test_event(client, other["headers"], title="Theirs")

        data = client.get("/api/events/my/created", headers=organizer["headers"]).json()
        assert sorted(e["title"] for e in data["events"]) == ["Mine", "Mine Draft"]
        drafts = client.get("/api/events/my/created", params={"status": "draft"}, headers=organizer["headers"]).json()
        assert [e["title"] for e in drafts["events"]] == ["Mine Draft"]
