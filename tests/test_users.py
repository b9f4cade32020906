"""Tests for profile endpoints, account settings and account deletion."""
from datetime import timedelta

from eventhub.models.attendee import EventAttendee
from eventhub.models.comment import Comment, CommentLike, CommentReport
from eventhub.models.event import Event
from eventhub.models.rsvp import RSVP
from eventhub.models.user import User
from eventhub.timeutils import utcnow
from tests.conftest import DEFAULT_PASSWORD, create_test_event, send_rsvp, signup_user


def _move_to_past(db, event_id):
    start = utcnow() - timedelta(days=2)
    db.query(Event).filter(Event.event_id == event_id).update({
        Event.start_time_utc: start,
        Event.end_time_utc: start + timedelta(hours=2),
    })
    db.commit()


class TestProfile:
    """Profile read / update."""

    def test_me_with_stats(self, client):
        organizer = signup_user(client, name="Alice")
        guest = signup_user(client)
        event = create_test_event(client, organizer["headers"])
        client.post(f"/api/comments/events/{event['event_id']}", json={"content": "Hi"}, headers=organizer["headers"])
        send_rsvp(client, event["event_id"], guest["headers"])

        data = client.get("/api/users/me", headers=organizer["headers"]).json()["user"]
        assert data["name"] == "Alice"
        assert data["stats"] == {"events_created": 1, "events_attended": 0, "comments_posted": 1}

        guest_stats = client.get("/api/users/me", headers=guest["headers"]).json()["user"]["stats"]
        assert guest_stats["events_attended"] == 1

    def test_update_profile(self, client):
        user = signup_user(client)
        resp = client.put("/api/users/profile", json={"name": " Bobby ", "bio": "Hi there"}, headers=user["headers"])
        assert resp.status_code == 200
        assert resp.json()["user"]["name"] == "Bobby"
        assert resp.json()["user"]["bio"] == "Hi there"

    def test_bio_too_long(self, client):
        user = signup_user(client)
        assert client.put("/api/users/profile", json={"bio": "x" * 501}, headers=user["headers"]).status_code == 400

    def test_public_profile_hides_email(self, client):
        user = signup_user(client, name="Carol")
        viewer = signup_user(client)
        resp = client.get(f"/api/users/{user['user']['user_id']}", headers=viewer["headers"])
        assert resp.status_code == 200
        body = resp.json()["user"]
        assert body["name"] == "Carol"
        assert "email" not in body
        assert body["stats"]["events_created"] == 0

    def test_public_profile_missing(self, client):
        viewer = signup_user(client)
        resp = client.get("/api/users/00000000-0000-0000-0000-000000000000", headers=viewer["headers"])
        assert resp.status_code == 404

    def test_dashboard(self, client):
        organizer = signup_user(client)
        guest = signup_user(client)
        event = create_test_event(client, organizer["headers"], title="Upcoming")
        send_rsvp(client, event["event_id"], guest["headers"])

        data = client.get("/api/users/dashboard", headers=guest["headers"]).json()
        assert [e["title"] for e in data["upcoming_events"]] == ["Upcoming"]
        assert data["created_events"] == []
        assert data["stats"]["events_attended"] == 1


class TestAccountSettings:
    """Password and email changes, search."""

    def test_change_password(self, client):
        user = signup_user(client, email="pw@eventhub.dev")
        resp = client.put("/api/users/password", json={"current_password": DEFAULT_PASSWORD, "new_password": "n3w-pass"},
                          headers=user["headers"])
        assert resp.status_code == 200
        login = client.post("/api/auth/login", json={"email": "pw@eventhub.dev", "password": "n3w-pass"})
        assert login.status_code == 200

    def test_change_password_wrong_current(self, client):
        user = signup_user(client)
        resp = client.put("/api/users/password", json={"current_password": "wrong-one", "new_password": "n3w-pass"},
                          headers=user["headers"])
        assert resp.status_code == 400

    def test_change_email_returns_fresh_token(self, client):
        user = signup_user(client)
        resp = client.put("/api/users/email", json={"new_email": "moved@eventhub.dev", "password": DEFAULT_PASSWORD},
                          headers=user["headers"])
        assert resp.status_code == 200
        data = resp.json()
        assert data["user"]["email"] == "moved@eventhub.dev"
        me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {data['token']}"})
        assert me.json()["user"]["email"] == "moved@eventhub.dev"

    def test_change_email_taken(self, client):
        signup_user(client, email="taken@eventhub.dev")
        user = signup_user(client)
        resp = client.put("/api/users/email", json={"new_email": "taken@eventhub.dev", "password": DEFAULT_PASSWORD},
                          headers=user["headers"])
        assert resp.status_code == 409

    def test_search(self, client):
        searcher = signup_user(client)
        signup_user(client, name="Dana Scully")
        signup_user(client, name="Fox Mulder")
        resp = client.get("/api/users/search", params={"q": "scu"}, headers=searcher["headers"])
        assert resp.status_code == 200
        assert [u["name"] for u in resp.json()["users"]] == ["Dana Scully"]

    def test_search_too_short(self, client):
        searcher = signup_user(client)
        assert client.get("/api/users/search", params={"q": "a"}, headers=searcher["headers"]).status_code == 400


class TestAccountDeletion:
    """Self-service deletion and its cascade."""

    def test_requires_password_and_confirmation(self, client):
        user = signup_user(client)
        wrong_pw = client.request("DELETE", "/api/users/account", json={"password": "nope-nope", "confirm_delete": "DELETE"},
                                  headers=user["headers"])
        assert wrong_pw.status_code == 400
        no_confirm = client.request("DELETE", "/api/users/account", json={"password": DEFAULT_PASSWORD, "confirm_delete": "yes"},
                                    headers=user["headers"])
        assert no_confirm.status_code == 400

    def test_refused_while_organizing_upcoming_events(self, client):
        organizer = signup_user(client)
        create_test_event(client, organizer["headers"])
        resp = client.request("DELETE", "/api/users/account",
                              json={"password": DEFAULT_PASSWORD, "confirm_delete": "DELETE"},
                              headers=organizer["headers"])
        assert resp.status_code == 400

    def test_cascade(self, client, db):
        organizer = signup_user(client)
        leaving = signup_user(client)
        event = create_test_event(client, organizer["headers"])
        event_id = event["event_id"]
        leaving_id = leaving["user"]["user_id"]

        send_rsvp(client, event_id, leaving["headers"])
        own = client.post(f"/api/comments/events/{event_id}", json={"content": "Mine"}, headers=leaving["headers"]).json()
        client.post(f"/api/comments/events/{event_id}", json={
            "content": "Reply to leaver", "parent_comment_id": own["comment"]["comment_id"],
        }, headers=organizer["headers"])
        other = client.post(f"/api/comments/events/{event_id}", json={"content": "Organizer note"},
                            headers=organizer["headers"]).json()
        client.post(f"/api/comments/{other['comment']['comment_id']}/like", headers=leaving["headers"])
        client.post(f"/api/comments/{other['comment']['comment_id']}/report", json={"reason": "other"},
                    headers=leaving["headers"])

        resp = client.request("DELETE", "/api/users/account",
                              json={"password": DEFAULT_PASSWORD, "confirm_delete": "DELETE"},
                              headers=leaving["headers"])
        assert resp.status_code == 200

        assert db.get(User, leaving_id) is None
        assert db.query(RSVP).filter(RSVP.user_id == leaving_id).count() == 0
        assert db.query(EventAttendee).filter(EventAttendee.user_id == leaving_id).count() == 0
        assert [c.content for c in db.query(Comment).all()] == ["Organizer note"]
        assert db.query(CommentLike).count() == 0
        assert db.query(CommentReport).count() == 0
        assert client.get(f"/api/events/{event_id}").json()["event"]["attendee_count"] == 0
        assert client.get("/api/auth/me", headers=leaving["headers"]).status_code == 401

    def test_past_events_keep_without_organizer(self, client, db):
        organizer = signup_user(client)
        event = create_test_event(client, organizer["headers"])
        _move_to_past(db, event["event_id"])

        resp = client.request("DELETE", "/api/users/account",
                              json={"password": DEFAULT_PASSWORD, "confirm_delete": "DELETE"},
                              headers=organizer["headers"])
        assert resp.status_code == 200
        db.expire_all()
        remaining = db.get(Event, event["event_id"])
        assert remaining is not None
        assert remaining.organizer_id is None
