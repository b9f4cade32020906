"""Tests for signup/login, password reset and the auth gate."""
from eventhub.models.user import User
from eventhub.services import notification_service
from tests.conftest import DEFAULT_PASSWORD, auth_headers, create_test_admin, admin_headers, signup_user


class TestSignupLogin:
    """Account creation and credential checks."""

    def test_signup_returns_token_and_user(self, client):
        data = signup_user(client, name="Alice", email="alice@eventhub.dev")
        assert data["success"] is True
        assert data["token"]
        assert data["user"]["email"] == "alice@eventhub.dev"
        assert data["user"]["role"] == "user"
        assert "password_hash" not in data["user"]

    def test_signup_duplicate_email_conflict(self, client):
        signup_user(client, email="dup@eventhub.dev")
        resp = client.post("/api/auth/signup", json={
            "name": "Again", "email": "DUP@eventhub.dev", "password": DEFAULT_PASSWORD,
        })
        assert resp.status_code == 409
        assert resp.json()["success"] is False

    def test_signup_short_password_is_validation_error(self, client):
        resp = client.post("/api/auth/signup", json={"name": "Bob", "email": "bob@eventhub.dev", "password": "123"})
        assert resp.status_code == 400
        body = resp.json()
        assert body["success"] is False
        assert body["errors"]

    def test_login(self, client):
        signup_user(client, email="carol@eventhub.dev")
        resp = client.post("/api/auth/login", json={"email": "carol@eventhub.dev", "password": DEFAULT_PASSWORD})
        assert resp.status_code == 200
        assert resp.json()["token"]

    def test_login_wrong_password(self, client):
        signup_user(client, email="dave@eventhub.dev")
        resp = client.post("/api/auth/login", json={"email": "dave@eventhub.dev", "password": "nope-nope"})
        assert resp.status_code == 401
        assert resp.json()["message"] == "Invalid email or password"

    def test_login_unknown_email(self, client):
        resp = client.post("/api/auth/login", json={"email": "ghost@eventhub.dev", "password": DEFAULT_PASSWORD})
        assert resp.status_code == 401


class TestAuthGate:
    """Bearer token handling for the user identity space."""

    def test_me(self, client):
        user = signup_user(client, name="Erin")
        resp = client.get("/api/auth/me", headers=user["headers"])
        assert resp.status_code == 200
        assert resp.json()["user"]["name"] == "Erin"

    def test_missing_token(self, client):
        resp = client.get("/api/auth/me")
        assert resp.status_code == 401
        assert resp.json() == {"success": False, "message": "Access denied. No token provided."}

    def test_garbage_token(self, client):
        resp = client.get("/api/auth/me", headers=auth_headers("not-a-jwt"))
        assert resp.status_code == 401

    def test_admin_token_rejected_for_user_routes(self, client, db):
        admin = create_test_admin(db)
        resp = client.get("/api/auth/me", headers=admin_headers(client, admin))
        assert resp.status_code == 401

    def test_user_token_rejected_for_admin_routes(self, client):
        user = signup_user(client)
        resp = client.get("/api/admin/dashboard/stats", headers=user["headers"])
        assert resp.status_code == 401

    def test_deleted_user_token_rejected(self, client, db):
        user = signup_user(client)
        db.query(User).filter(User.user_id == user["user"]["user_id"]).delete()
        db.commit()
        resp = client.get("/api/auth/me", headers=user["headers"])
        assert resp.status_code == 401

    def test_blocked_user_forbidden(self, client, db):
        user = signup_user(client, email="blocked@eventhub.dev")
        admin = create_test_admin(db)
        resp = client.patch(f"/api/admin/users/{user['user']['user_id']}/status", headers=admin_headers(client, admin))
        assert resp.status_code == 200
        assert resp.json()["user"]["status"] == "blocked"

        assert client.get("/api/auth/me", headers=user["headers"]).status_code == 403
        resp = client.post("/api/auth/login", json={"email": "blocked@eventhub.dev", "password": DEFAULT_PASSWORD})
        assert resp.status_code == 403

    def test_request_id_header_echoed(self, client):
        resp = client.get("/api/health", headers={"X-Request-ID": "abc-123"})
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}
        assert resp.headers["X-Request-ID"] == "abc-123"


class TestPasswordReset:
    """Forgot / reset password flow."""

    def test_forgot_password_unknown_email_still_ok(self, client):
        resp = client.post("/api/auth/forgot-password", json={"email": "nobody@eventhub.dev"})
        assert resp.status_code == 200
        assert resp.json()["success"] is True

    def test_reset_flow(self, client, db, monkeypatch):
        sent = {}

        def _capture(user, raw_token):
            sent["token"] = raw_token
            return True

        monkeypatch.setattr(notification_service, "send_password_reset_email", _capture)
        signup_user(client, email="frank@eventhub.dev")

        resp = client.post("/api/auth/forgot-password", json={"email": "frank@eventhub.dev"})
        assert resp.status_code == 200
        stored = db.query(User).filter(User.email == "frank@eventhub.dev").first()
        assert stored.reset_password_token
        assert stored.reset_password_token != sent["token"]

        resp = client.put(f"/api/auth/reset-password/{sent['token']}", json={"password": "brand-new"})
        assert resp.status_code == 200
        assert resp.json()["token"]

        resp = client.post("/api/auth/login", json={"email": "frank@eventhub.dev", "password": "brand-new"})
        assert resp.status_code == 200

        # Token is single use
        resp = client.put(f"/api/auth/reset-password/{sent['token']}", json={"password": "another1"})
        assert resp.status_code == 400

    def test_reset_with_unknown_token(self, client):
        resp = client.put("/api/auth/reset-password/deadbeef", json={"password": "whatever"})
        assert resp.status_code == 400
