"""
Tests for login, logout, session resolution and password change.
"""

import logging
from datetime import datetime, timedelta

from models.user import User
from models.user_session import UserSession
from extensions import db
from tests.helpers import ADMIN_PASSWORD, ADMIN_USERNAME, login


class TestLogin:
    """Test cases for POST /api/login."""

    def test_login_with_seeded_admin(self, client):
        """Seeded admin/0777 can log in."""
        response = login(client)

        assert response.status_code == 200
        body = response.get_json()
        assert body["username"] == ADMIN_USERNAME
        assert isinstance(body["id"], int)

    def test_login_response_never_contains_credentials(self, client):
        """The returned user only exposes id and username."""
        body = login(client).get_json()

        assert set(body) == {"id", "username"}

    def test_login_wrong_password(self, client):
        """A wrong password is rejected with 401."""
        response = login(client, password="wrong")

        assert response.status_code == 401
        assert response.get_json() == {"message": "Invalid credentials"}

    def test_login_unknown_user(self, client):
        """An unknown username is rejected with 401."""
        response = login(client, username="nobody")

        assert response.status_code == 401

    def test_login_malformed_body(self, client):
        """Missing credentials are treated as invalid credentials."""
        response = client.post("/api/login", json={"username": ADMIN_USERNAME})

        assert response.status_code == 401

    def test_login_creates_server_side_session(self, app, client):
        """Login stores a hashed session token in the database."""
        login(client)

        with app.app_context():
            sessions = UserSession.query.all()
            assert len(sessions) == 1
            assert len(sessions[0].token_hash) == 64

    def test_login_is_logged(self, client, caplog):
        """A successful login is written to the application log at INFO level."""
        with caplog.at_level(logging.INFO):
            login(client)

        assert f"User {ADMIN_USERNAME} logged in" in caplog.text

    def test_password_is_stored_hashed(self, app):
        """The seeded password is never stored in plain text."""
        with app.app_context():
            user = User.query.filter_by(username=ADMIN_USERNAME).one()
            assert user.password_hash != ADMIN_PASSWORD
            assert user.password_hash.startswith("scrypt")


class TestCurrentUser:
    """Test cases for GET /api/user and POST /api/logout."""

    def test_me_without_session(self, client):
        """Without a session the current user is unauthorized."""
        response = client.get("/api/user")

        assert response.status_code == 401
        assert response.get_json() == {"message": "Unauthorized"}

    def test_me_with_session(self, auth_client):
        """With a session the current user is returned."""
        response = auth_client.get("/api/user")

        assert response.status_code == 200
        assert response.get_json()["username"] == ADMIN_USERNAME

    def test_logout_ends_session(self, app, auth_client):
        """After logout the session is gone on both sides."""
        response = auth_client.post("/api/logout")

        assert response.status_code == 200
        assert auth_client.get("/api/user").status_code == 401
        with app.app_context():
            assert UserSession.query.count() == 0

    def test_logout_without_session_is_idempotent(self, client):
        """Logging out twice, or without logging in, still succeeds."""
        assert client.post("/api/logout").status_code == 200
        assert client.post("/api/logout").status_code == 200

    def test_expired_session_is_rejected(self, app, auth_client):
        """A session past its expiry is treated as absent and removed."""
        with app.app_context():
            record = UserSession.query.one()
            record.expires_at = datetime.utcnow() - timedelta(minutes=1)
            db.session.commit()

        assert auth_client.get("/api/user").status_code == 401
        with app.app_context():
            assert UserSession.query.count() == 0

    def test_cleanup_removes_only_expired_sessions(self, app, auth_client):
        """Expired sessions are removed by the cleanup operation."""
        with app.app_context():
            user = User.query.filter_by(username=ADMIN_USERNAME).one()
            db.session.add(
                UserSession(
                    user_id=user.id,
                    token_hash="0" * 64,
                    expires_at=datetime.utcnow() - timedelta(hours=1),
                )
            )
            db.session.commit()

            removed = app.extensions["auth_service"].cleanup_expired_sessions()

            assert removed == 1
            assert UserSession.query.count() == 1

        assert auth_client.get("/api/user").status_code == 200


class TestChangePassword:
    """Test cases for POST /api/change-password."""

    def test_requires_session(self, client):
        """Changing the password without a session is unauthorized."""
        response = client.post(
            "/api/change-password",
            json={"currentPassword": ADMIN_PASSWORD, "newPassword": "new-secret"},
        )

        assert response.status_code == 401
        assert login(client, password=ADMIN_PASSWORD).status_code == 200

    def test_wrong_current_password(self, app, auth_client):
        """A wrong current password fails and leaves the stored hash untouched."""
        with app.app_context():
            before = User.query.filter_by(username=ADMIN_USERNAME).one().password_hash

        response = auth_client.post(
            "/api/change-password",
            json={"currentPassword": "wrong", "newPassword": "new-secret"},
        )

        assert response.status_code == 400
        assert response.get_json()["message"] == "Incorrect current password"
        with app.app_context():
            after = User.query.filter_by(username=ADMIN_USERNAME).one().password_hash
        assert after == before

    def test_invalid_input(self, auth_client):
        """A body of the wrong shape is a validation error."""
        response = auth_client.post("/api/change-password", json={"currentPassword": ADMIN_PASSWORD})

        assert response.status_code == 400
        assert response.get_json()["message"] == "Invalid input"

    def test_successful_change(self, app, auth_client):
        """The new password works and the old one no longer does."""
        response = auth_client.post(
            "/api/change-password",
            json={"currentPassword": ADMIN_PASSWORD, "newPassword": "new-secret"},
        )

        assert response.status_code == 200
        assert response.get_json() == {"message": "Password updated"}

        fresh_client = app.test_client()
        assert login(fresh_client, password=ADMIN_PASSWORD).status_code == 401
        assert login(fresh_client, password="new-secret").status_code == 200

    def test_change_revokes_other_sessions(self, app, auth_client):
        """Other sessions of the user end; the current one survives."""
        other_client = app.test_client()
        assert login(other_client).status_code == 200

        response = auth_client.post(
            "/api/change-password",
            json={"currentPassword": ADMIN_PASSWORD, "newPassword": "new-secret"},
        )

        assert response.status_code == 200
        assert auth_client.get("/api/user").status_code == 200
        assert other_client.get("/api/user").status_code == 401


class TestSeedAdmin:
    """Test cases for admin seeding."""

    def test_seed_is_idempotent(self, app):
        """Seeding twice keeps a single admin and does not reset its password."""
        with app.app_context():
            auth_service = app.extensions["auth_service"]
            user, created = auth_service.seed_admin(ADMIN_USERNAME, "another-password")

            assert created is False
            assert User.query.count() == 1
            assert auth_service.authenticate(ADMIN_USERNAME, ADMIN_PASSWORD).id == user.id

    def test_seed_cli_command(self, app):
        """The seed-admin CLI command reports the existing admin."""
        result = app.test_cli_runner().invoke(args=["seed-admin"])

        assert result.exit_code == 0
        assert "already exists" in result.output
