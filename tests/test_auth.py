"""
Tests for the /auth routes and token resolution.
"""
from types import SimpleNamespace

import pytest

from app.core.dependencies import get_current_user
from app.core.errors import ApiError, ErrorCode
from app.main import app
from app.modules.auth.service import AuthService, clear_auth_cache
from tests.conftest import AUTH_HEADERS


def auth_user(**overrides):
    values = {
        "id": "user-1",
        "email": "ada@example.com",
        "user_metadata": {"full_name": "Ada Lovelace"},
        "app_metadata": {},
        "created_at": "2024-01-01T00:00:00+00:00",
        "updated_at": None,
    }
    values.update(overrides)
    return SimpleNamespace(**values)


def session():
    return SimpleNamespace(access_token="access", refresh_token="refresh", expires_in=3600, token_type="bearer")


REGISTRATION = {"email": "ada@example.com", "password": "secret123", "full_name": "Ada Lovelace"}


class TestRegister:

    def test_register_opens_session(self, client, db):
        db.auth.sign_up.return_value = SimpleNamespace(user=auth_user(), session=session())

        response = client.post("/api/v1/auth/register", json=REGISTRATION)

        assert response.status_code == 201
        body = response.json()
        assert body["user"] == {"id": "user-1", "email": "ada@example.com", "full_name": "Ada Lovelace", "avatar_url": None}
        assert body["session"]["access_token"] == "access"
        sign_up = db.auth.sign_up.call_args[0][0]
        assert sign_up["options"]["data"] == {"full_name": "Ada Lovelace"}
        assert db.queries_for("profiles")[0].op("upsert")[1][0]["id"] == "user-1"

    def test_register_signs_in_when_no_session(self, client, db):
        db.auth.sign_up.return_value = SimpleNamespace(user=auth_user(), session=None)
        db.auth.sign_in_with_password.return_value = SimpleNamespace(user=auth_user(), session=session())

        response = client.post("/api/v1/auth/register", json=REGISTRATION)

        assert response.json()["session"]["refresh_token"] == "refresh"

    def test_register_awaiting_email_confirmation(self, client, db):
        db.auth.sign_up.return_value = SimpleNamespace(user=auth_user(), session=None)
        db.auth.sign_in_with_password.side_effect = Exception("Email not confirmed")

        response = client.post("/api/v1/auth/register", json=REGISTRATION)

        assert response.status_code == 201
        assert response.json()["session"] is None
        assert "confirm your email" in response.json()["message"]

    def test_profile_row_failure_does_not_fail_signup(self, client, db):
        db.auth.sign_up.return_value = SimpleNamespace(user=auth_user(), session=session())
        db.respond("profiles", error=Exception("permission denied for table profiles"))

        assert client.post("/api/v1/auth/register", json=REGISTRATION).status_code == 201

    def test_existing_user(self, client, db):
        db.auth.sign_up.side_effect = Exception("User already registered")

        response = client.post("/api/v1/auth/register", json=REGISTRATION)

        assert response.status_code == 400
        assert response.json()["error"]["message"] == "User already exists"

    def test_short_password(self, client):
        response = client.post("/api/v1/auth/register", json={**REGISTRATION, "password": "abc"})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_INPUT"


class TestLogin:

    def test_login_merges_profile(self, client, db):
        db.auth.sign_in_with_password.return_value = SimpleNamespace(user=auth_user(), session=session())
        db.respond("profiles", {"id": "user-1", "full_name": "Countess Lovelace", "avatar_url": "https://img/ada.png"})

        response = client.post("/api/v1/auth/login", json={"email": "ada@example.com", "password": "secret123"})

        assert response.status_code == 200
        assert response.json()["user"]["full_name"] == "Countess Lovelace"
        assert response.json()["user"]["avatar_url"] == "https://img/ada.png"

    def test_bad_credentials(self, client, db):
        db.auth.sign_in_with_password.side_effect = Exception("Invalid login credentials")

        response = client.post("/api/v1/auth/login", json={"email": "ada@example.com", "password": "wrong"})

        assert response.status_code == 401
        assert response.json() == {"error": {"message": "Invalid email or password", "code": "AUTH_ERROR"}}


class TestCurrentUser:

    def setup_method(self):
        clear_auth_cache()

    def test_token_lookups_are_cached(self, db):
        db.auth.get_user.return_value = SimpleNamespace(user=auth_user())
        service = AuthService(db)

        first = service.get_current_user("token-a")
        second = service.get_current_user("token-a")

        assert first == second
        assert first["user_metadata"] == {"full_name": "Ada Lovelace"}
        db.auth.get_user.assert_called_once_with(jwt="token-a")

    def test_invalid_token(self, db):
        db.auth.get_user.side_effect = Exception("invalid JWT: token is expired")

        with pytest.raises(ApiError) as exc_info:
            AuthService(db).get_current_user("stale")

        assert exc_info.value.code == ErrorCode.AUTH_ERROR
        assert exc_info.value.message == "Invalid or expired token"

    def test_me_requires_bearer_token(self, client):
        app.dependency_overrides.pop(get_current_user)

        response = client.get("/api/v1/auth/me")

        assert response.status_code in (401, 403)
        assert response.json()["error"]["code"] == "AUTH_ERROR"

    def test_me(self, client, db):
        app.dependency_overrides.pop(get_current_user)
        db.auth.get_user.return_value = SimpleNamespace(user=auth_user())

        response = client.get("/api/v1/auth/me", headers=AUTH_HEADERS)

        assert response.status_code == 200
        assert response.json()["email"] == "ada@example.com"


def test_logout(client, db):
    response = client.post("/api/v1/auth/logout", headers=AUTH_HEADERS)

    assert response.json() == {"message": "Logged out successfully"}
    db.auth.sign_out.assert_called_once()


def test_reset_password_uses_site_url(client, db, settings_override):
    settings_override(site_url="https://projectai.app/")

    response = client.post("/api/v1/auth/reset-password", json={"email": "ada@example.com"})

    assert response.status_code == 200
    db.auth.reset_password_for_email.assert_called_once_with(
        "ada@example.com", {"redirect_to": "https://projectai.app/auth/reset-password"}
    )
