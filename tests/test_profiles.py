"""
Tests for the /profile routes.
"""
from types import SimpleNamespace

import pytest

from tests.conftest import TEST_USER

PROFILE_ROW = {
    "id": TEST_USER["id"],
    "email": "ada@example.com",
    "full_name": "Ada Lovelace",
    "avatar_url": None,
    "created_at": "2024-01-01T00:00:00+00:00",
    "updated_at": "2024-02-01T00:00:00+00:00",
}


@pytest.fixture
def admin_configured(db, settings_override):
    settings_override(supabase_service_role_key="service-role")
    db.auth.admin.update_user_by_id.return_value = SimpleNamespace(user=SimpleNamespace(id=TEST_USER["id"]))
    return db.auth.admin


def test_get_profile(client, db):
    db.respond("profiles", PROFILE_ROW)

    response = client.get("/api/v1/profile")

    assert response.status_code == 200
    assert response.json()["full_name"] == "Ada Lovelace"


def test_get_profile_without_row(client, db):
    db.respond("profiles", None)

    response = client.get("/api/v1/profile")

    assert response.status_code == 200
    assert response.json()["email"] == TEST_USER["email"]
    assert response.json()["full_name"] == "Ada Lovelace"


def test_update_profile(client, db, admin_configured):
    db.respond("profiles", [{**PROFILE_ROW, "full_name": "Ada King"}])

    response = client.put("/api/v1/profile", json={"full_name": "Ada King"})

    assert response.status_code == 200
    assert response.json()["full_name"] == "Ada King"
    user_id, attributes = admin_configured.update_user_by_id.call_args[0]
    assert user_id == TEST_USER["id"]
    assert attributes == {"user_metadata": {"full_name": "Ada King"}}
    update = db.queries_for("profiles")[0].op("update")[1][0]
    assert update["full_name"] == "Ada King"
    assert "email" not in update


def test_update_profile_email(client, db, admin_configured):
    db.respond("profiles", [])

    response = client.put("/api/v1/profile", json={"email": "ada@newmail.com"})

    assert response.status_code == 200
    assert response.json()["email"] == "ada@newmail.com"
    assert admin_configured.update_user_by_id.call_args[0][1]["email"] == "ada@newmail.com"


def test_update_profile_invalid_email(client, admin_configured):
    response = client.put("/api/v1/profile", json={"email": "not-an-email"})

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_INPUT"


def test_update_profile_without_service_key(client, settings_override):
    settings_override(supabase_service_role_key=None)

    response = client.put("/api/v1/profile", json={"full_name": "Ada King"})

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "MISSING_CONFIG"


def test_change_password(client, admin_configured):
    response = client.post("/api/v1/profile/password", json={
        "new_password": "newsecret", "confirm_password": "newsecret",
    })

    assert response.status_code == 200
    admin_configured.update_user_by_id.assert_called_once_with(TEST_USER["id"], {"password": "newsecret"})


@pytest.mark.parametrize("new_password, confirm_password", [
    ("newsecret", "different"),
    ("abc", "abc"),
])
def test_change_password_rejected(client, admin_configured, new_password, confirm_password):
    response = client.post("/api/v1/profile/password", json={
        "new_password": new_password, "confirm_password": confirm_password,
    })

    assert response.status_code == 400
    admin_configured.update_user_by_id.assert_not_called()


def test_delete_account_is_refused(client):
    response = client.delete("/api/v1/profile")

    assert response.status_code == 400
    assert response.json()["error"]["message"] == "Please contact support to delete your account."
