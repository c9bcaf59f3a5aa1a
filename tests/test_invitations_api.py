"""HTTP tests for /api/invitations routes."""

from __future__ import annotations

from unittest.mock import patch

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from teamspace.services.auth import register
from tests.test_constants import (
    TEST_INVITEE_EMAIL,
    TEST_INVITEE_NAME,
    TEST_PASSWORD,
    TEST_PASSWORD_WRONG,
)


def _invite(client: TestClient, headers, email: str = TEST_INVITEE_EMAIL, role: str = "USER"):
    return client.post("/api/invitations", json={"email": email, "role": role}, headers=headers)


def test_create_list_delete(client_with_db: TestClient, auth_headers) -> None:
    with patch("teamspace.services.invitations.send_invitation_email") as mock_send:
        created = _invite(client_with_db, auth_headers)
    assert created.status_code == 201
    data = created.json()["data"]
    assert data["email"] == TEST_INVITEE_EMAIL
    assert data["role"] == "USER"
    assert data["inviter"]["name"] == "Alice"
    mock_send.assert_called_once()

    listed = client_with_db.get("/api/invitations", headers=auth_headers)
    assert listed.status_code == 200
    assert [i["id"] for i in listed.json()["data"]] == [data["id"]]

    deleted = client_with_db.delete(f"/api/invitations/{data['id']}", headers=auth_headers)
    assert deleted.status_code == 200
    missing = client_with_db.delete(f"/api/invitations/{data['id']}", headers=auth_headers)
    assert missing.status_code == 404
    assert missing.json()["code"] == "INVITATION_NOT_FOUND"


def test_list_limit_bounds(client_with_db: TestClient, auth_headers) -> None:
    response = client_with_db.get("/api/invitations?limit=101", headers=auth_headers)
    assert response.status_code == 422
    assert response.json()["code"] == "VALIDATION_ERROR"


def test_user_role_token_cannot_manage(client_with_db: TestClient, db: Session, auth_headers) -> None:
    token = _invite(client_with_db, auth_headers).json()["data"]["token"]
    bob = register(db, TEST_INVITEE_EMAIL, TEST_PASSWORD, TEST_INVITEE_NAME)
    accepted = client_with_db.post(
        "/api/invitations/accept",
        json={"token": token},
        headers={"Authorization": f"Bearer {bob.token}"},
    ).json()["data"]

    switched = client_with_db.post(
        "/api/auth/switch-workspace",
        json={"workspace_id": accepted["workspace_id"]},
        headers={"Authorization": f"Bearer {bob.token}"},
    ).json()["data"]
    assert switched["role"] == "USER"

    response = _invite(
        client_with_db, {"Authorization": f"Bearer {switched['token']}"}, email="c@x.com"
    )
    assert response.status_code == 403


def test_accept_flow(client_with_db: TestClient, db: Session, auth_headers) -> None:
    token = _invite(client_with_db, auth_headers).json()["data"]["token"]
    bob = register(db, TEST_INVITEE_EMAIL, TEST_PASSWORD, TEST_INVITEE_NAME)
    bob_headers = {"Authorization": f"Bearer {bob.token}"}

    accepted = client_with_db.post(
        "/api/invitations/accept", json={"token": token}, headers=bob_headers
    )
    assert accepted.status_code == 200
    assert accepted.json()["data"]["profile"]["role"] == "USER"

    again = client_with_db.post(
        "/api/invitations/accept", json={"token": token}, headers=bob_headers
    )
    assert again.status_code == 404
    assert again.json()["code"] == "INVITATION_NOT_FOUND"


def test_accept_requires_auth(client_with_db: TestClient) -> None:
    response = client_with_db.post("/api/invitations/accept", json={"token": "t"})
    assert response.status_code == 401


def test_accept_signup_creates_account(client_with_db: TestClient, auth_headers) -> None:
    token = _invite(client_with_db, auth_headers, email="new@x.com").json()["data"]["token"]
    response = client_with_db.post(
        "/api/invitations/accept-signup",
        json={"token": token, "password": TEST_PASSWORD, "name": "Nina"},
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["user"]["email"] == "new@x.com"
    assert data["user"]["email_verified"] is True

    me = client_with_db.get(
        "/api/auth/me", headers={"Authorization": f"Bearer {data['token']}"}
    ).json()["data"]
    assert me["current_profile"]["role"] == "USER"


def test_accept_signup_existing_account_wrong_password(
    client_with_db: TestClient, db: Session, auth_headers
) -> None:
    token = _invite(client_with_db, auth_headers).json()["data"]["token"]
    register(db, TEST_INVITEE_EMAIL, TEST_PASSWORD, TEST_INVITEE_NAME)
    response = client_with_db.post(
        "/api/invitations/accept-signup",
        json={"token": token, "password": TEST_PASSWORD_WRONG},
    )
    assert response.status_code == 401
    assert response.json()["code"] == "INVALID_CREDENTIALS"


def test_accept_signup_new_account_requires_name(client_with_db: TestClient, auth_headers) -> None:
    token = _invite(client_with_db, auth_headers, email="new@x.com").json()["data"]["token"]
    response = client_with_db.post(
        "/api/invitations/accept-signup",
        json={"token": token, "password": TEST_PASSWORD},
    )
    assert response.status_code == 400
    assert response.json() == {
        "detail": "Name and password are required for new users",
        "code": "VALIDATION_ERROR",
    }
