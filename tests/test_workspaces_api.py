"""HTTP tests for /api/workspaces routes."""

from __future__ import annotations

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from teamspace.services.auth import register
from teamspace.services.invitations import accept_invitation, create_invitation
from tests.test_constants import TEST_INVITEE_EMAIL, TEST_INVITEE_NAME, TEST_PASSWORD


def test_requires_auth(client_with_db: TestClient) -> None:
    assert client_with_db.get("/api/workspaces").status_code == 401


def test_create_and_list(client_with_db: TestClient, auth_headers) -> None:
    created = client_with_db.post("/api/workspaces", json={"name": "Second"}, headers=auth_headers)
    assert created.status_code == 201
    assert created.json()["data"]["role"] == "ADMIN"
    assert created.json()["data"]["is_default"] is False

    listed = client_with_db.get("/api/workspaces", headers=auth_headers).json()["data"]
    assert [w["name"] for w in listed] == ["Alice's Workspace", "Second"]


def test_create_rejects_blank_name(client_with_db: TestClient, auth_headers) -> None:
    response = client_with_db.post("/api/workspaces", json={"name": ""}, headers=auth_headers)
    assert response.status_code == 422


def test_update_and_delete(client_with_db: TestClient, registered, auth_headers) -> None:
    workspace_id = registered.current_profile.workspace_id
    updated = client_with_db.put(
        f"/api/workspaces/{workspace_id}", json={"name": "Renamed"}, headers=auth_headers
    )
    assert updated.status_code == 200
    assert updated.json()["data"]["name"] == "Renamed"

    deleted = client_with_db.delete(f"/api/workspaces/{workspace_id}", headers=auth_headers)
    assert deleted.status_code == 200
    assert client_with_db.get("/api/workspaces", headers=auth_headers).json()["data"] == []


def test_member_cannot_update_or_remove(client_with_db: TestClient, db: Session, registered) -> None:
    workspace_id = registered.current_profile.workspace_id
    bob = register(db, TEST_INVITEE_EMAIL, TEST_PASSWORD, TEST_INVITEE_NAME)
    invitation = create_invitation(db, registered.user.id, workspace_id, TEST_INVITEE_EMAIL)
    accept_invitation(db, invitation.token, bob.user.id)
    bob_headers = {"Authorization": f"Bearer {bob.token}"}

    response = client_with_db.put(
        f"/api/workspaces/{workspace_id}", json={"name": "Mine"}, headers=bob_headers
    )
    assert response.status_code == 403

    response = client_with_db.delete(
        f"/api/workspaces/{workspace_id}/users/{registered.user.id}", headers=bob_headers
    )
    assert response.status_code == 403


def test_remove_member_flow(client_with_db: TestClient, db: Session, registered, auth_headers) -> None:
    workspace_id = registered.current_profile.workspace_id
    bob = register(db, TEST_INVITEE_EMAIL, TEST_PASSWORD, TEST_INVITEE_NAME)
    invitation = create_invitation(db, registered.user.id, workspace_id, TEST_INVITEE_EMAIL)
    accept_invitation(db, invitation.token, bob.user.id)

    self_removal = client_with_db.delete(
        f"/api/workspaces/{workspace_id}/users/{registered.user.id}", headers=auth_headers
    )
    assert self_removal.status_code == 400
    assert self_removal.json()["code"] == "BAD_REQUEST"

    removed = client_with_db.delete(
        f"/api/workspaces/{workspace_id}/users/{bob.user.id}", headers=auth_headers
    )
    assert removed.status_code == 200

    again = client_with_db.delete(
        f"/api/workspaces/{workspace_id}/users/{bob.user.id}", headers=auth_headers
    )
    assert again.status_code == 404
    assert again.json()["code"] == "NOT_FOUND"
