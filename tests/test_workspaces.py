"""Tests for workspace CRUD and member removal."""

from __future__ import annotations

import uuid

import pytest
from sqlalchemy.orm import Session

from teamspace.errors import AuthorizationError, NotFoundError, ValidationError
from teamspace.models import Invitation, Profile, Role, Workspace
from teamspace.services.auth import register
from teamspace.services.invitations import accept_invitation, create_invitation
from teamspace.services.workspaces import (
    create_workspace,
    delete_workspace,
    list_workspaces,
    remove_member,
    update_workspace,
)
from tests.test_constants import TEST_INVITEE_EMAIL, TEST_INVITEE_NAME, TEST_PASSWORD


@pytest.fixture
def team(db: Session, registered):
    """Alice's workspace with Bob joined as a USER."""
    workspace_id = registered.current_profile.workspace_id
    bob = register(db, TEST_INVITEE_EMAIL, TEST_PASSWORD, TEST_INVITEE_NAME)
    invitation = create_invitation(db, registered.user.id, workspace_id, TEST_INVITEE_EMAIL)
    accept_invitation(db, invitation.token, bob.user.id)
    return registered, bob, workspace_id


def test_create_workspace_makes_creator_admin_not_default(db: Session, registered) -> None:
    view = create_workspace(db, registered.user, "Side Project")
    assert view.name == "Side Project"
    assert view.role == Role.ADMIN
    assert view.is_default is False
    assert db.get(Workspace, view.id).owner_id == registered.user.id


def test_list_workspaces(db: Session, registered) -> None:
    create_workspace(db, registered.user, "Second")
    views = list_workspaces(db, registered.user.id)
    assert [v.name for v in views] == ["Alice's Workspace", "Second"]
    assert [v.is_default for v in views] == [True, False]


def test_update_workspace(db: Session, registered) -> None:
    workspace_id = registered.current_profile.workspace_id
    view = update_workspace(db, registered.user.id, workspace_id, "Renamed")
    assert view.name == "Renamed"
    assert db.get(Workspace, workspace_id).name == "Renamed"


def test_update_workspace_requires_admin(db: Session, team) -> None:
    _alice, bob, workspace_id = team
    with pytest.raises(AuthorizationError):
        update_workspace(db, bob.user.id, workspace_id, "Hijacked")


def test_update_workspace_non_member_forbidden(db: Session, registered) -> None:
    stranger = register(db, "c@x.com", TEST_PASSWORD, "Carol")
    with pytest.raises(AuthorizationError) as exc_info:
        update_workspace(db, stranger.user.id, registered.current_profile.workspace_id, "X")
    assert exc_info.value.status_code == 403


def test_delete_workspace_cascades(db: Session, team) -> None:
    alice, _bob, workspace_id = team
    create_invitation(db, alice.user.id, workspace_id, "d@x.com")

    delete_workspace(db, alice.user.id, workspace_id)

    assert db.get(Workspace, workspace_id) is None
    assert db.query(Profile).filter(Profile.workspace_id == workspace_id).count() == 0
    assert db.query(Invitation).filter(Invitation.workspace_id == workspace_id).count() == 0


def test_delete_workspace_requires_admin(db: Session, team) -> None:
    _alice, bob, workspace_id = team
    with pytest.raises(AuthorizationError):
        delete_workspace(db, bob.user.id, workspace_id)


def test_remove_member(db: Session, team) -> None:
    alice, bob, workspace_id = team
    remove_member(db, workspace_id, alice.user.id, bob.user.id)
    assert (
        db.query(Profile)
        .filter(Profile.workspace_id == workspace_id, Profile.user_id == bob.user.id)
        .count()
        == 0
    )


def test_remove_member_cannot_remove_self(db: Session, team) -> None:
    alice, _bob, workspace_id = team
    with pytest.raises(ValidationError) as exc_info:
        remove_member(db, workspace_id, alice.user.id, alice.user.id)
    assert exc_info.value.code == "BAD_REQUEST"


def test_remove_member_non_member(db: Session, team) -> None:
    alice, _bob, workspace_id = team
    with pytest.raises(NotFoundError) as exc_info:
        remove_member(db, workspace_id, alice.user.id, uuid.uuid4())
    assert exc_info.value.code == "NOT_FOUND"


def test_remove_member_requires_admin(db: Session, team) -> None:
    alice, bob, workspace_id = team
    with pytest.raises(AuthorizationError):
        remove_member(db, workspace_id, bob.user.id, alice.user.id)
