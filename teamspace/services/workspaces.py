"""Workspace CRUD and membership management."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from sqlalchemy.orm import Session

from teamspace.db.session import transaction
from teamspace.errors import NotFoundError, ValidationError
from teamspace.models.profile import Role
from teamspace.models.user import User
from teamspace.services.profiles import (
    FALLBACK_PROFILE_NAME,
    create_workspace_with_admin,
    list_profiles,
)
from teamspace.services.workspace_access import get_profile, require_admin_profile

logger = logging.getLogger(__name__)


@dataclass
class WorkspaceView:
    """A workspace together with the caller's membership in it."""

    id: UUID
    name: str
    role: Role
    is_default: bool
    created_at: datetime
    updated_at: datetime


def _view(profile) -> WorkspaceView:
    workspace = profile.workspace
    return WorkspaceView(
        id=workspace.id,
        name=workspace.name,
        role=profile.role,
        is_default=profile.is_default,
        created_at=workspace.created_at,
        updated_at=workspace.updated_at,
    )


def create_workspace(db: Session, user: User, name: str) -> WorkspaceView:
    """Create a workspace with the caller as ADMIN. The caller's default is unchanged."""
    with transaction(db):
        profile = create_workspace_with_admin(
            db,
            user,
            name,
            profile_name=user.name or FALLBACK_PROFILE_NAME,
            is_default=False,
        )
    db.refresh(profile)
    logger.info("workspace_created: workspace_id=%s owner_id=%s", profile.workspace_id, user.id)
    return _view(profile)


def list_workspaces(db: Session, user_id: UUID) -> list[WorkspaceView]:
    return [_view(profile) for profile in list_profiles(db, user_id)]


def update_workspace(db: Session, user_id: UUID, workspace_id: UUID, name: str) -> WorkspaceView:
    """Rename a workspace (ADMIN only)."""
    profile = require_admin_profile(db, user_id, workspace_id, action="update")
    with transaction(db):
        profile.workspace.name = name
    db.refresh(profile.workspace)
    return _view(profile)


def delete_workspace(db: Session, user_id: UUID, workspace_id: UUID) -> None:
    """Delete a workspace with its profiles and invitations (ADMIN only).

    Members who lose their default profile get another one promoted at their
    next login.
    """
    profile = require_admin_profile(db, user_id, workspace_id, action="delete")
    with transaction(db):
        db.delete(profile.workspace)
    logger.info("workspace_deleted: workspace_id=%s by user_id=%s", workspace_id, user_id)


def remove_member(db: Session, workspace_id: UUID, admin_id: UUID, user_id: UUID) -> None:
    """Remove another user's profile from the workspace (ADMIN only)."""
    require_admin_profile(db, admin_id, workspace_id, action="manage members of")
    if admin_id == user_id:
        raise ValidationError("You cannot remove yourself from the workspace", code="BAD_REQUEST")

    member = get_profile(db, user_id, workspace_id)
    if member is None:
        raise NotFoundError("User is not a member of this workspace")

    with transaction(db):
        db.delete(member)
    logger.info(
        "member_removed: workspace_id=%s user_id=%s by admin_id=%s",
        workspace_id,
        user_id,
        admin_id,
    )
