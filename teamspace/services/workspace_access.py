"""Workspace access control.

Membership is a Profile row for (user, workspace); the role on that row is the
authority for admin-only operations, not the role cached in a bearer token.
"""

from __future__ import annotations

from uuid import UUID

from sqlalchemy.orm import Session

from teamspace.errors import AuthorizationError
from teamspace.models.profile import Profile, Role


def get_profile(
    db: Session,
    user_id: UUID,
    workspace_id: UUID,
) -> Profile | None:
    """Return the user's profile in the workspace, or None when not a member."""
    return (
        db.query(Profile)
        .filter(
            Profile.user_id == user_id,
            Profile.workspace_id == workspace_id,
        )
        .first()
    )


def require_admin_profile(
    db: Session,
    user_id: UUID,
    workspace_id: UUID,
    action: str = "manage",
) -> Profile:
    """Return the caller's ADMIN profile in the workspace.

    Raises AuthorizationError (403) when the caller is not a member or is a
    plain USER there.
    """
    profile = get_profile(db, user_id, workspace_id)
    if profile is None or profile.role != Role.ADMIN:
        raise AuthorizationError(f"You are not authorized to {action} this workspace")
    return profile
