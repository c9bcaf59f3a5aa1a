"""Profile lifecycle: workspace provisioning and the per-user default flag."""

from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy import update
from sqlalchemy.orm import Session, joinedload

from teamspace.db.session import transaction
from teamspace.errors import NotFoundError
from teamspace.models.profile import Profile, Role
from teamspace.models.user import User
from teamspace.models.workspace import LEGACY_WORKSPACE_NAME, Workspace
from teamspace.services.workspace_access import get_profile

logger = logging.getLogger(__name__)

# Profile name used when the account has no display name
FALLBACK_PROFILE_NAME = "User"


def list_profiles(db: Session, user_id: UUID) -> list[Profile]:
    """All of a user's profiles with their workspaces, oldest membership first."""
    return (
        db.query(Profile)
        .options(joinedload(Profile.workspace))
        .filter(Profile.user_id == user_id)
        .order_by(Profile.joined_at.asc(), Profile.id.asc())
        .all()
    )


def create_workspace_with_admin(
    db: Session,
    owner: User,
    workspace_name: str,
    profile_name: str,
    is_default: bool = False,
) -> Profile:
    """Add a workspace owned by ``owner`` plus the owner's ADMIN profile.

    Flushes but does not commit; callers decide the transaction boundary.
    """
    workspace = Workspace(name=workspace_name, owner_id=owner.id)
    db.add(workspace)
    db.flush()

    profile = Profile(
        workspace_id=workspace.id,
        user_id=owner.id,
        name=profile_name,
        role=Role.ADMIN,
        is_verified=owner.email_verified,
        is_default=is_default,
    )
    profile.workspace = workspace
    db.add(profile)
    db.flush()
    return profile


def set_default_profile(db: Session, user_id: UUID, profile: Profile) -> Profile:
    """Make ``profile`` the user's only default.

    Clears is_default on every profile the user owns, then sets it on the
    target, both inside one transaction.
    """
    with transaction(db):
        db.execute(
            update(Profile)
            .where(Profile.user_id == user_id)
            .values(is_default=False)
            .execution_options(synchronize_session="fetch")
        )
        profile.is_default = True
    db.refresh(profile)
    return profile


def make_profile_default(db: Session, user_id: UUID, workspace_id: UUID) -> Profile:
    """Persistently select the workspace used at login."""
    profile = get_profile(db, user_id, workspace_id)
    if profile is None:
        raise NotFoundError("Profile not found", code="PROFILE_NOT_FOUND")
    return set_default_profile(db, user_id, profile)


def ensure_default_workspace(db: Session, user: User) -> Profile:
    """Return the user's default profile, provisioning one when missing.

    Idempotent. Accounts created before workspaces existed get a fresh
    workspace with an ADMIN default profile; accounts whose profiles carry no
    default flag (e.g. after the default workspace was deleted) get their
    oldest profile promoted.
    """
    profiles = list_profiles(db, user.id)
    if not profiles:
        with transaction(db):
            profile = create_workspace_with_admin(
                db,
                user,
                LEGACY_WORKSPACE_NAME,
                profile_name=user.name or FALLBACK_PROFILE_NAME,
                is_default=True,
            )
        logger.info(
            "default_workspace_provisioned: user_id=%s workspace_id=%s",
            user.id,
            profile.workspace_id,
        )
        return profile

    for profile in profiles:
        if profile.is_default:
            return profile

    logger.info("default_profile_promoted: user_id=%s profile_id=%s", user.id, profiles[0].id)
    return set_default_profile(db, user.id, profiles[0])
