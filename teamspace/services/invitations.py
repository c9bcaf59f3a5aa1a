"""Workspace invitations: issue, accept, list and revoke."""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime, timedelta
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from teamspace.config import get_settings
from teamspace.db.session import transaction
from teamspace.errors import (
    AuthenticationError,
    ConflictError,
    EmailDeliveryError,
    NotFoundError,
    ValidationError,
)
from teamspace.models.invitation import Invitation
from teamspace.models.profile import Profile, Role
from teamspace.models.user import User
from teamspace.services.auth import (
    INVALID_CREDENTIALS_MESSAGE,
    AuthResult,
    create_access_token,
    normalize_email,
    validate_password_strength,
)
from teamspace.services.email_service import send_invitation_email
from teamspace.services.profiles import FALLBACK_PROFILE_NAME, list_profiles
from teamspace.services.workspace_access import get_profile, require_admin_profile

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100


def _already_member() -> ConflictError:
    return ConflictError("User is already a member of this workspace", code="ALREADY_MEMBER")


def _is_member_by_email(db: Session, email: str, workspace_id: uuid.UUID) -> bool:
    return (
        db.query(Profile.id)
        .join(User, Profile.user_id == User.id)
        .filter(User.email == email, Profile.workspace_id == workspace_id)
        .first()
        is not None
    )


def create_invitation(
    db: Session,
    inviter_id: uuid.UUID,
    workspace_id: uuid.UUID,
    email: str,
    role: Role = Role.USER,
) -> Invitation:
    """Invite an email address into the workspace (ADMIN only).

    Re-inviting the same address replaces the earlier invitation, so the old
    link stops working. The invitation email is sent after commit; delivery
    failures are logged and do not undo the invitation.
    """
    admin = require_admin_profile(db, inviter_id, workspace_id, action="invite users to")
    email = normalize_email(email)

    if _is_member_by_email(db, email, workspace_id):
        raise _already_member()

    expires_at = datetime.now(UTC) + timedelta(days=get_settings().invitation_expire_days)
    try:
        with transaction(db):
            db.query(Invitation).filter(
                Invitation.email == email,
                Invitation.workspace_id == workspace_id,
            ).delete(synchronize_session="fetch")
            invitation = Invitation(
                email=email,
                workspace_id=workspace_id,
                role=role,
                token=str(uuid.uuid4()),
                expires_at=expires_at,
                inviter_id=inviter_id,
            )
            db.add(invitation)
    except IntegrityError as exc:
        raise ConflictError("Invitation already exists") from exc

    db.refresh(invitation)
    logger.info(
        "invitation_created: invitation_id=%s workspace_id=%s role=%s",
        invitation.id,
        workspace_id,
        role.value,
    )

    inviter = admin.user
    try:
        send_invitation_email(
            invitation.email,
            inviter.name or inviter.email,
            admin.workspace.name,
            invitation.token,
        )
    except EmailDeliveryError:
        logger.warning("invitation_email_failed: invitation_id=%s", invitation.id)
    return invitation


def _load_valid_invitation(db: Session, token: str) -> Invitation:
    invitation = (
        db.query(Invitation)
        .options(joinedload(Invitation.workspace))
        .filter(Invitation.token == token)
        .first()
    )
    if invitation is None:
        raise NotFoundError("Invitation not found", code="INVITATION_NOT_FOUND")
    if invitation.is_expired():
        raise ValidationError("Invitation has expired", code="INVITATION_EXPIRED")
    return invitation


def _add_profile(db: Session, invitation: Invitation, user: User, profile_name: str) -> Profile:
    """Stage the invited profile and consume the invitation; the caller commits."""
    profile = Profile(
        workspace_id=invitation.workspace_id,
        user_id=user.id,
        name=profile_name,
        role=invitation.role,
        is_verified=user.email_verified,
        is_default=not list_profiles(db, user.id),
    )
    db.add(profile)
    db.delete(invitation)
    db.flush()
    return profile


def _log_accepted(profile: Profile) -> None:
    logger.info(
        "invitation_accepted: workspace_id=%s user_id=%s role=%s",
        profile.workspace_id,
        profile.user_id,
        profile.role.value,
    )


def accept_invitation(db: Session, token: str, user_id: uuid.UUID) -> Profile:
    """Join the invited workspace as the signed-in user."""
    invitation = _load_valid_invitation(db, token)
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found", code="USER_NOT_FOUND")
    if normalize_email(user.email) != normalize_email(invitation.email):
        raise ValidationError(
            "This invitation was sent to a different email address",
            code="INVITATION_EMAIL_MISMATCH",
        )
    if get_profile(db, user.id, invitation.workspace_id) is not None:
        raise _already_member()

    try:
        with transaction(db):
            profile = _add_profile(db, invitation, user, user.name or FALLBACK_PROFILE_NAME)
    except IntegrityError as exc:
        raise _already_member() from exc

    db.refresh(profile)
    _log_accepted(profile)
    return profile


def accept_invitation_with_signup(
    db: Session,
    token: str,
    password: str,
    name: Optional[str] = None,
) -> AuthResult:
    """Accept an invitation without a session, creating the account if needed.

    A new account needs a name and is marked verified since the token reached
    the inbox. An existing account must present its password. Account creation,
    the new profile and consuming the invitation commit together.
    """
    invitation = _load_valid_invitation(db, token)
    user = db.query(User).filter(User.email == invitation.email).first()
    name = name.strip() if name else None

    if user is None:
        if not name:
            raise ValidationError("Name and password are required for new users")
        validate_password_strength(password)
    elif not user.verify_password(password):
        raise AuthenticationError(INVALID_CREDENTIALS_MESSAGE, code="INVALID_CREDENTIALS")
    elif get_profile(db, user.id, invitation.workspace_id) is not None:
        raise _already_member()

    created = user is None
    try:
        with transaction(db):
            if created:
                user = User(email=invitation.email, name=name, email_verified=True)
                user.set_password(password)
                db.add(user)
                try:
                    db.flush()
                except IntegrityError as exc:
                    raise ConflictError(
                        "User with this email already exists", code="USER_EXISTS"
                    ) from exc
            profile = _add_profile(db, invitation, user, name or user.name or FALLBACK_PROFILE_NAME)
    except IntegrityError as exc:
        raise _already_member() from exc

    db.refresh(profile)
    if created:
        logger.info("user_registered_via_invitation: user_id=%s", user.id)
    _log_accepted(profile)

    profiles = list_profiles(db, user.id)
    current = next(p for p in profiles if p.id == profile.id)
    token_str = create_access_token(user.id, current)
    return AuthResult(user=user, token=token_str, profiles=profiles, current_profile=current)


def list_invitations(
    db: Session,
    workspace_id: uuid.UUID,
    user_id: uuid.UUID,
    page: int = 1,
    limit: int = 20,
) -> list[Invitation]:
    """Pending invitations for the workspace, newest first (ADMIN only)."""
    require_admin_profile(db, user_id, workspace_id, action="view invitations for")
    page = max(page, 1)
    limit = min(max(limit, 1), MAX_PAGE_SIZE)
    return (
        db.query(Invitation)
        .options(joinedload(Invitation.inviter))
        .filter(Invitation.workspace_id == workspace_id)
        .order_by(Invitation.created_at.desc(), Invitation.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )


def delete_invitation(
    db: Session,
    invitation_id: uuid.UUID,
    workspace_id: uuid.UUID,
    user_id: uuid.UUID,
) -> None:
    """Revoke a pending invitation (ADMIN only)."""
    require_admin_profile(db, user_id, workspace_id, action="manage invitations for")
    invitation = (
        db.query(Invitation)
        .filter(Invitation.id == invitation_id, Invitation.workspace_id == workspace_id)
        .first()
    )
    if invitation is None:
        raise NotFoundError("Invitation not found", code="INVITATION_NOT_FOUND")
    with transaction(db):
        db.delete(invitation)
    logger.info("invitation_deleted: invitation_id=%s", invitation_id)
