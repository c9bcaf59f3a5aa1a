"""Invitation API routes.

Management endpoints act on the workspace the caller's token is scoped to.
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from teamspace.api.deps import AuthContext, get_db, require_admin, require_auth
from teamspace.schemas.auth import AuthData, ProfileRead
from teamspace.schemas.common import Envelope
from teamspace.schemas.invitation import (
    InvitationAccept,
    InvitationAcceptData,
    InvitationCreate,
    InvitationRead,
    InvitationSignupAccept,
)
from teamspace.services import invitations as invitation_service

router = APIRouter()


@router.get("", response_model=Envelope[list[InvitationRead]])
def api_list_invitations(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=invitation_service.MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(require_admin),
) -> Envelope[list[InvitationRead]]:
    invitations = invitation_service.list_invitations(
        db, ctx.claims.workspace_id, ctx.user.id, page=page, limit=limit
    )
    return Envelope(data=[InvitationRead.model_validate(i) for i in invitations])


@router.post("", status_code=status.HTTP_201_CREATED, response_model=Envelope[InvitationRead])
def api_create_invitation(
    data: InvitationCreate,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(require_admin),
) -> Envelope[InvitationRead]:
    """Invite an email address into the caller's current workspace."""
    invitation = invitation_service.create_invitation(
        db, ctx.user.id, ctx.claims.workspace_id, data.email, data.role
    )
    return Envelope(data=InvitationRead.model_validate(invitation), message="Invitation sent")


@router.delete("/{invitation_id}", response_model=Envelope[None])
def api_delete_invitation(
    invitation_id: UUID,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(require_admin),
) -> Envelope[None]:
    invitation_service.delete_invitation(db, invitation_id, ctx.claims.workspace_id, ctx.user.id)
    return Envelope(message="Invitation deleted")


@router.post("/accept", response_model=Envelope[InvitationAcceptData])
def api_accept_invitation(
    data: InvitationAccept,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(require_auth),
) -> Envelope[InvitationAcceptData]:
    """Join the invited workspace as the signed-in user."""
    profile = invitation_service.accept_invitation(db, data.token, ctx.user.id)
    return Envelope(
        data=InvitationAcceptData(
            workspace_id=profile.workspace_id,
            profile=ProfileRead.model_validate(profile),
        ),
        message="Invitation accepted",
    )


@router.post("/accept-signup", response_model=Envelope[AuthData])
def api_accept_invitation_with_signup(
    data: InvitationSignupAccept,
    db: Session = Depends(get_db),
) -> Envelope[AuthData]:
    """Accept without a session; creates the account when the invited email has none."""
    result = invitation_service.accept_invitation_with_signup(
        db, data.token, data.password, data.name
    )
    return Envelope(data=AuthData.model_validate(result), message="Invitation accepted")
