"""Authentication and account API routes."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from teamspace.api.deps import AuthContext, get_db, require_auth
from teamspace.schemas.auth import (
    AuthData,
    LoginRequest,
    MakeProfileDefaultRequest,
    MeData,
    MemberRead,
    ProfileRead,
    RegisterRequest,
    SwitchWorkspaceData,
    SwitchWorkspaceRequest,
    VerificationData,
    VerifyEmailRequest,
)
from teamspace.schemas.common import Envelope
from teamspace.services import auth as auth_service
from teamspace.services.profiles import make_profile_default
from teamspace.services.verification import resend_verification_email, verify_email

router = APIRouter()

_VERIFICATION_MESSAGES = {
    "verified": "Email verified successfully",
    "already_verified": "Email is already verified",
    "reverification_sent": "Verification link expired. A new one has been sent to your email",
}


@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=Envelope[AuthData])
def register(body: RegisterRequest, db: Session = Depends(get_db)) -> Envelope[AuthData]:
    """Create an account, its first workspace and a default ADMIN profile."""
    result = auth_service.register(db, body.email, body.password, body.name)
    return Envelope(
        data=AuthData.model_validate(result),
        message="Registration successful. Please check your email to verify your account.",
    )


@router.post("/login", response_model=Envelope[AuthData])
def login(body: LoginRequest, db: Session = Depends(get_db)) -> Envelope[AuthData]:
    """Authenticate and return a token scoped to the default (or requested) workspace."""
    result = auth_service.login(db, body.email, body.password, body.workspace_id)
    return Envelope(data=AuthData.model_validate(result), message="Login successful")


@router.post("/logout", response_model=Envelope[None])
def logout(_ctx: AuthContext = Depends(require_auth)) -> Envelope[None]:
    """Tokens are stateless; the client discards its copy."""
    return Envelope(message="Logged out successfully")


@router.post("/switch-workspace", response_model=Envelope[SwitchWorkspaceData])
def switch_workspace(
    body: SwitchWorkspaceRequest,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(require_auth),
) -> Envelope[SwitchWorkspaceData]:
    result = auth_service.switch_workspace(db, ctx.user.id, body.workspace_id)
    return Envelope(data=SwitchWorkspaceData.model_validate(result), message="Workspace switched")


@router.get("/me", response_model=Envelope[MeData])
def me(
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(require_auth),
) -> Envelope[MeData]:
    """Return the current user, their profiles and the token's profile."""
    result = auth_service.get_current_user_payload(db, ctx.user, ctx.claims.profile_id)
    return Envelope(data=MeData.model_validate(result))


@router.get("/users", response_model=Envelope[list[MemberRead]])
def list_users(
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(require_auth),
) -> Envelope[list[MemberRead]]:
    """Members of the workspace the token is scoped to."""
    members = auth_service.list_workspace_users(db, ctx.claims.workspace_id)
    return Envelope(data=[MemberRead.model_validate(m) for m in members])


@router.get("/users/{user_id}", response_model=Envelope[MemberRead])
def get_user(
    user_id: UUID,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(require_auth),
) -> Envelope[MemberRead]:
    member = auth_service.get_workspace_user(db, user_id, ctx.claims.workspace_id)
    return Envelope(data=MemberRead.model_validate(member))


@router.post("/make-profile-default", response_model=Envelope[ProfileRead])
def make_default(
    body: MakeProfileDefaultRequest,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(require_auth),
) -> Envelope[ProfileRead]:
    """Select the workspace used at the next login."""
    profile = make_profile_default(db, ctx.user.id, body.workspace_id)
    return Envelope(data=ProfileRead.model_validate(profile), message="Default workspace updated")


@router.post("/verify-email", response_model=Envelope[VerificationData])
def verify(
    body: VerifyEmailRequest,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(require_auth),
) -> Envelope[VerificationData]:
    result = verify_email(db, ctx.user.id, body.token)
    return Envelope(
        data=VerificationData.model_validate(result),
        message=_VERIFICATION_MESSAGES[result.status],
    )


@router.post("/resend-verification-email", response_model=Envelope[None])
def resend_verification(
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(require_auth),
) -> Envelope[None]:
    resend_verification_email(db, ctx.user.id)
    return Envelope(message="Verification email sent")
