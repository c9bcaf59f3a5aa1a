"""Pydantic schemas for request/response validation."""

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
    UserRead,
    VerificationData,
    VerifyEmailRequest,
    WorkspaceSummary,
)
from teamspace.schemas.common import Envelope
from teamspace.schemas.invitation import (
    InvitationAccept,
    InvitationAcceptData,
    InvitationCreate,
    InvitationRead,
    InvitationSignupAccept,
    InviterRead,
)
from teamspace.schemas.workspace import WorkspaceCreate, WorkspaceRead, WorkspaceUpdate

__all__ = [
    "AuthData",
    "Envelope",
    "InvitationAccept",
    "InvitationAcceptData",
    "InvitationCreate",
    "InvitationRead",
    "InvitationSignupAccept",
    "InviterRead",
    "LoginRequest",
    "MakeProfileDefaultRequest",
    "MeData",
    "MemberRead",
    "ProfileRead",
    "RegisterRequest",
    "SwitchWorkspaceData",
    "SwitchWorkspaceRequest",
    "UserRead",
    "VerificationData",
    "VerifyEmailRequest",
    "WorkspaceCreate",
    "WorkspaceRead",
    "WorkspaceSummary",
]
