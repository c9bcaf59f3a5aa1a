"""Invitation schemas."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from teamspace.models.profile import Role
from teamspace.schemas.auth import ProfileRead


class InvitationCreate(BaseModel):
    email: EmailStr
    role: Role = Role.USER


class InvitationAccept(BaseModel):
    token: str = Field(..., min_length=1, max_length=255)


class InvitationSignupAccept(BaseModel):
    """Acceptance without a bearer token; creates the account when it does not exist."""

    token: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1, max_length=72)
    name: str | None = Field(None, min_length=1, max_length=255)


class InviterRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str | None
    email: str


class InvitationRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    email: str
    workspace_id: uuid.UUID
    role: Role
    token: str
    expires_at: datetime
    created_at: datetime
    inviter: InviterRead


class InvitationAcceptData(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    workspace_id: uuid.UUID
    profile: ProfileRead
