"""Authentication and account schemas."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from teamspace.models.profile import Role


class RegisterRequest(BaseModel):
    """Schema for account registration."""

    email: EmailStr
    # bcrypt only hashes the first 72 bytes
    password: str = Field(..., min_length=1, max_length=72)
    name: str = Field(..., min_length=1, max_length=255)


class LoginRequest(BaseModel):
    """Schema for login credentials."""

    email: EmailStr
    password: str = Field(..., min_length=1, max_length=72)
    workspace_id: uuid.UUID | None = None


class SwitchWorkspaceRequest(BaseModel):
    workspace_id: uuid.UUID


class MakeProfileDefaultRequest(BaseModel):
    workspace_id: uuid.UUID


class VerifyEmailRequest(BaseModel):
    token: str = Field(..., min_length=1, max_length=255)


class UserRead(BaseModel):
    """Schema for reading user info (response)."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    email: str
    name: str | None
    email_verified: bool
    created_at: datetime


class WorkspaceSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str


class ProfileRead(BaseModel):
    """A membership as seen by its owner."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    workspace_id: uuid.UUID
    name: str
    role: Role
    is_default: bool
    joined_at: datetime
    workspace: WorkspaceSummary


class MemberRead(BaseModel):
    """A workspace member as seen by other members."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    email: str
    name: str | None
    role: Role
    profile_id: uuid.UUID
    profile_name: str
    joined_at: datetime


class AuthData(BaseModel):
    """Identity payload returned by register, login and signup-acceptance."""

    model_config = ConfigDict(from_attributes=True)

    user: UserRead
    token: str
    token_type: str = "bearer"
    profiles: list[ProfileRead]
    current_profile: ProfileRead


class MeData(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user: UserRead
    profiles: list[ProfileRead]
    current_profile: ProfileRead | None


class SwitchWorkspaceData(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    token: str
    token_type: str = "bearer"
    workspace: WorkspaceSummary
    role: Role
    profile_id: uuid.UUID


class VerificationData(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    status: Literal["verified", "already_verified", "reverification_sent"]
