"""Profile model — a user's membership in one workspace."""

from __future__ import annotations

import enum
import uuid
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, Index, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from teamspace.db.session import Base

if TYPE_CHECKING:
    from teamspace.models.user import User
    from teamspace.models.workspace import Workspace


class Role(str, enum.Enum):
    """Workspace-scoped role carried by a profile and by invitations."""

    ADMIN = "ADMIN"
    USER = "USER"


class Profile(Base):
    """Membership record for (workspace, user).

    A user holds at most one profile per workspace. Across a user's profiles at
    most one has is_default=True; services keep that true by clearing every
    sibling flag before setting one, inside the same transaction.
    """

    __tablename__ = "profiles"

    __table_args__ = (
        UniqueConstraint("workspace_id", "user_id", name="uq_profiles_workspace_user"),
        Index("ix_profiles_user_id", "user_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    workspace_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("workspaces.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[Role] = mapped_column(
        Enum(Role, name="role"),
        default=Role.USER,
        nullable=False,
    )
    joined_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False
    )
    is_verified: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_default: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    user: Mapped[User] = relationship("User", back_populates="profiles")
    workspace: Mapped[Workspace] = relationship("Workspace", back_populates="profiles")
