"""Workspace model — tenant container owning member profiles and invitations."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from teamspace.db.session import Base

if TYPE_CHECKING:
    from teamspace.models.invitation import Invitation
    from teamspace.models.profile import Profile

# Name given to workspaces provisioned for accounts that predate workspaces
LEGACY_WORKSPACE_NAME = "My Workspace"


def default_workspace_name(user_name: str) -> str:
    return f"{user_name}'s Workspace"


class Workspace(Base):
    """Workspace (tenant). Deleting it removes its profiles and invitations."""

    __tablename__ = "workspaces"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    owner_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )

    profiles: Mapped[list[Profile]] = relationship(
        "Profile",
        back_populates="workspace",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    invitations: Mapped[list[Invitation]] = relationship(
        "Invitation",
        back_populates="workspace",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
