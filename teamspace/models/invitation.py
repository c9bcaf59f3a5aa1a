"""Invitation model — pending, email-scoped offer to join a workspace."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Enum, ForeignKey, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from teamspace.db.session import Base
from teamspace.models.profile import Role

if TYPE_CHECKING:
    from teamspace.models.user import User
    from teamspace.models.workspace import Workspace


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive timestamps (SQLite drops tzinfo on read)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


class Invitation(Base):
    """Invitation for (email, workspace). Deleted on acceptance or revocation."""

    __tablename__ = "invitations"

    __table_args__ = (
        UniqueConstraint("email", "workspace_id", name="uq_invitations_email_workspace"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    workspace_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("workspaces.id", ondelete="CASCADE"),
        nullable=False,
    )
    role: Mapped[Role] = mapped_column(Enum(Role, name="role"), default=Role.USER, nullable=False)
    token: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    inviter_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False
    )

    workspace: Mapped[Workspace] = relationship("Workspace", back_populates="invitations")
    inviter: Mapped[User] = relationship("User", foreign_keys=[inviter_id])

    def is_expired(self, now: datetime | None = None) -> bool:
        now = now or datetime.now(UTC)
        return as_utc(self.expires_at) < now
