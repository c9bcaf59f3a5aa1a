"""UserVerification model — single-use email verification challenge."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from teamspace.db.session import Base
from teamspace.models.invitation import as_utc

if TYPE_CHECKING:
    from teamspace.models.user import User


class UserVerification(Base):
    """Email verification token. Removed on success or when rotated after expiry."""

    __tablename__ = "user_verifications"

    __table_args__ = (
        Index("ix_user_verifications_user_id_expires_at", "user_id", "expires_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    token: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False
    )

    user: Mapped[User] = relationship("User", back_populates="verifications")

    def is_expired(self, now: datetime | None = None) -> bool:
        now = now or datetime.now(UTC)
        return as_utc(self.expires_at) < now
