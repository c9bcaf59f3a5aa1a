"""Per-user rate limit for verification email sends."""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from teamspace.config import get_settings
from teamspace.models.user_verification import UserVerification

logger = logging.getLogger(__name__)


def check_verification_rate_limit(db: Session, user_id: UUID) -> bool:
    """Return True if the user may receive another verification email.

    Counts verification tokens minted for the user in the last hour.
    Disabled when VERIFICATION_RESEND_LIMIT_PER_HOUR is 0 or negative.
    """
    limit = getattr(
        get_settings(),
        "verification_resend_limit_per_hour",
        0,
    )
    if limit <= 0:
        return True

    cutoff = datetime.now(UTC) - timedelta(hours=1)
    count = (
        db.scalar(
            select(func.count(UserVerification.id)).where(
                UserVerification.user_id == user_id,
                UserVerification.created_at >= cutoff,
            )
        )
        or 0
    )

    if count >= limit:
        logger.warning(
            "Rate limit exceeded: user_id=%s verification_emails=%d limit=%d",
            user_id,
            count,
            limit,
        )
        return False
    return True
