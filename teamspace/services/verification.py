"""Email verification: token minting, verification and resend."""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Literal
from uuid import UUID

from sqlalchemy.orm import Session

from teamspace.config import get_settings
from teamspace.db.session import transaction
from teamspace.errors import NotFoundError, RateLimitError, ValidationError
from teamspace.models.profile import Profile
from teamspace.models.user import User
from teamspace.models.user_verification import UserVerification
from teamspace.services.email_service import send_verification_email
from teamspace.services.rate_limits import check_verification_rate_limit

logger = logging.getLogger(__name__)

VerificationStatus = Literal["verified", "already_verified", "reverification_sent"]


@dataclass
class VerificationResult:
    """Outcome of verify_email. ``reverification_sent`` is not a failure."""

    status: VerificationStatus


def _mint_token(db: Session, user: User) -> UserVerification:
    """Add a fresh verification token for the user (no commit)."""
    hours = get_settings().verification_token_expire_hours
    record = UserVerification(
        user_id=user.id,
        token=secrets.token_urlsafe(32),
        expires_at=datetime.now(UTC) + timedelta(hours=hours),
    )
    db.add(record)
    return record


def _dispatch(user: User, record: UserVerification) -> None:
    """Email the token. EmailDeliveryError propagates to the caller."""
    send_verification_email(user.email, user.name or user.email, record.token)


def issue_verification(db: Session, user: User) -> UserVerification:
    """Persist a new verification token and email it to the user."""
    with transaction(db):
        record = _mint_token(db, user)
    db.refresh(record)
    _dispatch(user, record)
    logger.info("verification_issued: user_id=%s", user.id)
    return record


def verify_email(db: Session, user_id: UUID, token: str) -> VerificationResult:
    """Consume a verification token for the user.

    Already-verified accounts short-circuit before any token lookup. An expired
    token is deleted and replaced by a newly emailed one; a valid token marks
    the account verified and every outstanding token for it is deleted.
    """
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found", code="USER_NOT_FOUND")

    if user.email_verified:
        return VerificationResult(status="already_verified")

    record = (
        db.query(UserVerification)
        .filter(
            UserVerification.token == token,
            UserVerification.user_id == user.id,
        )
        .first()
    )
    if record is None:
        raise ValidationError(
            "Invalid verification token",
            code="INVALID_VERIFICATION_TOKEN",
        )

    if record.is_expired():
        with transaction(db):
            db.delete(record)
            replacement = _mint_token(db, user)
        db.refresh(replacement)
        logger.info("verification_token_rotated: user_id=%s", user.id)
        _dispatch(user, replacement)
        return VerificationResult(status="reverification_sent")

    with transaction(db):
        user.email_verified = True
        db.query(Profile).filter(Profile.user_id == user.id).update(
            {Profile.is_verified: True}, synchronize_session="fetch"
        )
        db.query(UserVerification).filter(UserVerification.user_id == user.id).delete(
            synchronize_session="fetch"
        )
    logger.info("email_verified: user_id=%s", user.id)
    return VerificationResult(status="verified")


def resend_verification_email(db: Session, user_id: UUID) -> UserVerification:
    """Mint and send another verification token, subject to the hourly limit."""
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found", code="USER_NOT_FOUND")
    if user.email_verified:
        raise ValidationError("Email is already verified", code="EMAIL_ALREADY_VERIFIED")
    if not check_verification_rate_limit(db, user.id):
        raise RateLimitError("Too many verification emails requested. Try again later.")
    return issue_verification(db, user)
