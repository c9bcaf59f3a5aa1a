"""Authentication service — accounts, credentials and JWT tokens."""

from __future__ import annotations

import logging
import re
import uuid
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from functools import lru_cache
from typing import Optional

import bcrypt as _bcrypt
from jose import JWTError, jwt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from teamspace.config import get_settings
from teamspace.db.session import transaction
from teamspace.errors import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    EmailDeliveryError,
    NotFoundError,
    ValidationError,
)
from teamspace.models.profile import Profile, Role
from teamspace.models.user import User
from teamspace.models.workspace import Workspace, default_workspace_name
from teamspace.services.profiles import (
    create_workspace_with_admin,
    ensure_default_workspace,
    list_profiles,
)
from teamspace.services.verification import issue_verification
from teamspace.services.workspace_access import get_profile

logger = logging.getLogger(__name__)

# JWT configuration
ALGORITHM = "HS256"

# Same wording for unknown email and wrong password
INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"

PASSWORD_MIN_LENGTH = 8
# bcrypt only hashes the first 72 bytes
PASSWORD_MAX_BYTES = 72
_PASSWORD_RULES = (re.compile(r"[a-z]"), re.compile(r"[A-Z]"), re.compile(r"\d"))


@dataclass(frozen=True)
class TokenClaims:
    """Identity and workspace context carried by a bearer token."""

    user_id: uuid.UUID
    profile_id: uuid.UUID
    workspace_id: uuid.UUID
    role: Role
    jti: str


@dataclass
class AuthResult:
    """Identity payload plus a signed bearer token."""

    user: User
    token: str
    profiles: list[Profile]
    current_profile: Profile


@dataclass
class SwitchResult:
    token: str
    workspace: Workspace
    role: Role
    profile_id: uuid.UUID


@dataclass
class MeResult:
    user: User
    profiles: list[Profile]
    current_profile: Profile | None


@dataclass
class Member:
    """A user as listed inside one workspace."""

    id: uuid.UUID
    email: str
    name: str | None
    role: Role
    profile_id: uuid.UUID
    profile_name: str
    joined_at: datetime


# ---------------------------------------------------------------------------
# Credentials
# ---------------------------------------------------------------------------


def normalize_email(email: str) -> str:
    return email.strip().lower()


def validate_password_strength(password: str) -> None:
    """Raise ValidationError unless the password meets the complexity rules."""
    if len(password) < PASSWORD_MIN_LENGTH:
        raise ValidationError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters")
    if len(password.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise ValidationError(f"Password must be at most {PASSWORD_MAX_BYTES} bytes")
    if not all(pattern.search(password) for pattern in _PASSWORD_RULES):
        raise ValidationError(
            "Password must contain at least one uppercase letter, "
            "one lowercase letter, one number"
        )


@lru_cache(maxsize=1)
def _dummy_password_hash() -> bytes:
    return _bcrypt.hashpw(b"timing-equalizer", _bcrypt.gensalt())


def authenticate_user(db: Session, email: str, password: str) -> Optional[User]:
    """Validate credentials and return user, or None if invalid."""
    user = db.query(User).filter(User.email == normalize_email(email)).first()
    if user is None:
        # Spend the same bcrypt work as a real check so timing does not reveal accounts
        _bcrypt.checkpw(password.encode("utf-8"), _dummy_password_hash())
        return None
    if not user.verify_password(password):
        return None
    return user


def _invalid_credentials() -> AuthenticationError:
    return AuthenticationError(INVALID_CREDENTIALS_MESSAGE, code="INVALID_CREDENTIALS")


# ---------------------------------------------------------------------------
# Tokens
# ---------------------------------------------------------------------------


def create_access_token(
    user_id: uuid.UUID,
    profile: Profile,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Create a signed JWT scoped to one profile's workspace and role."""
    settings = get_settings()
    now = datetime.now(UTC)
    expire = now + (expires_delta or timedelta(days=settings.access_token_expire_days))
    role = profile.role.value if isinstance(profile.role, Role) else str(profile.role)
    to_encode = {
        "sub": str(user_id),
        "profile_id": str(profile.id),
        "workspace_id": str(profile.workspace_id),
        "role": role,
        "jti": str(uuid.uuid4()),
        "iat": now,
        "exp": expire,
    }
    return jwt.encode(to_encode, settings.secret_key, algorithm=ALGORITHM)


def decode_access_token(token: str) -> Optional[dict]:
    """Decode and validate a JWT token. Returns payload or None."""
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
        return payload
    except JWTError:
        return None


def parse_token_claims(payload: dict) -> Optional[TokenClaims]:
    """Turn a decoded payload into TokenClaims; None if any claim is missing or malformed."""
    try:
        return TokenClaims(
            user_id=uuid.UUID(str(payload["sub"])),
            profile_id=uuid.UUID(str(payload["profile_id"])),
            workspace_id=uuid.UUID(str(payload["workspace_id"])),
            role=Role(payload["role"]),
            jti=str(payload["jti"]),
        )
    except (KeyError, TypeError, ValueError):
        return None


def get_user_from_token(db: Session, token: str) -> Optional[tuple[User, TokenClaims]]:
    """Resolve a bearer token to (user, claims).

    Returns None if the token is invalid, expired, malformed, or names a user
    that no longer exists.
    """
    payload = decode_access_token(token)
    if payload is None:
        return None
    claims = parse_token_claims(payload)
    if claims is None:
        return None
    user = db.get(User, claims.user_id)
    if user is None:
        return None
    return user, claims


# ---------------------------------------------------------------------------
# Account operations
# ---------------------------------------------------------------------------


def register(db: Session, email: str, password: str, name: str) -> AuthResult:
    """Create an account with its own workspace and default ADMIN profile.

    The user, workspace and profile commit together. The verification email
    is sent afterwards and a delivery failure does not undo the registration.
    """
    validate_password_strength(password)
    email = normalize_email(email)

    if db.query(User).filter(User.email == email).first() is not None:
        raise ConflictError("User with this email already exists", code="USER_EXISTS")

    try:
        with transaction(db):
            user = User(email=email, name=name)
            user.set_password(password)
            db.add(user)
            db.flush()
            profile = create_workspace_with_admin(
                db,
                user,
                default_workspace_name(name),
                profile_name=name,
                is_default=True,
            )
    except IntegrityError as exc:
        raise ConflictError("User with this email already exists", code="USER_EXISTS") from exc

    logger.info("user_registered: user_id=%s workspace_id=%s", user.id, profile.workspace_id)

    try:
        issue_verification(db, user)
    except EmailDeliveryError:
        logger.warning("verification_email_failed: user_id=%s", user.id)

    profiles = list_profiles(db, user.id)
    current = next(p for p in profiles if p.id == profile.id)
    token = create_access_token(user.id, current)
    return AuthResult(user=user, token=token, profiles=profiles, current_profile=current)


def login(
    db: Session,
    email: str,
    password: str,
    workspace_id: Optional[uuid.UUID] = None,
) -> AuthResult:
    """Authenticate and issue a token for the default (or requested) workspace."""
    user = authenticate_user(db, email, password)
    if user is None:
        raise _invalid_credentials()

    default_profile = ensure_default_workspace(db, user)
    profiles = list_profiles(db, user.id)

    target = next((p for p in profiles if p.id == default_profile.id), profiles[0])
    if workspace_id is not None:
        requested = next((p for p in profiles if p.workspace_id == workspace_id), None)
        if requested is not None:
            target = requested

    token = create_access_token(user.id, target)
    logger.info("user_logged_in: user_id=%s workspace_id=%s", user.id, target.workspace_id)
    return AuthResult(user=user, token=token, profiles=profiles, current_profile=target)


def switch_workspace(db: Session, user_id: uuid.UUID, workspace_id: uuid.UUID) -> SwitchResult:
    """Issue a token for another workspace the user belongs to.

    The default flag is left untouched.
    """
    profile = get_profile(db, user_id, workspace_id)
    if profile is None:
        raise AuthorizationError("User is not a member of this workspace")

    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found", code="USER_NOT_FOUND")

    token = create_access_token(user.id, profile)
    return SwitchResult(
        token=token,
        workspace=profile.workspace,
        role=profile.role,
        profile_id=profile.id,
    )


def get_current_user_payload(
    db: Session,
    user: User,
    current_profile_id: Optional[uuid.UUID] = None,
) -> MeResult:
    """Return the user with all profiles and the one the token is scoped to."""
    profiles = list_profiles(db, user.id)
    current = next((p for p in profiles if p.id == current_profile_id), None)
    return MeResult(user=user, profiles=profiles, current_profile=current)


def _member_query(db: Session, workspace_id: uuid.UUID):
    return (
        db.query(Profile, User)
        .join(User, Profile.user_id == User.id)
        .filter(Profile.workspace_id == workspace_id)
    )


def _to_member(profile: Profile, user: User) -> Member:
    return Member(
        id=user.id,
        email=user.email,
        name=user.name,
        role=profile.role,
        profile_id=profile.id,
        profile_name=profile.name,
        joined_at=profile.joined_at,
    )


def list_workspace_users(db: Session, workspace_id: uuid.UUID) -> list[Member]:
    """Members of a workspace, oldest membership first."""
    rows = _member_query(db, workspace_id).order_by(Profile.joined_at.asc()).all()
    return [_to_member(profile, user) for profile, user in rows]


def get_workspace_user(db: Session, user_id: uuid.UUID, workspace_id: uuid.UUID) -> Member:
    """One member of a workspace; users outside the workspace are reported as not found."""
    row = _member_query(db, workspace_id).filter(Profile.user_id == user_id).first()
    if row is None:
        raise NotFoundError("User not found", code="USER_NOT_FOUND")
    profile, user = row
    return _to_member(profile, user)


def create_user(
    db: Session,
    email: str,
    password: str,
    name: Optional[str] = None,
    email_verified: bool = False,
) -> User:
    """Create a bare account with hashed password (no workspace, no email)."""
    validate_password_strength(password)
    user = User(email=normalize_email(email), name=name, email_verified=email_verified)
    user.set_password(password)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user
