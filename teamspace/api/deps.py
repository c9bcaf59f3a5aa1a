"""Shared FastAPI dependencies for API routes."""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from teamspace.db.session import get_db  # re-export
from teamspace.errors import AuthenticationError, AuthorizationError
from teamspace.models.profile import Role
from teamspace.models.user import User
from teamspace.services.auth import TokenClaims, get_user_from_token

__all__ = [
    "AuthContext",
    "get_auth_context",
    "get_db",
    "require_admin",
    "require_auth",
]


@dataclass
class AuthContext:
    """The authenticated user plus the workspace scope of their token."""

    user: User
    claims: TokenClaims


def get_auth_context(
    db: Session = Depends(get_db),
    authorization: str | None = Header(None),
) -> AuthContext | None:
    """Return the caller's AuthContext from ``Authorization: Bearer <token>``, or None."""
    if not authorization or not authorization.startswith("Bearer "):
        return None
    token = authorization[len("Bearer ") :].strip()
    if not token:
        return None

    resolved = get_user_from_token(db, token)
    if resolved is None:
        return None
    user, claims = resolved
    return AuthContext(user=user, claims=claims)


def require_auth(ctx: AuthContext | None = Depends(get_auth_context)) -> AuthContext:
    """Dependency that requires a valid bearer token (401 otherwise)."""
    if ctx is None:
        raise AuthenticationError("Not authenticated")
    return ctx


def require_admin(ctx: AuthContext = Depends(require_auth)) -> AuthContext:
    """Require the token to be scoped to an ADMIN profile.

    Services re-check the role against the database before mutating.
    """
    if ctx.claims.role != Role.ADMIN:
        raise AuthorizationError("Admin role required")
    return ctx
