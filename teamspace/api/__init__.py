"""API routes."""

from teamspace.api.auth import router as auth_router
from teamspace.api.invitations import router as invitations_router
from teamspace.api.workspaces import router as workspaces_router

__all__ = ["auth_router", "invitations_router", "workspaces_router"]
